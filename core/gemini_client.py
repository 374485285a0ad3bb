# core/gemini_client.py
import logging
from typing import Any, Dict, Optional
import httpx
from fastapi import status
from config.settings import settings
from core.http_provider import (
    MALFORMED_RESPONSE,
    ClientFactory,
    HttpProvider,
    error_message,
    json_body,
)
from util.constants import (
    ExternalURIs,
    GOOGLE_GENERATE_METHOD,
    GOOGLE_MODEL_MARKER,
    GOOGLE_MODEL_PREFIX,
)
from util.enums import ProviderName
from util.errors import InternalError, ProviderRejected
from util.timing import timed

logger = logging.getLogger(__name__)

INVALID_KEY = "Invalid Google API Key or API is not enabled."
CHECK_MODEL_MISSING = (
    "Key check model '{model}' is not available; set GOOGLE_CHECK_MODEL to a current Gemini model."
)
# Safety valve for nextPageToken loops
MAX_PAGES = 10


def filter_models(entries: list[Dict[str, Any]]) -> list[str]:
    """
    Keep Gemini models that can generateContent, drop the 'models/' prefix,
    newest-looking first.
    """
    out: list[str] = []
    for m in entries:
        name = str(m.get("name") or "")
        methods = m.get("supportedGenerationMethods") or []
        if GOOGLE_GENERATE_METHOD in methods and GOOGLE_MODEL_MARKER in name:
            out.append(name.removeprefix(GOOGLE_MODEL_PREFIX))
    return sorted(out, reverse=True)


def _is_invalid_key(res: httpx.Response) -> bool:
    # Google answers a bad key with 400 + reason API_KEY_INVALID
    if res.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        return True
    if res.status_code != status.HTTP_400_BAD_REQUEST:
        return False
    try:
        body = res.json()
    except ValueError:
        return False
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, str):
        return "api key" in err.lower()
    if not isinstance(err, dict):
        return False
    for detail in err.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason") == "API_KEY_INVALID":
            return True
    return "api key" in str(err.get("message", "")).lower()


class GeminiProvider(HttpProvider):
    name = ProviderName.GOOGLE.value

    def __init__(
        self,
        base_url: str = settings.GOOGLE_API_URL,
        timeout: float = settings.GENERATION_TIMEOUT_SECONDS,
        client_factory: Optional[ClientFactory] = None,
        max_tokens: int = settings.PROMPT_MAX_TOKENS,
        check_model: str = settings.GOOGLE_CHECK_MODEL,
    ) -> None:
        super().__init__(base_url, timeout, client_factory)
        self._max_tokens = max_tokens
        self._check_model = check_model

    @staticmethod
    def _headers(api_key: str) -> dict:
        return {"x-goog-api-key": api_key, "content-type": "application/json"}

    async def list_models(self, api_key: str) -> list[str]:
        entries: list[Dict[str, Any]] = []
        params: Dict[str, Any] = {"pageSize": 1000}
        with timed(logger, "gemini.models"):
            for _ in range(MAX_PAGES):
                res = await self._send(
                    "GET",
                    ExternalURIs.GOOGLE_MODELS,
                    headers=self._headers(api_key),
                    params=params,
                )
                if res.status_code // 100 != 2:
                    logger.warning("gemini.models.rejected status=%d", res.status_code)
                    raise ProviderRejected(
                        error_message(res, INVALID_KEY), res.status_code
                    )
                data = json_body(res)
                page = data.get("models", [])
                if not isinstance(page, list):
                    raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
                entries.extend(m for m in page if isinstance(m, dict))
                token = data.get("nextPageToken")
                if not token:
                    break
                params = {"pageSize": 1000, "pageToken": token}

        models = filter_models(entries)
        logger.info("gemini.models.ok total=%d kept=%d", len(entries), len(models))
        return models

    async def validate_credential(self, api_key: str) -> bool:
        # countTokens is free and still authenticates the key
        payload = {"contents": [{"parts": [{"text": "ping"}]}]}
        res = await self._send(
            "POST",
            ExternalURIs.GOOGLE_COUNT_TOKENS.format(model=self._check_model),
            headers=self._headers(api_key),
            json=payload,
        )
        if res.status_code // 100 == 2:
            return True
        if _is_invalid_key(res):
            logger.warning("gemini.key.invalid status=%d", res.status_code)
            return False
        if res.status_code == status.HTTP_404_NOT_FOUND:
            # Retired or misspelled check model; says nothing about the key
            logger.error("gemini.key.check_model_missing model=%s", self._check_model)
            raise InternalError(
                details=CHECK_MODEL_MISSING.format(model=self._check_model)
            )
        logger.error("gemini.key.unexpected status=%d", res.status_code)
        raise ProviderRejected(error_message(res, INVALID_KEY), res.status_code)

    async def generate_from_image(
        self,
        prompt: str,
        api_key: str,
        model: str,
        image_base64: str,
        mime_type: str,
    ) -> str:
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {"inline_data": {"mime_type": mime_type, "data": image_base64}},
                    ]
                }
            ],
            "generationConfig": {"maxOutputTokens": self._max_tokens},
        }
        model_id = model.removeprefix(GOOGLE_MODEL_PREFIX)
        with timed(logger, "gemini.generate", model=model_id):
            res = await self._send(
                "POST",
                ExternalURIs.GOOGLE_GENERATE.format(model=model_id),
                headers=self._headers(api_key),
                json=payload,
            )
        if res.status_code // 100 != 2:
            raise ProviderRejected(
                error_message(res, f"Gemini request failed ({res.status_code})."),
                res.status_code,
            )

        data = json_body(res)
        feedback = data.get("promptFeedback")
        blocked = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if blocked:
            raise ProviderRejected(f"Prompt blocked by provider: {blocked}", res.status_code)
        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
        except (KeyError, IndexError, TypeError):
            raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
        return text.strip()
