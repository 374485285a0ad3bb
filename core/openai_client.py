# core/openai_client.py
import logging
from typing import Optional
from fastapi import status
from config.settings import settings
from core.http_provider import (
    MALFORMED_RESPONSE,
    ClientFactory,
    HttpProvider,
    error_message,
    json_body,
)
from util.constants import ExternalURIs, OPENAI_MODEL_PREFIX
from util.enums import ProviderName
from util.errors import ProviderRejected
from util.timing import timed

logger = logging.getLogger(__name__)

INVALID_KEY = "Invalid OpenAI API Key."


def filter_models(ids: list[str]) -> list[str]:
    """
    Keep chat-capable ids and put the newest-looking first.
    Plain string sort, so 'gpt-4-turbo' > 'gpt-4' > 'gpt-3.5'.
    """
    return sorted((i for i in ids if i.startswith(OPENAI_MODEL_PREFIX)), reverse=True)


class OpenAIProvider(HttpProvider):
    name = ProviderName.OPENAI.value

    def __init__(
        self,
        base_url: str = settings.OPENAI_API_URL,
        timeout: float = settings.GENERATION_TIMEOUT_SECONDS,
        client_factory: Optional[ClientFactory] = None,
        max_tokens: int = settings.PROMPT_MAX_TOKENS,
    ) -> None:
        super().__init__(base_url, timeout, client_factory)
        self._max_tokens = max_tokens

    @staticmethod
    def _headers(api_key: str) -> dict:
        return {
            "Authorization": f"Bearer {api_key}",
            "content-type": "application/json",
        }

    async def list_models(self, api_key: str) -> list[str]:
        with timed(logger, "openai.models"):
            res = await self._send(
                "GET", ExternalURIs.OPENAI_MODELS, headers=self._headers(api_key)
            )
        if res.status_code // 100 != 2:
            logger.warning("openai.models.rejected status=%d", res.status_code)
            raise ProviderRejected(error_message(res, INVALID_KEY), res.status_code)

        data = json_body(res)
        try:
            ids = [str(m["id"]) for m in data["data"]]
        except (KeyError, TypeError):
            raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
        models = filter_models(ids)
        logger.info("openai.models.ok total=%d kept=%d", len(ids), len(models))
        return models

    async def validate_credential(self, api_key: str) -> bool:
        # Listing models is the cheapest authenticated call OpenAI offers.
        res = await self._send(
            "GET", ExternalURIs.OPENAI_MODELS, headers=self._headers(api_key)
        )
        if res.status_code // 100 == 2:
            return True
        if res.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            logger.warning("openai.key.invalid status=%d", res.status_code)
            return False
        logger.error("openai.key.unexpected status=%d", res.status_code)
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
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{mime_type};base64,{image_base64}"
                            },
                        },
                    ],
                }
            ],
            "max_tokens": self._max_tokens,
        }
        with timed(logger, "openai.generate", model=model):
            res = await self._send(
                "POST",
                ExternalURIs.OPENAI_CHAT,
                headers=self._headers(api_key),
                json=payload,
            )
        if res.status_code // 100 != 2:
            raise ProviderRejected(
                error_message(res, f"OpenAI request failed ({res.status_code})."),
                res.status_code,
            )

        data = json_body(res)
        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
        return str(text).strip()
