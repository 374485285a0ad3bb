# core/http_provider.py
import logging
from typing import Any, Callable, Dict, Optional
import httpx
from util.errors import ProviderRejected, ProviderTimeout, ProviderUnavailable

logger = logging.getLogger(__name__)

ClientFactory = Callable[[float], httpx.AsyncClient]

MALFORMED_RESPONSE = "Malformed response from provider."


def default_client_factory(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=min(5.0, timeout)))


def error_message(res: httpx.Response, fallback: str) -> str:
    """
    Pull `error.message` out of an OpenAI/Google style error body.
    Falls back when the body is not JSON or has no message.
    """
    try:
        data = res.json()
    except ValueError:
        return fallback
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str) and err:
        return err
    return fallback


def json_body(res: httpx.Response) -> Dict[str, Any]:
    try:
        data = res.json()
    except ValueError:
        raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
    if not isinstance(data, dict):
        raise ProviderRejected(MALFORMED_RESPONSE, res.status_code)
    return data


class HttpProvider:
    """
    Shared plumbing for REST providers: one short-lived AsyncClient per call,
    transport failures mapped onto the app error taxonomy.
    """

    name: str = "provider"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._client_factory = client_factory or default_client_factory

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client_factory(self._timeout) as client:
                return await client.request(method, self._url(path), **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("%s.request.timeout path=%s err=%s", self.name, path, type(e).__name__)
            raise ProviderTimeout()
        except httpx.RequestError as e:
            logger.error("%s.request.error path=%s err=%s", self.name, path, type(e).__name__)
            raise ProviderUnavailable(details=f"{type(e).__name__} contacting {self.name}")
