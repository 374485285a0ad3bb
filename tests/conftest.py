# tests/conftest.py
import asyncio
import time
from typing import Callable, Optional
import httpx
import pytest
from fastapi.testclient import TestClient
from core.providers import ProviderRegistry
from main import create_app
from repository.job_repository import JobRepository
from service.key_validation_service import KeyValidationService
from util.enums import ProviderName


class FakeProvider:
    """
    In-process stand-in for an upstream provider.
    `gate` lets a test hold the call open until it decides to release it.
    """

    def __init__(
        self,
        name: str,
        models: Optional[list[str]] = None,
        error: Optional[Exception] = None,
        valid: bool = True,
        prompt: str = "a cat on a sofa",
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.models = models or []
        self.error = error
        self.valid = valid
        self.prompt = prompt
        self.delay = delay
        self.gate: Optional[asyncio.Event] = None
        self.calls: list[tuple] = []

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def list_models(self, api_key: str) -> list[str]:
        self.calls.append(("list_models", api_key))
        await self._wait()
        return list(self.models)

    async def validate_credential(self, api_key: str) -> bool:
        self.calls.append(("validate_credential", api_key))
        await self._wait()
        return self.valid

    async def generate_from_image(self, prompt, api_key, model, image_base64, mime_type):
        self.calls.append(("generate_from_image", prompt, model, mime_type))
        await self._wait()
        return self.prompt


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def openai_fake() -> FakeProvider:
    return FakeProvider(ProviderName.OPENAI.value, models=["gpt-4o", "gpt-4"])


@pytest.fixture
def google_fake() -> FakeProvider:
    return FakeProvider(ProviderName.GOOGLE.value, models=["gemini-1.5-pro"])


@pytest.fixture
def registry(openai_fake, google_fake) -> ProviderRegistry:
    return ProviderRegistry(
        {ProviderName.OPENAI: openai_fake, ProviderName.GOOGLE: google_fake}
    )


@pytest.fixture
def jobs() -> JobRepository:
    return JobRepository(ttl_seconds=60)


@pytest.fixture
def service(jobs, registry) -> KeyValidationService:
    return KeyValidationService(jobs, registry, timeout=1.0)


@pytest.fixture
def client(registry, jobs):
    app = create_app(providers=registry, jobs=jobs)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def lenient_client(registry, jobs):
    """Client that returns 500 responses instead of re-raising server errors."""
    app = create_app(providers=registry, jobs=jobs)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def mock_client_factory() -> Callable[[Callable], Callable[[float], httpx.AsyncClient]]:
    """Build a ClientFactory whose requests go to `handler` instead of the network."""

    def make(handler):
        def factory(timeout: float) -> httpx.AsyncClient:
            return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=timeout)

        return factory

    return make


@pytest.fixture
def wait_for_terminal(client):
    """Poll the status endpoint until the job leaves pending (or give up)."""

    def poll(job_id: str, deadline: float = 2.0) -> dict:
        end = time.monotonic() + deadline
        while True:
            res = client.get("/api/get-validation-status", params={"jobId": job_id})
            body = res.json()
            if body.get("status") != "pending" or time.monotonic() > end:
                return body
            time.sleep(0.01)

    return poll
