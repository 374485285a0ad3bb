# core/providers.py
from typing import Dict, Mapping, Optional, Protocol
from core.gemini_client import GeminiProvider
from core.http_provider import ClientFactory
from core.openai_client import OpenAIProvider
from util.enums import ProviderName
from util.errors import UnsupportedProvider


class Provider(Protocol):
    """Capability set every upstream AI service must offer."""

    name: str

    async def list_models(self, api_key: str) -> list[str]: ...

    async def validate_credential(self, api_key: str) -> bool: ...

    async def generate_from_image(
        self,
        prompt: str,
        api_key: str,
        model: str,
        image_base64: str,
        mime_type: str,
    ) -> str: ...


class ProviderRegistry:
    def __init__(self, providers: Mapping[ProviderName, Provider]) -> None:
        self._providers: Dict[ProviderName, Provider] = dict(providers)

    def resolve(self, raw_name: Optional[str]) -> Provider:
        name = ProviderName.parse(raw_name)
        if name is None or name not in self._providers:
            raise UnsupportedProvider(raw_name)
        return self._providers[name]

    def names(self) -> list[str]:
        return [n.value for n in self._providers]


def build_provider_registry(
    client_factory: Optional[ClientFactory] = None,
) -> ProviderRegistry:
    return ProviderRegistry(
        {
            ProviderName.OPENAI: OpenAIProvider(client_factory=client_factory),
            ProviderName.GOOGLE: GeminiProvider(client_factory=client_factory),
        }
    )
