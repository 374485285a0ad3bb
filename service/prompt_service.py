# service/prompt_service.py
import logging
from core.images import decode_image
from core.providers import ProviderRegistry
from util.errors import ProviderRejected

logger = logging.getLogger(__name__)

EMPTY_OUTPUT = "Provider returned an empty response."


class PromptService:
    """
    Image-to-text prompt generation. The caller names the provider; the
    model name is passed through untouched.
    """

    def __init__(self, providers: ProviderRegistry) -> None:
        self._providers = providers

    async def generate_prompt(
        self,
        *,
        system_prompt: str,
        api_key: str,
        model_name: str,
        image_base64: str,
        provider: str,
    ) -> str:
        upstream = self._providers.resolve(provider)
        image, mime_type = decode_image(image_base64)
        text = await upstream.generate_from_image(
            system_prompt, api_key, model_name, image, mime_type
        )
        if not text:
            logger.warning("prompt.empty provider=%s model=%s", upstream.name, model_name)
            raise ProviderRejected(EMPTY_OUTPUT)
        logger.info(
            "prompt.ok provider=%s model=%s chars=%d", upstream.name, model_name, len(text)
        )
        return text
