# controller/prompt_controller.py
from fastapi import APIRouter, Depends
from controller.controller_dependencies import get_prompt_service
from model.api import ErrorResponse, GeneratePromptRequest, GeneratePromptResponse
from service.prompt_service import PromptService
from util.constants import InternalURIs

prompt_router = APIRouter(
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


@prompt_router.post(InternalURIs.GENERATE_PROMPT, response_model=GeneratePromptResponse)
async def generate_prompt(
    payload: GeneratePromptRequest,
    service: PromptService = Depends(get_prompt_service),
) -> GeneratePromptResponse:
    prompt = await service.generate_prompt(
        system_prompt=payload.systemPrompt,
        api_key=payload.apiKey,
        model_name=payload.modelName,
        image_base64=payload.imageBase64,
        provider=payload.provider,
    )
    return GeneratePromptResponse(prompt=prompt)
