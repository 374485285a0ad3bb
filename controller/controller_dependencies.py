# controller/controller_dependencies.py
from fastapi import Request
from service.key_validation_service import KeyValidationService
from service.prompt_service import PromptService


# Services live on app.state (built in the lifespan) so every request
# shares one job store and one set of background tasks.
def get_validation_service(request: Request) -> KeyValidationService:
    return request.app.state.validation_service


def get_prompt_service(request: Request) -> PromptService:
    return request.app.state.prompt_service
