# controller/validation_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from controller.controller_dependencies import get_validation_service
from model.api import (
    CheckKeyResponse,
    ErrorResponse,
    ModelsResponse,
    StartValidationResponse,
    ValidateKeyRequest,
    ValidationStatusResponse,
)
from service.key_validation_service import KeyValidationService
from util.constants import InternalURIs
from util.errors import BadRequest

validation_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


@validation_router.post(
    InternalURIs.START_VALIDATION,
    response_model=StartValidationResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_validation(
    payload: ValidateKeyRequest,
    service: KeyValidationService = Depends(get_validation_service),
) -> StartValidationResponse:
    job_id = await service.start_validation(payload.apiKey, payload.provider)
    return StartValidationResponse(jobId=job_id)


@validation_router.get(
    InternalURIs.GET_VALIDATION_STATUS,
    response_model=ValidationStatusResponse,
    response_model_exclude_none=True,
)
async def get_validation_status(
    jobId: Optional[str] = Query(default=None),
    service: KeyValidationService = Depends(get_validation_service),
) -> ValidationStatusResponse:
    if not jobId:
        raise BadRequest("Missing jobId parameter.")
    job = await service.get_status(jobId)
    return ValidationStatusResponse.from_job(job)


@validation_router.post(InternalURIs.VALIDATE_KEY, response_model=ModelsResponse)
async def validate_key(
    payload: ValidateKeyRequest,
    service: KeyValidationService = Depends(get_validation_service),
) -> ModelsResponse:
    models = await service.validate_key(payload.apiKey, payload.provider)
    return ModelsResponse(models=models)


@validation_router.post(InternalURIs.CHECK_KEY, response_model=CheckKeyResponse)
async def check_key(
    payload: ValidateKeyRequest,
    service: KeyValidationService = Depends(get_validation_service),
) -> CheckKeyResponse:
    return CheckKeyResponse(valid=await service.check_key(payload.apiKey, payload.provider))
