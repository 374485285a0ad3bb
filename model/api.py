# model/api.py
from typing import Optional
from pydantic import BaseModel, Field
from model.job import Job
from util.enums import JobStatus


class ValidateKeyRequest(BaseModel):
    apiKey: str = Field(min_length=1)
    # Free-form on purpose: unknown names become a job error, not a 400
    provider: str = Field(min_length=1)


class StartValidationResponse(BaseModel):
    jobId: str


class ValidationStatusResponse(BaseModel):
    id: str
    status: JobStatus
    models: Optional[list[str]] = None
    message: Optional[str] = None

    @classmethod
    def from_job(cls, job: Job) -> "ValidationStatusResponse":
        return cls(id=job.id, status=job.status, models=job.models, message=job.message)


class ModelsResponse(BaseModel):
    models: list[str]


class CheckKeyResponse(BaseModel):
    valid: bool


class GeneratePromptRequest(BaseModel):
    systemPrompt: str = Field(min_length=1)
    apiKey: str = Field(min_length=1)
    modelName: str = Field(min_length=1)
    imageBase64: str = Field(min_length=1)
    provider: str = Field(min_length=1)


class GeneratePromptResponse(BaseModel):
    prompt: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
