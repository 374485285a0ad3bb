# util/errors.py
from typing import Optional
from fastapi import HTTPException
from util.enums import ErrorInfo, ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    # str(err) is the most specific text available (details win over message).
    info: ErrorInfo = ErrorMessage.INTERNAL_ERROR.value

    def __init__(
        self,
        message: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        self.message = message or self.info.message
        self.details = details
        super().__init__(
            status_code=http_status or self.info.http_status, detail=self.message
        )

    def __str__(self) -> str:
        return self.details or self.message

    def to_payload(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class BadRequest(AppError):
    info = ErrorMessage.BAD_REQUEST.value


class NotFound(AppError):
    info = ErrorMessage.JOB_NOT_FOUND.value


class UnsupportedProvider(AppError):
    info = ErrorMessage.UNSUPPORTED_PROVIDER.value

    def __init__(self, provider: Optional[str]) -> None:
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class ProviderRejected(AppError):
    """Upstream answered non-2xx, with an error payload, or with junk."""

    info = ErrorMessage.PROVIDER_REJECTED.value

    def __init__(self, message: Optional[str] = None, upstream_status: int = 0) -> None:
        self.upstream_status = upstream_status
        super().__init__(details=message or self.info.message)


class ProviderTimeout(AppError):
    info = ErrorMessage.PROVIDER_TIMEOUT.value


class ProviderUnavailable(AppError):
    info = ErrorMessage.PROVIDER_UNAVAILABLE.value


class DuplicateJobId(AppError):
    info = ErrorMessage.DUPLICATE_JOB.value


class InternalError(AppError):
    info = ErrorMessage.INTERNAL_ERROR.value
