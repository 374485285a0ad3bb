# util/enums.py
from enum import Enum
from typing import NamedTuple, Optional
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ProviderName(str, Enum):
    OPENAI = "OpenAI"
    GOOGLE = "Google"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["ProviderName"]:
        """
        Case-insensitive lookup. 'gemini' is accepted as Google.
        Returns None for anything else so callers decide how to fail.
        """
        key = (raw or "").strip().lower()
        return _PROVIDER_ALIASES.get(key)


_PROVIDER_ALIASES = {
    "openai": ProviderName.OPENAI,
    "google": ProviderName.GOOGLE,
    "gemini": ProviderName.GOOGLE,
}


class JobStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    BAD_REQUEST = ErrorInfo(
        "Missing or invalid request fields.", status.HTTP_400_BAD_REQUEST
    )
    INVALID_IMAGE = ErrorInfo("Invalid base64 image data.", status.HTTP_400_BAD_REQUEST)
    UNSUPPORTED_PROVIDER = ErrorInfo(
        "Unsupported provider", status.HTTP_400_BAD_REQUEST
    )
    JOB_NOT_FOUND = ErrorInfo("Job not found.", status.HTTP_404_NOT_FOUND)
    PROVIDER_REJECTED = ErrorInfo(
        "Provider rejected the request.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    PROVIDER_TIMEOUT = ErrorInfo(
        "Provider request timed out.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    PROVIDER_UNAVAILABLE = ErrorInfo(
        "Could not reach provider.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    DUPLICATE_JOB = ErrorInfo(
        "Job id already exists.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    INTERNAL_ERROR = ErrorInfo(
        "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
