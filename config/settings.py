# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    HOST: str = Field(default="127.0.0.1", validation_alias="HOST")
    PORT: int = Field(default=8000, validation_alias="PORT")

    # CORS
    ALLOWED_ORIGIN: str = Field(
        default="http://localhost:5173", validation_alias="ALLOWED_ORIGIN"
    )

    # Jobs
    JOB_TTL_SECONDS: int = Field(default=15 * 60, validation_alias="JOB_TTL_SECONDS")

    # Upstream timeouts (seconds)
    VALIDATION_TIMEOUT_SECONDS: float = Field(
        default=8.0, validation_alias="VALIDATION_TIMEOUT_SECONDS"
    )
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="GENERATION_TIMEOUT_SECONDS"
    )

    # External URLS:
    OPENAI_API_URL: str = Field(
        default="https://api.openai.com/v1", validation_alias="OPENAI_API_URL"
    )
    GOOGLE_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias="GOOGLE_API_URL",
    )

    # Provider knobs
    PROMPT_MAX_TOKENS: int = Field(default=300, validation_alias="PROMPT_MAX_TOKENS")
    GOOGLE_CHECK_MODEL: str = Field(
        default="gemini-2.5-flash", validation_alias="GOOGLE_CHECK_MODEL"
    )

    # Logging knobs
    LOGGER_NAME: str = "prompt-lab"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=10 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
