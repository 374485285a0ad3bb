# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
import routes
from config.settings import settings
from core.providers import ProviderRegistry, build_provider_registry
from repository.job_repository import JobRepository
from service.key_validation_service import KeyValidationService
from service.prompt_service import PromptService
from util.constants import InternalURIs
from util.enums import Color, Environment, ErrorMessage
from util.errors import AppError, InternalError
from util.logger import init_logger

logger = logging.getLogger(__name__)


def _validation_summary(exc: RequestValidationError) -> tuple[str, str]:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return "Invalid JSON in request body.", ""
    fields = []
    for e in errors:
        loc = [str(x) for x in e.get("loc", ()) if x not in ("body", "query")]
        fields.append(f"{'.'.join(loc) or 'body'}: {e.get('msg', '')}")
    return ErrorMessage.BAD_REQUEST.value.message, "; ".join(fields)


def register_exception_handlers(app: FastAPI) -> None:
    # Every error leaves as {"error": ..., "details"?: ...}

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        message, details = _validation_summary(exc)
        logger.info("request.invalid path=%s details=%s", request.url.path, details)
        body = {"error": message}
        if details:
            body["details"] = details
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        # Starlette re-raises after this handler, so the server logs the traceback
        logger.error(
            "request.unhandled path=%s err=%s", request.url.path, type(exc).__name__
        )
        err = InternalError(details=str(exc) or type(exc).__name__)
        return JSONResponse(status_code=err.status_code, content=err.to_payload())


def create_app(
    providers: Optional[ProviderRegistry] = None,
    jobs: Optional[JobRepository] = None,
    validation_timeout: float = settings.VALIDATION_TIMEOUT_SECONDS,
) -> FastAPI:
    """
    Build the API. Tests pass their own provider registry / job store.
    """

    @asynccontextmanager
    async def lifespan(fastApi: FastAPI):
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        registry = providers or build_provider_registry()
        validation = KeyValidationService(
            jobs or JobRepository(), registry, timeout=validation_timeout
        )
        fastApi.state.validation_service = validation
        fastApi.state.prompt_service = PromptService(registry)
        print(f"{Color.BLUE}Server Started{Color.RESET}")
        try:
            yield
        finally:
            await validation.shutdown(cancel=True)
            print(f"{Color.RED}Server Shutdown{Color.RESET}")

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.ALLOWED_ORIGIN.split(",")],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    @app.get(InternalURIs.HEALTHZ)
    async def healthz():
        return {"ok": True}

    register_exception_handlers(app)
    routes.register_routes(app)
    return app


app: FastAPI = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
