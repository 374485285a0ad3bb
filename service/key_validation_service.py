# service/key_validation_service.py
import asyncio
import logging
from typing import Awaitable, Dict, TypeVar
from config.settings import settings
from core.providers import ProviderRegistry
from model.job import Job
from repository.job_repository import JobRepository
from util.errors import NotFound, ProviderTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCELLED_MESSAGE = "Validation cancelled."


class KeyValidationService:
    """
    Validates provider API keys.

    Two flows share the same provider logic:
      - start_validation/get_status: create a job, run the provider call in a
        background task, let the client poll.
      - validate_key/check_key: run the provider call inline and answer directly.

    Task handles are kept until they finish so shutdown() can cancel or drain them.
    """

    def __init__(
        self,
        jobs: JobRepository,
        providers: ProviderRegistry,
        timeout: float = settings.VALIDATION_TIMEOUT_SECONDS,
    ) -> None:
        self._jobs = jobs
        self._providers = providers
        self._timeout = float(timeout)
        self._tasks: Dict[asyncio.Task, Job] = {}

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # ---------------- Async (job) flow ----------------

    async def start_validation(self, api_key: str, provider: str) -> str:
        job = await self._jobs.create(Job())
        task = asyncio.create_task(
            self._complete(job, api_key, provider), name=f"validate-key:{job.id}"
        )
        self._tasks[task] = job
        task.add_done_callback(lambda t: self._tasks.pop(t, None))
        logger.info("validation.job.started job=%s provider=%s", job.id, provider)
        return job.id

    async def get_status(self, job_id: str) -> Job:
        job = await self._jobs.get(job_id)
        if job is None:
            raise NotFound(details=f"jobId={job_id}")
        return job

    async def _complete(self, job: Job, api_key: str, provider: str) -> None:
        # The only writer for this id after creation: exactly one terminal put.
        try:
            models = await self.validate_and_get_models(api_key, provider)
        except asyncio.CancelledError:
            await self._jobs.put(job.failed(CANCELLED_MESSAGE))
            logger.warning("validation.job.cancelled job=%s", job.id)
            raise
        except Exception as e:
            message = str(e) or type(e).__name__
            await self._jobs.put(job.failed(message))
            logger.warning(
                "validation.job.failed job=%s err=%s msg=%s",
                job.id,
                type(e).__name__,
                message,
            )
            return
        await self._jobs.put(job.succeeded(models))
        logger.info("validation.job.done job=%s models=%d", job.id, len(models))

    # ---------------- Sync flow ----------------

    async def validate_and_get_models(self, api_key: str, provider: str) -> list[str]:
        upstream = self._providers.resolve(provider)
        return await self._bounded(upstream.list_models(api_key), upstream.name)

    async def validate_key(self, api_key: str, provider: str) -> list[str]:
        models = await self.validate_and_get_models(api_key, provider)
        logger.info("validation.sync.ok provider=%s models=%d", provider, len(models))
        return models

    async def check_key(self, api_key: str, provider: str) -> bool:
        upstream = self._providers.resolve(provider)
        valid = await self._bounded(upstream.validate_credential(api_key), upstream.name)
        logger.info("validation.check provider=%s valid=%s", upstream.name, valid)
        return valid

    async def _bounded(self, call: Awaitable[T], provider_name: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "validation.timeout provider=%s after=%.1fs", provider_name, self._timeout
            )
            raise ProviderTimeout(
                details=f"{provider_name} did not answer within {self._timeout:g}s"
            )

    # ---------------- Lifecycle ----------------

    async def shutdown(self, cancel: bool = True) -> None:
        """
        Cancel (default) or wait out every outstanding validation task.
        Cancelled jobs end in the error state.
        """
        outstanding = list(self._tasks.items())
        if not outstanding:
            return
        logger.info("validation.shutdown tasks=%d cancel=%s", len(outstanding), cancel)
        if cancel:
            for task, _ in outstanding:
                task.cancel()
        await asyncio.gather(*(t for t, _ in outstanding), return_exceptions=True)

        # A task cancelled before its first step never reached _complete
        for _, job in outstanding:
            current = await self._jobs.get(job.id)
            if current is not None and not current.is_terminal:
                await self._jobs.put(job.failed(CANCELLED_MESSAGE))
