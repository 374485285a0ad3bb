# repository/job_repository.py
import logging
import threading
import time
from typing import Dict, Optional
from config.settings import settings
from model.job import Job
from util.errors import DuplicateJobId

logger = logging.getLogger(__name__)


class JobRepository:
    """
    Process-local job store. Records are frozen pydantic models and every
    write swaps the whole record under the lock, so readers never see a
    half-updated job. Nothing survives a restart.
    """

    def __init__(self, ttl_seconds: int = settings.JOB_TTL_SECONDS) -> None:
        self._ttl = int(ttl_seconds)
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    # ---------------- Core CRUD ----------------

    async def create(self, job: Job) -> Job:
        self.purge_expired()
        with self._lock:
            if job.id in self._jobs:
                raise DuplicateJobId(details=job.id)
            self._jobs[job.id] = job
        return job

    async def put(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = job

    async def get(self, job_id: str) -> Optional[Job]:
        if not job_id:
            return None
        with self._lock:
            return self._jobs.get(job_id)

    # ---------------- Expiry ----------------

    def purge_expired(self, now: Optional[float] = None) -> int:
        """
        Drop finished jobs whose completion is older than the TTL.
        Pending jobs stay regardless of age. ttl <= 0 disables expiry.
        """
        if self._ttl <= 0:
            return 0
        cutoff = (now if now is not None else time.time()) - self._ttl
        with self._lock:
            stale = [
                jid
                for jid, job in self._jobs.items()
                if job.completedAt is not None and job.completedAt < cutoff
            ]
            for jid in stale:
                del self._jobs[jid]
        if stale:
            logger.info("jobs.purged count=%d", len(stale))
        return len(stale)
