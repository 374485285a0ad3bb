# model/job.py
import time
from typing import Optional
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field
from util.enums import JobStatus


class Job(BaseModel):
    """
    One key-validation request. Frozen: updates replace the whole record.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    status: JobStatus = JobStatus.PENDING
    models: Optional[list[str]] = None
    message: Optional[str] = None
    createdAt: float = Field(default_factory=time.time)
    completedAt: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.PENDING

    def succeeded(self, models: list[str]) -> "Job":
        return self._finish(status=JobStatus.SUCCESS, models=list(models))

    def failed(self, message: str) -> "Job":
        return self._finish(status=JobStatus.ERROR, message=message)

    def _finish(self, **changes) -> "Job":
        if self.is_terminal:
            raise ValueError(f"job {self.id} already {self.status.value}")
        return self.model_copy(update={**changes, "completedAt": time.time()})
