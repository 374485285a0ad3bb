# tests/test_job_repository.py
import pytest
from model.job import Job
from repository.job_repository import JobRepository
from util.enums import JobStatus
from util.errors import DuplicateJobId

pytestmark = pytest.mark.anyio


async def test_create_then_get_returns_same_record(jobs):
    job = await jobs.create(Job())
    assert await jobs.get(job.id) == job
    assert job.status == JobStatus.PENDING
    assert len(jobs) == 1


async def test_create_rejects_duplicate_id(jobs):
    job = await jobs.create(Job())
    with pytest.raises(DuplicateJobId):
        await jobs.create(Job(id=job.id))


async def test_put_replaces_whole_record(jobs):
    job = await jobs.create(Job())
    done = job.succeeded(["gpt-4"])
    await jobs.put(done)
    stored = await jobs.get(job.id)
    assert stored.status == JobStatus.SUCCESS
    assert stored.models == ["gpt-4"]
    assert stored.completedAt is not None


async def test_put_upserts_unknown_id(jobs):
    await jobs.put(Job(id="manual"))
    assert (await jobs.get("manual")).id == "manual"


async def test_get_unknown_or_empty_id_is_none(jobs):
    assert await jobs.get("nope") is None
    assert await jobs.get("") is None


async def test_purge_drops_only_expired_terminal_jobs():
    repo = JobRepository(ttl_seconds=10)
    old_done = Job(id="old", createdAt=0).failed("boom").model_copy(
        update={"completedAt": 100.0}
    )
    fresh_done = Job(id="fresh").succeeded([]).model_copy(update={"completedAt": 195.0})
    old_pending = Job(id="pending", createdAt=0)
    for job in (old_done, fresh_done, old_pending):
        await repo.put(job)

    assert repo.purge_expired(now=200.0) == 1
    assert await repo.get("old") is None
    assert await repo.get("fresh") is not None
    assert await repo.get("pending") is not None


async def test_zero_ttl_never_purges():
    repo = JobRepository(ttl_seconds=0)
    await repo.put(Job(id="x").failed("e").model_copy(update={"completedAt": 1.0}))
    assert repo.purge_expired(now=10_000.0) == 0
    assert len(repo) == 1


def test_terminal_job_cannot_transition_again():
    job = Job().succeeded(["gpt-4"])
    with pytest.raises(ValueError):
        job.failed("late")
    with pytest.raises(ValueError):
        job.succeeded([])


def test_job_ids_are_unique():
    assert len({Job().id for _ in range(200)}) == 200
