from __future__ import annotations
import logging
from collections import OrderedDict
from typing import Dict, List
from restore_monitor.core.errors import (
    InvalidTransitionError,
    JobFinalizedError,
    JobNotFoundError,
    StageNotFoundError,
)
from restore_monitor.core.workflow import JobStatus, StageStatus
from restore_monitor.tracking.models import Job, MonitoringSnapshot, Stage, Step, utcnow
from restore_monitor.tracking.rwlock import ReadWriteLock

log = logging.getLogger(__name__)

# Allowed stage status changes; staying in the same non-terminal status is always fine.
_STAGE_TRANSITIONS: Dict[StageStatus, set] = {
    StageStatus.PENDING: {StageStatus.PENDING, StageStatus.IN_PROGRESS},
    StageStatus.IN_PROGRESS: {StageStatus.IN_PROGRESS, StageStatus.COMPLETE, StageStatus.FAILED},
    StageStatus.COMPLETE: set(),
    StageStatus.FAILED: set(),
}

_REQUIRED_PROGRESS = {
    StageStatus.IN_PROGRESS: 50,
    StageStatus.COMPLETE: 100,
}


class JobTracker:
    """In-memory owner of every job, stage and step in the process.

    Writers are serialized and readers run concurrently through a
    :class:`ReadWriteLock`. Every returned object is a deep copy, so callers
    can read it freely without holding the lock; changes only reach the
    tracker through its methods.
    """

    def __init__(self, max_finished_jobs: int = 200, recent_limit: int = 20):
        self._lock = ReadWriteLock()
        self._jobs: "OrderedDict[str, Job]" = OrderedDict()
        self._finished: "OrderedDict[str, None]" = OrderedDict()
        self.max_finished_jobs = max_finished_jobs
        self.recent_limit = recent_limit

    # -- writers -----------------------------------------------------------

    def start_job(self, name: str, source_path: str, kind: str = "upload", total_stages: int = 0) -> Job:
        job = Job(name=name, source_path=source_path, kind=_kind_key(kind), total_stages=total_stages)
        with self._lock.write_locked():
            self._jobs[job.id] = job
            snapshot = job.model_copy(deep=True)
        log.info("Job registered: %s", name, extra={"job_id": job.id, "stage": "-"})
        return snapshot

    def get_or_create_stage(self, job_id: str, stage_kind: str, label: str, description: str = "") -> Stage:
        kind = _kind_key(stage_kind)
        with self._lock.write_locked():
            job = self._mutable_job(job_id)
            stage = job.stages.get(kind)
            if stage is None:
                previous = next(reversed(job.stages.values()), None)
                if previous is not None and previous.status is not StageStatus.COMPLETE:
                    raise InvalidTransitionError(
                        f"Cannot start stage {kind!r} in job {job_id}: "
                        f"stage {previous.kind!r} is {previous.status.value}"
                    )
                stage = Stage(kind=kind, label=label, description=description)
                job.stages[kind] = stage
                if job.status is JobStatus.PENDING:
                    job.status = JobStatus.RUNNING
                    job.started_at = utcnow()
            return stage.model_copy(deep=True)

    def add_step_to_stage(self, job_id: str, stage_id: str, status: StageStatus | str, message: str, details: str = "") -> Step:
        with self._lock.write_locked():
            job = self._mutable_job(job_id)
            stage = next((s for s in job.stages.values() if s.id == stage_id), None)
            if stage is None:
                raise StageNotFoundError(job_id, stage_id)
            step = Step(status=status, message=message, details=details or "")
            stage.steps.append(step)
            return step.model_copy(deep=True)

    def update_stage(self, job_id: str, stage: Stage) -> None:
        """Replace the stored stage of ``stage.kind`` with the caller's value."""
        kind = _kind_key(stage.kind)
        with self._lock.write_locked():
            job = self._mutable_job(job_id)
            current = job.stages.get(kind)
            if current is None:
                raise StageNotFoundError(job_id, kind)
            if stage.id != current.id:
                raise InvalidTransitionError(f"Stage id mismatch for {kind!r} in job {job_id}")
            _check_stage_update(current, stage)

            replacement = stage.model_copy(deep=True)
            replacement.started_at = current.started_at
            replacement.ended_at = current.ended_at
            if replacement.status is StageStatus.IN_PROGRESS and replacement.started_at is None:
                replacement.started_at = utcnow()
            if replacement.status in (StageStatus.COMPLETE, StageStatus.FAILED) and replacement.ended_at is None:
                replacement.ended_at = utcnow()
            job.stages[kind] = replacement

    def complete_job(self, job_id: str) -> None:
        with self._lock.write_locked():
            job = self._mutable_job(job_id)
            job.status = JobStatus.COMPLETE
            job.completed_at = utcnow()
            self._retire(job)
        log.info("Job complete", extra={"job_id": job_id, "stage": "-"})

    def fail_job(self, job_id: str, message: str) -> None:
        with self._lock.write_locked():
            job = self._mutable_job(job_id)
            job.status = JobStatus.FAILED
            job.error = message
            job.completed_at = utcnow()
            self._retire(job)
        log.warning("Job failed: %s", message, extra={"job_id": job_id, "stage": "-"})

    # -- readers -----------------------------------------------------------

    def get_job(self, job_id: str) -> Job:
        with self._lock.read_locked():
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            return job.model_copy(deep=True)

    def list_jobs(self) -> List[Job]:
        with self._lock.read_locked():
            return [job.model_copy(deep=True) for job in self._jobs.values()]

    def monitoring_snapshot(self) -> MonitoringSnapshot:
        with self._lock.read_locked():
            active = [j.model_copy(deep=True) for j in reversed(self._jobs.values()) if not j.is_finished]
            finished = [self._jobs[job_id] for job_id in reversed(self._finished)]
            completed = [j.model_copy(deep=True) for j in finished if j.status is JobStatus.COMPLETE]
            failed = [j.model_copy(deep=True) for j in finished if j.status is JobStatus.FAILED]
        return MonitoringSnapshot(
            active_files=active,
            recently_completed=completed[:self.recent_limit],
            recently_failed=failed[:self.recent_limit],
        )

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._jobs)

    # -- internals (write lock held) ---------------------------------------

    def _mutable_job(self, job_id: str) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if job.is_finished:
            raise JobFinalizedError(job_id, job.status.value)
        return job

    def _retire(self, job: Job) -> None:
        self._finished[job.id] = None
        while len(self._finished) > self.max_finished_jobs:
            evicted, _ = self._finished.popitem(last=False)
            self._jobs.pop(evicted, None)
            log.debug("Evicted finished job", extra={"job_id": evicted, "stage": "-"})


def _kind_key(kind) -> str:
    return getattr(kind, "value", kind)


def _check_stage_update(current: Stage, incoming: Stage) -> None:
    if incoming.status not in _STAGE_TRANSITIONS[current.status]:
        raise InvalidTransitionError(
            f"Stage {current.kind!r} cannot move from {current.status.value} to {incoming.status.value}"
        )
    required = _REQUIRED_PROGRESS.get(incoming.status)
    if required is not None and incoming.progress != required:
        raise InvalidTransitionError(
            f"Stage {current.kind!r} with status {incoming.status.value} must report progress {required}, "
            f"got {incoming.progress}"
        )
    # Steps are append-only: the stored history must be a prefix of the incoming one.
    stored_ids = [s.id for s in current.steps]
    incoming_ids = [s.id for s in incoming.steps]
    if incoming_ids[:len(stored_ids)] != stored_ids:
        raise InvalidTransitionError(f"Stage {current.kind!r} update would rewrite recorded steps")
