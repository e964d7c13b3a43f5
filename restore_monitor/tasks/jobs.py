from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Iterable, Optional
from restore_monitor.core.config import settings
from restore_monitor.core.errors import TrackerError
from restore_monitor.operations.base import RestoreOperations
from restore_monitor.pipeline.engine import RestorePipeline
from restore_monitor.pipeline.phases import PhaseDescriptor, build_restore_phases
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tracking.models import Job
from restore_monitor.tracking.tracker import JobTracker

log = logging.getLogger(__name__)


class RestoreJobRunner:
    """Runs each submitted restore on its own pool thread against a shared tracker."""

    def __init__(
        self,
        tracker: JobTracker,
        operations: RestoreOperations,
        max_workers: int = settings.max_workers,
        restore_dir: str = settings.restore_target_dir,
        phases: Optional[Iterable[PhaseDescriptor]] = None,
    ):
        self.tracker = tracker
        self.restore_dir = restore_dir
        self.pipeline = RestorePipeline(tracker, phases if phases is not None else build_restore_phases(operations))
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="restore-worker")
        self._futures: Dict[str, Future] = {}

    def submit(self, request: RestoreRequest) -> Job:
        request = request.model_copy(update={"target_path": request.resolved_target(self.restore_dir)})
        job = self.tracker.start_job(
            request.file_name,
            request.source_path,
            request.source_kind.value,
            total_stages=len(self.pipeline.phases),
        )
        log.info("Queued restore of %s into %s", request.source_path, request.target_path,
                 extra={"job_id": job.id, "stage": "-"})
        future = self._executor.submit(self.run_job, job.id, request)
        self._futures[job.id] = future
        future.add_done_callback(lambda _f, job_id=job.id: self._futures.pop(job_id, None))
        return job

    def run_job(self, job_id: str, request: RestoreRequest) -> None:
        try:
            log.info("Starting workflow", extra={"job_id": job_id, "stage": "-"})
            job = self.pipeline.run(job_id, request)
            log.info("Workflow finished with status %s", job.status.value, extra={"job_id": job_id, "stage": "-"})
        except Exception as e:
            log.exception("Workflow crashed", extra={"job_id": job_id, "stage": "-"})
            try:
                self.tracker.fail_job(job_id, str(e) or type(e).__name__)
            except TrackerError as tracker_error:
                log.error("Could not record failure: %s", tracker_error, extra={"job_id": job_id, "stage": "-"})

    def wait(self, job_id: str, timeout: Optional[float] = None) -> None:
        """Block until the worker for ``job_id`` has returned."""
        future = self._futures.get(job_id)
        if future is not None:
            future.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
