from __future__ import annotations
import logging
import time
from typing import Callable, Iterable
from restore_monitor.core.errors import PhaseFailure
from restore_monitor.core.workflow import StageStatus
from restore_monitor.pipeline.phases import PhaseDescriptor
from restore_monitor.pipeline.stages import StageUpdater
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tracking.models import Job
from restore_monitor.tracking.tracker import JobTracker

log = logging.getLogger(__name__)


class RestorePipeline:
    """Drives one job through its phases in order, stopping at the first failure."""

    def __init__(
        self,
        tracker: JobTracker,
        phases: Iterable[PhaseDescriptor],
        clock: Callable[[], int] = time.monotonic_ns,
    ):
        self.tracker = tracker
        self.phases = list(phases)
        self.updater = StageUpdater(tracker)
        self.clock = clock

    def _elapsed_ms(self, started_ns: int) -> int:
        return max(0, (self.clock() - started_ns) // 1_000_000)

    def run(self, job_id: str, request: RestoreRequest) -> Job:
        for phase in self.phases:
            extra = {"job_id": job_id, "stage": phase.kind}
            log.info("Running stage", extra=extra)
            self.updater.update(job_id, phase, StageStatus.IN_PROGRESS, phase.start_message)

            started = self.clock()
            failure = None
            output = None
            try:
                output = phase.operation(request)
            except Exception as e:
                failure = e
            duration_ms = self._elapsed_ms(started)

            if failure is not None:
                if isinstance(failure, PhaseFailure):
                    error, details = failure.message, failure.details
                else:
                    log.exception("Unexpected error in stage operation", exc_info=failure, extra=extra)
                    error, details = str(failure), ""
                error = error or phase.failure_message
                log.error("Stage failed after %d ms: %s", duration_ms, error, extra=extra)
                self.updater.update(job_id, phase, StageStatus.FAILED, error, details, duration_ms)
                self.tracker.fail_job(job_id, error)
                return self.tracker.get_job(job_id)

            log.info("Stage complete in %d ms", duration_ms, extra=extra)
            self.updater.update(job_id, phase, StageStatus.COMPLETE, phase.success_message, output or "", duration_ms)

        self.tracker.complete_job(job_id)
        return self.tracker.get_job(job_id)
