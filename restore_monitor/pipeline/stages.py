from __future__ import annotations
from restore_monitor.core.workflow import StageStatus
from restore_monitor.pipeline.phases import PhaseDescriptor
from restore_monitor.tracking.models import Stage
from restore_monitor.tracking.tracker import JobTracker

_PROGRESS_BY_STATUS = {
    StageStatus.IN_PROGRESS: 50,
    StageStatus.COMPLETE: 100,
}


class StageUpdater:
    """Records one phase observation as a step and moves the phase's stage along.

    The step append and the stage replacement are two separate tracker
    writes, so a concurrent reader can briefly see the new step without its
    duration.
    """

    def __init__(self, tracker: JobTracker):
        self.tracker = tracker

    def update(
        self,
        job_id: str,
        phase: PhaseDescriptor,
        status: StageStatus,
        message: str,
        details: str = "",
        duration_ms: int = 0,
    ) -> Stage:
        stage = self.tracker.get_or_create_stage(job_id, phase.kind, phase.label, phase.description)
        step = self.tracker.add_step_to_stage(job_id, stage.id, status, message, details)

        if duration_ms > 0:
            step.duration_ms = duration_ms
        stage.steps.append(step)

        stage.status = status
        progress = _PROGRESS_BY_STATUS.get(status)
        if progress is not None:
            stage.progress = progress

        self.tracker.update_stage(job_id, stage)
        return stage
