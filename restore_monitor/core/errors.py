"""Error taxonomy shared by the tracker, the pipeline and the operations."""


class RestoreMonitorError(Exception):
    """Base class for every error raised by restore-monitor."""


class PhaseFailure(RestoreMonitorError):
    """A phase operation did not succeed.

    ``message`` may be empty, in which case the pipeline falls back to the
    phase's generic failure message. ``details`` carries any informational
    output the operation produced before failing.
    """

    def __init__(self, message: str = "", details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailure(PhaseFailure):
    """The backup validator reported the file invalid or errored."""


class OperationFailure(PhaseFailure):
    """The restore or configure operation errored."""


class TrackerError(RestoreMonitorError):
    """Misuse of the job tracker. Indicates a logic defect in the caller."""


class NotFoundError(TrackerError, LookupError):
    pass


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class StageNotFoundError(NotFoundError):
    def __init__(self, job_id: str, stage_ref: str):
        super().__init__(f"Stage not found in job {job_id}: {stage_ref}")
        self.job_id = job_id
        self.stage_ref = stage_ref


class JobFinalizedError(TrackerError, RuntimeError):
    def __init__(self, job_id: str, status: str):
        super().__init__(f"Job {job_id} is already {status}; no further mutation allowed")
        self.job_id = job_id
        self.status = status


class InvalidTransitionError(TrackerError, ValueError):
    pass
