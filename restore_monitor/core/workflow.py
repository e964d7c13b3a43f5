from enum import Enum

class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETE, JobStatus.FAILED)

class StageStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FAILED = "failed"

class StageKind(str, Enum):
    VALIDATION = "validation"
    RESTORE = "restore"
    FINALIZE = "finalize"

class SourceKind(str, Enum):
    UPLOAD = "upload"
    GOOGLE_DRIVE = "google_drive"
    LOCAL = "local"
