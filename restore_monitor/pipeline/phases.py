from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional
from restore_monitor.core.errors import ValidationFailure
from restore_monitor.core.workflow import StageKind
from restore_monitor.operations.base import RestoreOperations
from restore_monitor.schemas.jobs import RestoreRequest

# Returns informational output (if any); raises PhaseFailure on error.
PhaseOperation = Callable[[RestoreRequest], Optional[str]]

@dataclass(frozen=True)
class PhaseDescriptor:
    kind: str
    label: str
    description: str
    start_message: str
    success_message: str
    failure_message: str
    operation: PhaseOperation


def build_restore_phases(operations: RestoreOperations) -> List[PhaseDescriptor]:
    """The validate -> restore -> finalize sequence for one backup file.

    ``request.target_path`` must already be resolved.
    """

    def validate(request: RestoreRequest) -> str:
        report = operations.validate(request.source_path)
        if not report.valid:
            raise ValidationFailure(details=report.message)
        return report.message

    def restore(request: RestoreRequest) -> str:
        return operations.restore(request.source_path, request.target_path)

    def configure(request: RestoreRequest) -> None:
        operations.configure(request.target_path)

    return [
        PhaseDescriptor(
            kind=StageKind.VALIDATION.value,
            label="Validation",
            description="Checking backup file format and structure",
            start_message="Validating backup file",
            success_message="Backup file validated",
            failure_message="Backup file validation failed",
            operation=validate,
        ),
        PhaseDescriptor(
            kind=StageKind.RESTORE.value,
            label="Restore",
            description="Restoring database from backup",
            start_message="Starting database restore",
            success_message="Restore completed",
            failure_message="Restore failed",
            operation=restore,
        ),
        PhaseDescriptor(
            kind=StageKind.FINALIZE.value,
            label="Finalize",
            description="Configuring and registering the restored database",
            start_message="Configuring restored database",
            success_message="Database configured",
            failure_message="Database configuration failed",
            operation=configure,
        ),
    ]
