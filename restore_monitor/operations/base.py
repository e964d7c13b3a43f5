from dataclasses import dataclass

@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    message: str

class RestoreOperations:
    """External actions wrapped by the restore pipeline.

    Implementations raise :class:`ValidationFailure` / :class:`OperationFailure`
    from ``restore_monitor.core.errors`` when the underlying tool errors.
    """
    def validate(self, path: str) -> ValidationReport:
        raise NotImplementedError

    def restore(self, source_path: str, target_path: str) -> str:
        raise NotImplementedError

    def configure(self, target_path: str) -> None:
        raise NotImplementedError
