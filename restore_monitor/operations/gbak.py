from __future__ import annotations
import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence
from restore_monitor.core.config import settings
from restore_monitor.core.errors import OperationFailure, ValidationFailure
from restore_monitor.operations.base import RestoreOperations, ValidationReport

log = logging.getLogger(__name__)


class GbakOperations(RestoreOperations):
    """Firebird restore actions backed by the ``gbak`` and ``gfix`` command line tools."""

    def __init__(
        self,
        gbak_path: str = settings.gbak_path,
        gfix_path: str = settings.gfix_path,
        user: str = settings.firebird_user,
        password: str = settings.firebird_password,
        extensions: Optional[Sequence[str]] = None,
        min_size: int = settings.min_backup_size,
    ):
        self.gbak_path = gbak_path
        self.gfix_path = gfix_path
        self.user = user
        self.password = password
        self.extensions = [e.lower() for e in (extensions or settings.backup_extensions)]
        self.min_size = min_size

    def validate(self, path: str) -> ValidationReport:
        backup = Path(path)
        if not backup.exists():
            raise ValidationFailure(f"Backup file not found: {path}")
        if not backup.is_file():
            raise ValidationFailure(f"Backup path is not a file: {path}")

        if backup.suffix.lower() not in self.extensions:
            return ValidationReport(False, f"Unsupported backup extension '{backup.suffix}' (expected {', '.join(self.extensions)})")

        try:
            size = backup.stat().st_size
        except OSError as e:
            raise ValidationFailure(f"Cannot read backup file: {e}") from e
        if size < self.min_size:
            return ValidationReport(False, f"Backup file too small: {size} bytes (minimum {self.min_size})")

        return ValidationReport(True, f"{backup.name}: {size} bytes")

    def restore(self, source_path: str, target_path: str) -> str:
        try:
            Path(target_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OperationFailure(f"Cannot create target directory for {target_path}: {e}") from e
        return self._run(
            self.gbak_path,
            ["-c", "-v", *self._credentials(), source_path, target_path],
        )

    def configure(self, target_path: str) -> None:
        if not Path(target_path).exists():
            raise OperationFailure(f"Restored database not found: {target_path}")
        self._run(self.gfix_path, [*self._credentials(), "-write", "sync", target_path])

    def _credentials(self) -> List[str]:
        return ["-user", self.user, "-password", self.password]

    def _run(self, tool: str, args: List[str]) -> str:
        tool_name = Path(tool).name
        log.debug("Running %s %s", tool_name, " ".join(a for a in args if a != self.password))
        try:
            proc = subprocess.run([tool, *args], capture_output=True, text=True, check=False)
        except OSError as e:
            raise OperationFailure(f"Failed to start {tool_name}: {e}") from e

        output = (proc.stdout or "").strip()
        if proc.returncode != 0:
            error = (proc.stderr or "").strip() or f"{tool_name} exited with status {proc.returncode}"
            raise OperationFailure(error, details=output)
        return output
