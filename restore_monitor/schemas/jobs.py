from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
from restore_monitor.core.workflow import SourceKind

class RestoreRequest(BaseModel):
    file_name: str = Field(..., examples=["clientes_2026-10-01.fbk"])
    source_path: str = Field(..., examples=["/data/uploads/clientes_2026-10-01.fbk"])
    target_path: Optional[str] = Field(default=None, examples=["/data/restored/clientes_2026-10-01.fdb"])
    source_kind: SourceKind = SourceKind.UPLOAD

    def resolved_target(self, restore_dir: str) -> str:
        """Target database path; defaults to ``<restore_dir>/<backup stem>.fdb``."""
        if self.target_path:
            return self.target_path
        return str(Path(restore_dir) / f"{Path(self.source_path).stem}.fdb")

class HealthResponse(BaseModel):
    status: str = "ok"
