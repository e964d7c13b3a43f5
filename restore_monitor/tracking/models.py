"""Passive records describing a restore job's structure and history.

Instances live inside :class:`~restore_monitor.tracking.tracker.JobTracker`;
everything handed out by the tracker is a deep copy of these records.
"""
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from restore_monitor.core.workflow import JobStatus, StageStatus


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Step(BaseModel):
    """One recorded observation within a stage."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=utcnow)
    status: StageStatus
    message: str
    details: str = ""
    # None until measured; zero is never stored.
    duration_ms: Optional[int] = Field(default=None, ge=0)


class Stage(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    kind: str
    label: str
    description: str = ""
    status: StageStatus = StageStatus.PENDING
    progress: Literal[0, 50, 100] = 0
    steps: List[Step] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class Job(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    source_path: str
    # Operation kind, e.g. "upload"; free-form.
    kind: str = "upload"
    status: JobStatus = JobStatus.PENDING
    # Keyed by stage kind; insertion order is phase order.
    stages: Dict[str, Stage] = Field(default_factory=dict)
    total_stages: int = 0
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @computed_field
    @property
    def overall_progress(self) -> int:
        if self.status is JobStatus.COMPLETE:
            return 100
        expected = max(self.total_stages, len(self.stages))
        if not expected:
            return 0
        return sum(stage.progress for stage in self.stages.values()) // expected

    @computed_field
    @property
    def current_stage(self) -> Optional[str]:
        if not self.stages:
            return None
        return next(reversed(self.stages))

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal


class MonitoringSnapshot(BaseModel):
    """Point-in-time view of every tracked job, grouped by lifecycle."""
    active_files: List[Job] = Field(default_factory=list)
    recently_completed: List[Job] = Field(default_factory=list)
    recently_failed: List[Job] = Field(default_factory=list)
