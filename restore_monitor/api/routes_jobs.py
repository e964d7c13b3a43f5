from typing import List
from fastapi import APIRouter, Depends, HTTPException
from restore_monitor.api.deps import get_runner, get_tracker
from restore_monitor.core.errors import JobNotFoundError
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tasks.jobs import RestoreJobRunner
from restore_monitor.tracking.models import Job, MonitoringSnapshot
from restore_monitor.tracking.tracker import JobTracker

router = APIRouter()

@router.post("/jobs", response_model=Job)
def create_job(req: RestoreRequest, runner: RestoreJobRunner = Depends(get_runner)):
    return runner.submit(req)

@router.get("/jobs", response_model=List[Job])
def list_jobs(tracker: JobTracker = Depends(get_tracker)):
    return tracker.list_jobs()

@router.get("/jobs/{job_id}", response_model=Job)
def get_job(job_id: str, tracker: JobTracker = Depends(get_tracker)):
    try:
        return tracker.get_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")

@router.get("/file_monitoring", response_model=MonitoringSnapshot)
def file_monitoring(tracker: JobTracker = Depends(get_tracker)):
    return tracker.monitoring_snapshot()
