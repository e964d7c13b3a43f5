from fastapi import Request
from restore_monitor.tasks.jobs import RestoreJobRunner
from restore_monitor.tracking.tracker import JobTracker

def get_tracker(request: Request) -> JobTracker:
    return request.app.state.tracker

def get_runner(request: Request) -> RestoreJobRunner:
    return request.app.state.runner
