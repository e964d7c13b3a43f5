from fastapi import APIRouter
from restore_monitor.api.routes_jobs import router as jobs_router
from restore_monitor.schemas.jobs import HealthResponse

router = APIRouter()
router.include_router(jobs_router, tags=["jobs"])


@router.get("/health", response_model=HealthResponse, tags=["health"])
def health():
    """Liveness only; does not check the restore workers."""
    return HealthResponse()
