import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from restore_monitor.core.config import settings
from restore_monitor.core.logging import configure_logging
from restore_monitor.api.routes import router as api_router
from restore_monitor.operations.base import RestoreOperations
from restore_monitor.operations.gbak import GbakOperations
from restore_monitor.tasks.jobs import RestoreJobRunner
from restore_monitor.tracking.tracker import JobTracker

configure_logging()
log = logging.getLogger(__name__)


def create_app(
    tracker: Optional[JobTracker] = None,
    operations: Optional[RestoreOperations] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        log.info("Starting API server...")
        if tracker is None:
            app.state.tracker = JobTracker(
                max_finished_jobs=settings.max_finished_jobs,
                recent_limit=settings.recent_limit,
            )
        else:
            app.state.tracker = tracker
        app.state.runner = RestoreJobRunner(
            app.state.tracker,
            operations if operations is not None else GbakOperations(),
            max_workers=settings.max_workers,
            restore_dir=settings.restore_target_dir,
        )
        log.info("API server startup complete (%d restore workers)", settings.max_workers)
        yield
        log.info("Shutting down API server, waiting for running restores...")
        app.state.runner.shutdown(wait=True)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(api_router, prefix="/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
