#!/usr/bin/env python3
"""
Restore a single backup file through the full pipeline and print its stage history.
Usage: python scripts/run_restore.py <backup.fbk> [target.fdb]
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from restore_monitor.core.config import settings
from restore_monitor.core.logging import configure_logging
from restore_monitor.operations.gbak import GbakOperations
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tasks.jobs import RestoreJobRunner
from restore_monitor.tracking.tracker import JobTracker


def run_restore(backup_path: str, target_path: str | None = None) -> int:
    configure_logging()
    tracker = JobTracker()
    runner = RestoreJobRunner(tracker, GbakOperations(), max_workers=1, restore_dir=settings.restore_target_dir)

    job = runner.submit(RestoreRequest(
        file_name=Path(backup_path).name,
        source_path=backup_path,
        target_path=target_path,
    ))
    print(f"Created job: {job.id}")
    runner.shutdown(wait=True)

    job = tracker.get_job(job.id)
    print()
    print("=" * 80)
    print(f"Job finished! Status: {job.status.value}")
    print("=" * 80)
    for stage in job.stages.values():
        print(f"[{stage.status.value:>11}] {stage.label} ({stage.progress}%)")
        for step in stage.steps:
            duration = f" {step.duration_ms} ms" if step.duration_ms is not None else ""
            print(f"    - {step.status.value}: {step.message}{duration}")
            if step.details:
                print(f"      {step.details}")
    if job.error:
        print()
        print(f"Error: {job.error}")
    return 0 if job.status.value == "complete" else 1


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__.strip())
        sys.exit(2)
    sys.exit(run_restore(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
