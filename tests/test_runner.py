"""Tests for RestoreJobRunner (thread pool worker)."""
from restore_monitor.core.errors import ValidationFailure
from restore_monitor.core.workflow import JobStatus, SourceKind, StageStatus
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tasks.jobs import RestoreJobRunner


def test_submit_returns_pending_job_and_runs_pipeline(tracker, fake_operations_cls):
    ops = fake_operations_cls()
    runner = RestoreJobRunner(tracker, ops, max_workers=1, restore_dir="/data/restored")

    job = runner.submit(RestoreRequest(
        file_name="clientes.fbk",
        source_path="/data/uploads/clientes.fbk",
        source_kind=SourceKind.LOCAL,
    ))
    runner.wait(job.id, timeout=5)
    runner.shutdown()

    assert job.status is JobStatus.PENDING
    assert job.total_stages == 3
    assert job.kind == "local"
    done = tracker.get_job(job.id)
    assert done.status is JobStatus.COMPLETE
    assert "/data/restored/clientes.fdb" in done.stages["restore"].steps[-1].details


def test_explicit_target_path_is_kept(tracker, fake_operations_cls, restore_request):
    runner = RestoreJobRunner(tracker, fake_operations_cls(), max_workers=1, restore_dir="/elsewhere")

    job = runner.submit(restore_request)
    runner.shutdown()

    details = tracker.get_job(job.id).stages["restore"].steps[-1].details
    assert "/data/restored/clientes.fdb" in details


def test_phase_failure_is_recorded(tracker, fake_operations_cls, restore_request):
    ops = fake_operations_cls(errors={"validate": ValidationFailure("corrupt header")})
    runner = RestoreJobRunner(tracker, ops, max_workers=1)

    job = runner.submit(restore_request)
    runner.shutdown()

    failed = tracker.get_job(job.id)
    assert failed.status is JobStatus.FAILED
    assert failed.error == "corrupt header"


def test_unexpected_operation_error_fails_job_through_pipeline(tracker, fake_operations_cls, restore_request):
    ops = fake_operations_cls(errors={"restore": RuntimeError("tool wrapper crashed")})
    runner = RestoreJobRunner(tracker, ops, max_workers=1)

    job = runner.submit(restore_request)
    runner.shutdown()

    failed = tracker.get_job(job.id)
    assert failed.status is JobStatus.FAILED
    assert failed.error == "tool wrapper crashed"
    restore = failed.stages["restore"]
    assert restore.status is StageStatus.FAILED
    assert restore.steps[-1].message == "tool wrapper crashed"
    assert "finalize" not in failed.stages


def test_resolved_target_defaults_to_restore_dir():
    request = RestoreRequest(file_name="x.fbk", source_path="/uploads/vendas_2026.fbk")

    assert request.resolved_target("/srv/db") == "/srv/db/vendas_2026.fdb"
