"""Unit tests for GbakOperations with subprocess mocked (no Firebird tools needed)."""
import subprocess
import pytest
from restore_monitor.core.errors import OperationFailure, ValidationFailure
from restore_monitor.operations import gbak
from restore_monitor.operations.gbak import GbakOperations


def _ops(**kwargs):
    kwargs.setdefault("gbak_path", "/opt/firebird/bin/gbak")
    kwargs.setdefault("gfix_path", "/opt/firebird/bin/gfix")
    kwargs.setdefault("user", "SYSDBA")
    kwargs.setdefault("password", "secret")
    kwargs.setdefault("extensions", [".fbk", ".gbk"])
    kwargs.setdefault("min_size", 16)
    return GbakOperations(**kwargs)


@pytest.fixture
def fake_run(monkeypatch):
    calls = []
    results = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        returncode, stdout, stderr = results.pop(0) if results else (0, "", "")
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    monkeypatch.setattr(gbak.subprocess, "run", run)
    run.calls = calls
    run.results = results
    return run


def test_validate_accepts_backup_file(tmp_path):
    backup = tmp_path / "clientes.fbk"
    backup.write_bytes(b"x" * 64)

    report = _ops().validate(str(backup))

    assert report.valid
    assert report.message == "clientes.fbk: 64 bytes"


def test_validate_missing_file_raises(tmp_path):
    with pytest.raises(ValidationFailure) as exc:
        _ops().validate(str(tmp_path / "missing.fbk"))
    assert "not found" in exc.value.message


def test_validate_directory_raises(tmp_path):
    folder = tmp_path / "folder.fbk"
    folder.mkdir()
    with pytest.raises(ValidationFailure):
        _ops().validate(str(folder))


def test_validate_rejects_extension(tmp_path):
    backup = tmp_path / "clientes.zip"
    backup.write_bytes(b"x" * 64)

    report = _ops().validate(str(backup))

    assert not report.valid
    assert ".zip" in report.message


def test_validate_rejects_small_file(tmp_path):
    backup = tmp_path / "tiny.GBK"
    backup.write_bytes(b"x" * 4)

    report = _ops().validate(str(backup))

    assert not report.valid
    assert "too small" in report.message


def test_restore_runs_gbak_and_returns_output(tmp_path, fake_run):
    fake_run.results.append((0, "gbak: finishing, closing, and going home\n", ""))
    target = tmp_path / "restored" / "clientes.fdb"

    output = _ops().restore("/data/clientes.fbk", str(target))

    assert output == "gbak: finishing, closing, and going home"
    assert target.parent.is_dir()
    assert fake_run.calls == [[
        "/opt/firebird/bin/gbak", "-c", "-v", "-user", "SYSDBA", "-password", "secret",
        "/data/clientes.fbk", str(target),
    ]]


def test_restore_failure_carries_stderr(tmp_path, fake_run):
    fake_run.results.append((1, "gbak: opened file", "gbak: ERROR:database file already exists\n"))

    with pytest.raises(OperationFailure) as exc:
        _ops().restore("/data/clientes.fbk", str(tmp_path / "clientes.fdb"))

    assert exc.value.message == "gbak: ERROR:database file already exists"
    assert exc.value.details == "gbak: opened file"


def test_restore_failure_without_stderr_reports_status(tmp_path, fake_run):
    fake_run.results.append((3, "", ""))

    with pytest.raises(OperationFailure) as exc:
        _ops().restore("/data/clientes.fbk", str(tmp_path / "clientes.fdb"))

    assert exc.value.message == "gbak exited with status 3"


def test_missing_tool_is_operation_failure(tmp_path, monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(gbak.subprocess, "run", run)

    with pytest.raises(OperationFailure) as exc:
        _ops().restore("/data/clientes.fbk", str(tmp_path / "clientes.fdb"))
    assert "Failed to start gbak" in exc.value.message


def test_configure_runs_gfix(tmp_path, fake_run):
    target = tmp_path / "clientes.fdb"
    target.write_bytes(b"db")

    _ops().configure(str(target))

    assert fake_run.calls == [[
        "/opt/firebird/bin/gfix", "-user", "SYSDBA", "-password", "secret", "-write", "sync", str(target),
    ]]


def test_configure_missing_database_raises(tmp_path, fake_run):
    with pytest.raises(OperationFailure):
        _ops().configure(str(tmp_path / "missing.fdb"))
    assert fake_run.calls == []


def test_restore_target_under_regular_file_is_operation_failure(tmp_path, fake_run):
    blocker = tmp_path / "restored"
    blocker.write_text("not a directory")

    with pytest.raises(OperationFailure) as exc:
        _ops().restore("/data/clientes.fbk", str(blocker / "clientes.fdb"))

    assert "Cannot create target directory" in exc.value.message
    assert fake_run.calls == []
