"""Tests for the command-line interface."""

import json

import pytest

from posture_auditor.main import EXIT_FAILURES, EXIT_OK, EXIT_PRECONDITION, main

HARDENED = {
    "uid": 1000,
    "passwordless_sudo": True,
    "ssh_config": {
        "passwordauthentication": "no",
        "pubkeyauthentication": "yes",
        "permitrootlogin": "no",
        "protocol": "2",
        "maxauthtries": "3",
        "logingracetime": "30",
    },
    "firewall": {
        "active": True,
        "default_incoming": "deny",
        "default_outgoing": "allow",
        "rules": [{"target": "22/tcp"}, {"target": "80/tcp"}, {"target": "443/tcp"}],
    },
    "users": {"admin": {"shell": "/bin/bash", "groups": ["admin", "sudo"]}},
    "locked_accounts": ["root"],
    "files": {
        "/home/admin/.ssh": {"is_dir": True, "mode": "700"},
        "/home/admin/.ssh/authorized_keys": {"mode": "600"},
        "/var/log/monitoring": {"is_dir": True, "mode": "755"},
        "/var/log/monitoring/glances": {"is_dir": True, "mode": "755"},
        "/var/log/monitoring/system": {"is_dir": True, "mode": "755"},
    },
    "file_contents": {
        "/etc/sudoers.d/admin": "admin ALL=(ALL) NOPASSWD:ALL\n",
        "/home/admin/.ssh/authorized_keys": "ssh-ed25519 AAAA admin@laptop\n",
    },
    "commands": ["htop", "glances", "iotop"],
    "active_services": [
        "ssh",
        "glances-monitor.service",
        "system-monitor.timer",
        "systemd-journald",
    ],
    "sockets": [{"port": 22}, {"port": 443}],
    "journal": [],
}


@pytest.fixture
def write_snapshot(tmp_path):
    def _write(**overrides):
        data = dict(HARDENED, **overrides)
        path = tmp_path / "host.json"
        path.write_text(json.dumps(data))
        return str(path)

    return _write


def run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_hardened_snapshot_text(write_snapshot, capsys):
    """Test a clean audit prints the report and exits 0."""
    code = run(["--snapshot", write_snapshot(), "--strict"])
    out = capsys.readouterr().out

    assert code == EXIT_OK
    assert "✓ Password authentication disabled" in out
    assert "Security score: 100%" in out
    assert "1. Review any warnings or errors above" in out


def test_failures_exit_zero_without_strict(write_snapshot, capsys):
    """Test failures do not change the exit status by default."""
    path = write_snapshot(ssh_config={"passwordauthentication": "yes"})
    assert run(["--snapshot", path]) == EXIT_OK
    assert "✗ Password authentication disabled" in capsys.readouterr().out


def test_strict_exits_one_on_failure(write_snapshot):
    """Test --strict reflects Fail results in the exit status."""
    path = write_snapshot(ssh_config={"passwordauthentication": "yes"})
    assert run(["--snapshot", path, "--strict"]) == EXIT_FAILURES


def test_strict_ignores_warnings(write_snapshot):
    """Test warnings alone keep a zero exit status in strict mode."""
    path = write_snapshot(sockets=[{"port": 22}, {"port": 8080}])
    assert run(["--snapshot", path, "--strict"]) == EXIT_OK


def test_root_refused(write_snapshot, capsys):
    """Test the precondition gate exits 2 before printing a report."""
    code = run(["--snapshot", write_snapshot(uid=0)])
    captured = capsys.readouterr()

    assert code == EXIT_PRECONDITION
    assert "should not be run as root" in captured.err
    assert "Summary" not in captured.out


def test_missing_sudo_refused(write_snapshot, capsys):
    """Test a prompt-only sudo setup exits 2."""
    code = run(["--snapshot", write_snapshot(passwordless_sudo=False)])
    assert code == EXIT_PRECONDITION
    assert "passwordless sudo" in capsys.readouterr().err


def test_skip_preconditions(write_snapshot):
    """Test the gate can be skipped for snapshot replays."""
    assert run(["--snapshot", write_snapshot(uid=0), "--skip-preconditions"]) == EXIT_OK


def test_json_output_with_only(write_snapshot, capsys):
    """Test JSON output for a probe subset."""
    code = run(["--snapshot", write_snapshot(), "--format", "json", "--only", "firewall"])
    data = json.loads(capsys.readouterr().out)

    assert code == EXIT_OK
    assert {r["probe"] for r in data["results"]} == {"Firewall"}
    assert data["summary"]["failures"] == 0


def test_admin_user_override(write_snapshot, capsys):
    """Test --admin-user changes the audited account."""
    code = run(["--snapshot", write_snapshot(), "--only", "users", "--admin-user", "ops"])
    out = capsys.readouterr().out

    assert code == EXIT_OK
    assert "✗ Admin account exists" in out


def test_invalid_admin_user(write_snapshot, capsys):
    """Test configuration issues exit 1."""
    assert run(["--snapshot", write_snapshot(), "--admin-user", "Bad User"]) == EXIT_FAILURES
    assert "Invalid username format" in capsys.readouterr().err


def test_missing_snapshot(tmp_path, capsys):
    """Test an unreadable snapshot exits 1."""
    assert run(["--snapshot", str(tmp_path / "nope.json")]) == EXIT_FAILURES
    assert "Cannot load snapshot" in capsys.readouterr().err
