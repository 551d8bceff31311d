"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from typing import Iterator

import pytest
import structlog

from posture_auditor.config import AuditorConfig
from posture_auditor.log import configure_logging
from posture_auditor.snapshot import SnapshotInspector, SystemSnapshot
from posture_auditor.types import FileMeta, FirewallRule, FirewallStatus, SocketEntry, UserInfo

ADMIN_KEYS = "/home/admin/.ssh/authorized_keys"


def _dir(path: str, mode: int = 0o755) -> FileMeta:
    return FileMeta(path=path, exists=True, is_dir=True, mode=mode)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep stray .env files and environment overrides out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith(("AUDIT_", "LOG_")):
            monkeypatch.delenv(name)
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "COLUMNS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def fresh_logging() -> Iterator[None]:
    """Start every test from the default logging setup."""
    configure_logging()
    yield
    structlog.reset_defaults()


@pytest.fixture
def config() -> AuditorConfig:
    """Create default configuration."""
    return AuditorConfig.from_env()


@pytest.fixture
def hardened_snapshot() -> SystemSnapshot:
    """A host in the target secure state."""
    return SystemSnapshot(
        uid=1000,
        passwordless_sudo=True,
        ssh_config={
            "passwordauthentication": "no",
            "pubkeyauthentication": "yes",
            "permitrootlogin": "no",
            "protocol": "2",
            "maxauthtries": "3",
            "logingracetime": "30",
        },
        firewall=FirewallStatus(
            active=True,
            default_incoming="deny",
            default_outgoing="allow",
            rules=(
                FirewallRule(1, "22/tcp", "ALLOW IN", "Anywhere"),
                FirewallRule(2, "80/tcp", "ALLOW IN", "Anywhere"),
                FirewallRule(3, "443/tcp", "ALLOW IN", "Anywhere"),
                FirewallRule(4, "22/tcp", "ALLOW IN", "Anywhere (v6)", ipv6=True),
            ),
        ),
        users={
            "admin": UserInfo("admin", 1000, "/home/admin", "/bin/bash", ("admin", "sudo")),
        },
        locked_accounts=frozenset({"root"}),
        files={
            "/home/admin/.ssh": _dir("/home/admin/.ssh", 0o700),
            ADMIN_KEYS: FileMeta(ADMIN_KEYS, exists=True, is_dir=False, mode=0o600),
            "/var/log/monitoring": _dir("/var/log/monitoring"),
            "/var/log/monitoring/glances": _dir("/var/log/monitoring/glances"),
            "/var/log/monitoring/system": _dir("/var/log/monitoring/system"),
        },
        file_contents={
            "/etc/sudoers.d/admin": "admin ALL=(ALL) NOPASSWD:ALL\n",
            ADMIN_KEYS: "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIB admin@laptop\n",
        },
        commands=frozenset({"htop", "glances", "iotop"}),
        active_services=frozenset(
            {"ssh", "glances-monitor.service", "system-monitor.timer", "systemd-journald"}
        ),
        sockets=(
            SocketEntry("tcp", "LISTEN", "0.0.0.0:22", 22),
            SocketEntry("tcp", "LISTEN", "[::]:22", 22),
            SocketEntry("tcp", "LISTEN", "0.0.0.0:80", 80),
            SocketEntry("tcp", "LISTEN", "0.0.0.0:61208", 61208),
            SocketEntry("tcp", "ESTAB", "10.0.0.5:22", 22),
        ),
        journal=(
            "Oct 17 09:12:01 web sshd[812]: Accepted publickey for admin from 10.0.0.1 port 50000 ssh2",
        ),
    )


@pytest.fixture
def default_snapshot() -> SystemSnapshot:
    """A freshly installed host with nothing hardened."""
    return SystemSnapshot(
        uid=1000,
        passwordless_sudo=True,
        ssh_config={
            "passwordauthentication": "yes",
            "pubkeyauthentication": "no",
            "permitrootlogin": "prohibit-password",
            "maxauthtries": "6",
            "logingracetime": "120",
        },
        firewall=FirewallStatus(active=False),
        commands=frozenset(),
        active_services=frozenset({"systemd-journald"}),
    )


@pytest.fixture
def hardened(hardened_snapshot: SystemSnapshot) -> SnapshotInspector:
    return SnapshotInspector(hardened_snapshot)


@pytest.fixture
def unhardened(default_snapshot: SystemSnapshot) -> SnapshotInspector:
    return SnapshotInspector(default_snapshot)
