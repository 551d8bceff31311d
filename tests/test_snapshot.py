"""Tests for snapshot loading."""

import json

import pytest

from posture_auditor.exceptions import ConfigurationError, InspectionError
from posture_auditor.snapshot import SnapshotInspector, SystemSnapshot

SNAPSHOT = {
    "uid": 1000,
    "ssh_config": {"PasswordAuthentication": "no"},
    "firewall": {
        "active": True,
        "default_incoming": "deny",
        "default_outgoing": "allow",
        "rules": [{"target": "22/tcp"}, {"target": "80/tcp", "ipv6": True}],
    },
    "users": {"admin": {"shell": "/bin/bash", "groups": ["sudo"]}},
    "files": {"/home/admin/.ssh": {"is_dir": True, "mode": "700"}},
    "commands": ["htop"],
    "sockets": [{"port": 22}, {"port": 22, "state": "estab", "local_address": "10.0.0.5:22"}],
    "journal": ["sshd[1]: Accepted publickey for admin"],
}


def test_from_dict():
    """Test JSON snapshot fields map onto inspection types."""
    snapshot = SystemSnapshot.from_dict(SNAPSHOT)
    inspector = SnapshotInspector(snapshot)

    assert inspector.get_ssh_config() == {"passwordauthentication": "no"}
    assert [r.number for r in inspector.get_firewall_status().rules] == [1, 2]
    assert inspector.get_firewall_status().rules[1].ipv6
    assert inspector.get_user_info("admin").home == "/home/admin"
    assert inspector.get_file_meta("/home/admin/.ssh").mode == 0o700
    assert not inspector.get_file_meta("/etc/missing").exists
    assert inspector.command_exists("htop")
    assert len(inspector.get_listening_sockets()) == 1
    assert inspector.get_sockets()[1].established
    assert inspector.query_log("Accepted") == SNAPSHOT["journal"]


def test_missing_tools_raise():
    """Test absent sections model uninstalled tools."""
    inspector = SnapshotInspector(SystemSnapshot())

    with pytest.raises(InspectionError):
        inspector.get_ssh_config()
    with pytest.raises(InspectionError):
        inspector.get_firewall_status()


def test_load(tmp_path):
    """Test snapshots load from disk."""
    path = tmp_path / "host.json"
    path.write_text(json.dumps(SNAPSHOT))
    assert SystemSnapshot.load(path).uid == 1000


def test_load_invalid(tmp_path):
    """Test malformed snapshots are configuration errors."""
    path = tmp_path / "host.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        SystemSnapshot.load(path)

    with pytest.raises(ConfigurationError):
        SystemSnapshot.from_dict({"sockets": [{"state": "LISTEN"}]})
