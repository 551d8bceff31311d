"""In-memory system state for offline audits and tests."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from posture_auditor.exceptions import ConfigurationError, InspectionError
from posture_auditor.inspector import SystemInspector
from posture_auditor.types import (
    FileMeta,
    FirewallRule,
    FirewallStatus,
    SocketEntry,
    UserInfo,
)


def _mode(value: Any) -> int:
    """Permission bits from ``"700"`` or an already numeric mode."""
    if isinstance(value, str):
        return int(value, 8)
    return int(value)


@dataclass(frozen=True)
class SystemSnapshot:
    """Everything the probes may observe about a host.

    ``ssh_config`` and ``firewall`` set to None model a host where the
    corresponding tool is not installed.
    """

    uid: int = 1000
    passwordless_sudo: bool = True
    ssh_config: Optional[Mapping[str, str]] = None
    firewall: Optional[FirewallStatus] = None
    users: Mapping[str, UserInfo] = field(default_factory=dict)
    locked_accounts: FrozenSet[str] = frozenset()
    files: Mapping[str, FileMeta] = field(default_factory=dict)
    file_contents: Mapping[str, str] = field(default_factory=dict)
    commands: FrozenSet[str] = frozenset()
    active_services: FrozenSet[str] = frozenset()
    sockets: Tuple[SocketEntry, ...] = ()
    journal: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemSnapshot":
        """Build a snapshot from its JSON representation.

        Raises:
            ConfigurationError: If the document is malformed
        """
        try:
            firewall = None
            if data.get("firewall") is not None:
                fw = data["firewall"]
                firewall = FirewallStatus(
                    active=bool(fw.get("active", False)),
                    default_incoming=fw.get("default_incoming", ""),
                    default_outgoing=fw.get("default_outgoing", ""),
                    rules=tuple(
                        FirewallRule(
                            number=int(rule.get("number", i + 1)),
                            target=str(rule["target"]),
                            action=rule.get("action", "ALLOW IN"),
                            source=rule.get("source", "Anywhere"),
                            ipv6=bool(rule.get("ipv6", False)),
                        )
                        for i, rule in enumerate(fw.get("rules", []))
                    ),
                )

            users = {
                name: UserInfo(
                    name=name,
                    uid=int(entry.get("uid", 1000)),
                    home=entry.get("home", f"/home/{name}"),
                    shell=entry.get("shell", "/bin/sh"),
                    groups=tuple(entry.get("groups", [])),
                )
                for name, entry in data.get("users", {}).items()
            }

            files = {
                path: FileMeta(
                    path=path,
                    exists=bool(entry.get("exists", True)),
                    is_dir=bool(entry.get("is_dir", False)),
                    mode=_mode(entry.get("mode", 0)),
                )
                for path, entry in data.get("files", {}).items()
            }

            sockets = tuple(
                SocketEntry(
                    protocol=entry.get("protocol", "tcp"),
                    state=entry.get("state", "LISTEN").upper(),
                    local_address=entry.get("local_address", f"0.0.0.0:{entry['port']}"),
                    port=int(entry["port"]),
                )
                for entry in data.get("sockets", [])
            )

            ssh_config = data.get("ssh_config")
            return cls(
                uid=int(data.get("uid", 1000)),
                passwordless_sudo=bool(data.get("passwordless_sudo", True)),
                ssh_config=(
                    {k.lower(): str(v) for k, v in ssh_config.items()}
                    if ssh_config is not None
                    else None
                ),
                firewall=firewall,
                users=users,
                locked_accounts=frozenset(data.get("locked_accounts", [])),
                files=files,
                file_contents=dict(data.get("file_contents", {})),
                commands=frozenset(data.get("commands", [])),
                active_services=frozenset(data.get("active_services", [])),
                sockets=sockets,
                journal=tuple(data.get("journal", [])),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid snapshot: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "SystemSnapshot":
        """Load a snapshot from a JSON file."""
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot load snapshot {path}: {e}") from e
        return cls.from_dict(data)


class SnapshotInspector(SystemInspector):
    """Answer inspection queries from a :class:`SystemSnapshot`."""

    def __init__(self, snapshot: SystemSnapshot) -> None:
        self.snapshot = snapshot

    def effective_uid(self) -> int:
        return self.snapshot.uid

    def has_passwordless_sudo(self) -> bool:
        return self.snapshot.passwordless_sudo

    def get_ssh_config(self) -> Dict[str, str]:
        if self.snapshot.ssh_config is None:
            raise InspectionError("sshd is not installed")
        return dict(self.snapshot.ssh_config)

    def get_firewall_status(self) -> FirewallStatus:
        if self.snapshot.firewall is None:
            raise InspectionError("ufw is not installed")
        return self.snapshot.firewall

    def get_user_info(self, username: str) -> Optional[UserInfo]:
        return self.snapshot.users.get(username)

    def is_account_locked(self, username: str) -> bool:
        return username in self.snapshot.locked_accounts

    def get_file_meta(self, path: str) -> FileMeta:
        return self.snapshot.files.get(path, FileMeta(path=path, exists=False))

    def read_file(self, path: str) -> Optional[str]:
        return self.snapshot.file_contents.get(path)

    def command_exists(self, command: str) -> bool:
        return command in self.snapshot.commands

    def is_service_active(self, unit: str) -> bool:
        return unit in self.snapshot.active_services

    def get_sockets(self) -> List[SocketEntry]:
        return list(self.snapshot.sockets)

    def query_log(self, pattern: str, since: Optional[str] = None) -> List[str]:
        # Snapshots carry no timestamps; ``since`` does not narrow the result.
        return [line for line in self.snapshot.journal if pattern in line]
