"""Read-only system inspection for the posture auditor."""

import os
import shlex
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import structlog

from posture_auditor.exceptions import InspectionError
from posture_auditor.types import FileMeta, FirewallStatus, SocketEntry, UserInfo
from posture_auditor.utils.command import CommandExecutor
from posture_auditor.utils.parsers import (
    parse_netstat_output,
    parse_passwd_entry,
    parse_ss_output,
    parse_sshd_config,
    parse_ufw_status,
)

logger = structlog.get_logger()

SSHD_CANDIDATES = ["sshd", "/usr/sbin/sshd", "/usr/local/sbin/sshd"]
UFW_CANDIDATES = ["ufw", "/usr/sbin/ufw"]


class SystemInspector(ABC):
    """Read-only view of the system state the probes examine.

    Implementations raise :class:`InspectionError` when a subsystem cannot be
    queried at all. They never modify the host.
    """

    @abstractmethod
    def effective_uid(self) -> int:
        """Effective uid of the auditing process."""

    @abstractmethod
    def has_passwordless_sudo(self) -> bool:
        """Whether ``sudo`` works without a password prompt."""

    @abstractmethod
    def get_ssh_config(self) -> Dict[str, str]:
        """Effective SSH daemon configuration, lowercase keywords."""

    @abstractmethod
    def get_firewall_status(self) -> FirewallStatus:
        """Firewall state, default policies and numbered rules."""

    @abstractmethod
    def get_user_info(self, username: str) -> Optional[UserInfo]:
        """Account entry, or None if the account does not exist."""

    @abstractmethod
    def is_account_locked(self, username: str) -> bool:
        """Whether the account password is locked."""

    @abstractmethod
    def get_file_meta(self, path: str) -> FileMeta:
        """Existence, type and permission bits of a path."""

    @abstractmethod
    def read_file(self, path: str) -> Optional[str]:
        """File content, or None if the file does not exist."""

    @abstractmethod
    def command_exists(self, command: str) -> bool:
        """Whether a binary is on the search path."""

    @abstractmethod
    def is_service_active(self, unit: str) -> bool:
        """Whether a service manager unit is active."""

    @abstractmethod
    def get_sockets(self) -> List[SocketEntry]:
        """All TCP sockets, listening and connected."""

    @abstractmethod
    def query_log(self, pattern: str, since: Optional[str] = None) -> List[str]:
        """Journal lines containing ``pattern``, oldest first."""

    def get_listening_sockets(self) -> List[SocketEntry]:
        return [s for s in self.get_sockets() if s.listening]


class LiveInspector(SystemInspector):
    """Inspect the running host by calling system tools."""

    def __init__(self, executor: Optional[CommandExecutor] = None, timeout: int = 30) -> None:
        """Initialize live inspector.

        Args:
            executor: Command executor, created with sudo for non-root users if omitted
            timeout: Per-command timeout in seconds
        """
        self.executor = executor or CommandExecutor(
            use_sudo=os.geteuid() != 0, timeout=timeout
        )
        self._journal: Dict[Optional[str], List[str]] = {}
        self._sockets: Optional[List[SocketEntry]] = None

    def effective_uid(self) -> int:
        return os.geteuid()

    def has_passwordless_sudo(self) -> bool:
        """Check if current user can use sudo without a prompt."""
        if not self.executor.check_command_available("sudo"):
            return False

        result = self.executor.execute("sudo -n true", check=False)
        return result.success

    def _find_command(self, candidates: List[str]) -> str:
        for candidate in candidates:
            if self.executor.check_command_available(candidate):
                return candidate
        raise InspectionError(f"{candidates[0]} is not installed")

    def get_ssh_config(self) -> Dict[str, str]:
        sshd = self._find_command(SSHD_CANDIDATES)
        result = self.executor.execute(f"{sshd} -T", needs_root=True)
        return parse_sshd_config(result.stdout)

    def get_firewall_status(self) -> FirewallStatus:
        ufw = self._find_command(UFW_CANDIDATES)
        verbose = self.executor.execute(f"{ufw} status verbose", needs_root=True)
        numbered = self.executor.execute(
            f"{ufw} status numbered", needs_root=True, check=False
        )
        return parse_ufw_status(verbose.stdout, numbered.stdout)

    def get_user_info(self, username: str) -> Optional[UserInfo]:
        name = shlex.quote(username)
        result = self.executor.execute(f"getent passwd {name}", check=False)
        if result.return_code == 2:
            return None
        if not result.success:
            raise InspectionError(f"getent failed for {username}: {result.stderr.strip()}")

        groups = self.executor.execute(f"id -nG {name}", check=False)
        try:
            return parse_passwd_entry(
                result.stdout.splitlines()[0], groups.stdout.split()
            )
        except (IndexError, ValueError) as e:
            raise InspectionError(f"Unreadable account entry for {username}") from e

    def is_account_locked(self, username: str) -> bool:
        result = self.executor.execute(
            f"passwd -S {shlex.quote(username)}", needs_root=True
        )
        fields = result.stdout.split()
        return len(fields) > 1 and fields[1] == "L"

    def get_file_meta(self, path: str) -> FileMeta:
        result = self.executor.execute(
            f"stat -c '%a %F' {shlex.quote(path)}", needs_root=True, check=False
        )
        if not result.success:
            if "No such file" in result.stderr:
                return FileMeta(path=path, exists=False)
            raise InspectionError(f"Cannot stat {path}: {result.stderr.strip()}")

        mode, _, kind = result.stdout.strip().partition(" ")
        return FileMeta(path=path, exists=True, is_dir=kind == "directory", mode=int(mode, 8))

    def read_file(self, path: str) -> Optional[str]:
        result = self.executor.execute(
            f"cat {shlex.quote(path)}", needs_root=True, check=False
        )
        if result.success:
            return result.stdout
        if "No such file" in result.stderr:
            return None
        raise InspectionError(f"Cannot read {path}: {result.stderr.strip()}")

    def command_exists(self, command: str) -> bool:
        return self.executor.check_command_available(command)

    def is_service_active(self, unit: str) -> bool:
        if not self.executor.check_command_available("systemctl"):
            raise InspectionError("systemctl is not installed")
        result = self.executor.execute(
            f"systemctl is-active --quiet {shlex.quote(unit)}", check=False
        )
        return result.success

    def get_sockets(self) -> List[SocketEntry]:
        """Socket table, read once per inspector."""
        if self._sockets is None:
            self._sockets = self._read_sockets()
        return self._sockets

    def _read_sockets(self) -> List[SocketEntry]:
        if self.executor.check_command_available("ss"):
            result = self.executor.execute("ss -H -tan", needs_root=True)
            return parse_ss_output(result.stdout)
        if self.executor.check_command_available("netstat"):
            result = self.executor.execute("netstat -tan", needs_root=True)
            return parse_netstat_output(result.stdout)
        raise InspectionError("Neither ss nor netstat is installed")

    def query_log(self, pattern: str, since: Optional[str] = None) -> List[str]:
        if since not in self._journal:
            if not self.executor.check_command_available("journalctl"):
                raise InspectionError("journalctl is not installed")
            cmd = "journalctl --no-pager -q"
            if since:
                cmd += f" --since {shlex.quote(since)}"
            result = self.executor.execute(cmd, needs_root=True, timeout=120)
            self._journal[since] = result.stdout.splitlines()
            logger.debug("journal_loaded", lines=len(self._journal[since]), since=since)

        return [line for line in self._journal[since] if pattern in line]
