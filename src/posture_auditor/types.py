"""Type definitions for the posture auditor."""

from enum import Enum
from typing import NamedTuple, Optional, Tuple


class CheckStatus(str, Enum):
    """Verdict of a single check."""

    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


class CheckResult(NamedTuple):
    """Outcome of one inspected condition."""

    name: str
    status: CheckStatus
    detail: str = ""
    probe: str = ""


class CommandResult(NamedTuple):
    """Result of command execution."""

    success: bool
    stdout: str
    stderr: str
    return_code: int = 0


class FirewallRule(NamedTuple):
    """One line of ``ufw status numbered``."""

    number: int
    target: str
    action: str
    source: str
    ipv6: bool = False

    @property
    def port(self) -> Optional[int]:
        """Port number of the rule target, if it names one."""
        parts = self.target.split()
        if not parts:
            return None
        head = parts[0].split("/")[0]
        return int(head) if head.isdigit() else None


class FirewallStatus(NamedTuple):
    """Firewall state and ruleset."""

    active: bool
    default_incoming: str = ""
    default_outgoing: str = ""
    rules: Tuple[FirewallRule, ...] = ()


class UserInfo(NamedTuple):
    """Account database entry."""

    name: str
    uid: int
    home: str
    shell: str
    groups: Tuple[str, ...] = ()


class FileMeta(NamedTuple):
    """Filesystem metadata for one path."""

    path: str
    exists: bool
    is_dir: bool = False
    mode: int = 0

    @property
    def octal_mode(self) -> str:
        return format(self.mode, "o")


class SocketEntry(NamedTuple):
    """One TCP socket."""

    protocol: str
    state: str
    local_address: str
    port: int

    @property
    def listening(self) -> bool:
        return self.state == "LISTEN"

    @property
    def established(self) -> bool:
        return self.state in ("ESTAB", "ESTABLISHED")
