"""Parsers for the text output of system inspection tools."""

import re
from typing import Dict, List, Optional, Sequence

from posture_auditor.types import FirewallRule, FirewallStatus, SocketEntry, UserInfo

_UFW_RULE = re.compile(
    r"^\[\s*(?P<number>\d+)\]\s+(?P<target>.+?)\s{2,}"
    r"(?P<action>(?:ALLOW|DENY|REJECT|LIMIT)(?:\s+(?:IN|OUT|FWD))?)\s+"
    r"(?P<source>.*?)\s*$"
)
_UFW_DEFAULT = re.compile(r"(\w+) \((incoming|outgoing|routed)\)")
_SSHD_TIME = re.compile(r"(\d+)([smhdwSMHDW]?)")
_TIME_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def parse_sshd_config(output: str) -> Dict[str, str]:
    """Parse ``sshd -T`` output into a lowercase keyword mapping.

    Multi-valued keywords keep their first value.
    """
    settings: Dict[str, str] = {}
    for line in output.splitlines():
        parts = line.strip().split(None, 1)
        if not parts or parts[0].startswith("#"):
            continue
        key = parts[0].lower()
        value = parts[1].strip() if len(parts) > 1 else ""
        settings.setdefault(key, value)
    return settings


def parse_sshd_time(value: str) -> Optional[int]:
    """Convert an sshd time specification (``90``, ``1m30s``) to seconds."""
    value = value.strip()
    if not value or _SSHD_TIME.sub("", value):
        return None
    total = 0
    for amount, unit in _SSHD_TIME.findall(value):
        total += int(amount) * _TIME_UNITS[unit.lower()]
    return total


def parse_ufw_numbered(output: str) -> List[FirewallRule]:
    """Parse ``ufw status numbered`` rule lines."""
    rules: List[FirewallRule] = []
    for line in output.splitlines():
        match = _UFW_RULE.match(line.strip())
        if not match:
            continue
        target = match.group("target")
        source = match.group("source")
        ipv6 = "(v6)" in target or "(v6)" in source
        rules.append(
            FirewallRule(
                number=int(match.group("number")),
                target=target.replace("(v6)", "").strip(),
                action=" ".join(match.group("action").split()),
                source=source,
                ipv6=ipv6,
            )
        )
    return rules


def parse_ufw_status(verbose_output: str, numbered_output: str = "") -> FirewallStatus:
    """Build a firewall snapshot from ``ufw status verbose`` and ``numbered``."""
    active = False
    defaults: Dict[str, str] = {}

    for line in verbose_output.splitlines():
        line = line.strip()
        if line.startswith("Status:"):
            active = line.split(":", 1)[1].strip().lower() == "active"
        elif line.startswith("Default:"):
            for policy, direction in _UFW_DEFAULT.findall(line):
                defaults[direction] = policy.lower()

    return FirewallStatus(
        active=active,
        default_incoming=defaults.get("incoming", ""),
        default_outgoing=defaults.get("outgoing", ""),
        rules=tuple(parse_ufw_numbered(numbered_output)),
    )


def _split_port(address: str) -> Optional[int]:
    _, _, port = address.rpartition(":")
    return int(port) if port.isdigit() else None


def parse_ss_output(output: str) -> List[SocketEntry]:
    """Parse ``ss -H -tan`` output."""
    sockets: List[SocketEntry] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 5 or fields[0] == "State":
            continue
        port = _split_port(fields[3])
        if port is None:
            continue
        sockets.append(SocketEntry("tcp", fields[0].upper(), fields[3], port))
    return sockets


def parse_netstat_output(output: str) -> List[SocketEntry]:
    """Parse ``netstat -tan`` output."""
    sockets: List[SocketEntry] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 6 or not fields[0].startswith("tcp"):
            continue
        port = _split_port(fields[3])
        if port is None:
            continue
        sockets.append(SocketEntry(fields[0], fields[5].upper(), fields[3], port))
    return sockets


def parse_passwd_entry(line: str, groups: Sequence[str] = ()) -> UserInfo:
    """Parse one ``/etc/passwd`` formatted line.

    Raises:
        ValueError: If the line does not have seven fields
    """
    fields = line.strip().split(":")
    if len(fields) != 7:
        raise ValueError(f"Malformed passwd entry: {line!r}")
    return UserInfo(
        name=fields[0],
        uid=int(fields[2]),
        home=fields[5],
        shell=fields[6],
        groups=tuple(groups),
    )


def count_key_entries(content: str) -> int:
    """Count public key entries in an ``authorized_keys`` file."""
    count = 0
    for line in content.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            count += 1
    return count
