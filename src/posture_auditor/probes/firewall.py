"""Firewall ruleset probe."""

from typing import List, Set

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, verdict
from posture_auditor.types import CheckResult, CheckStatus, FirewallStatus

ACCEPTING_ACTIONS = ("ALLOW", "LIMIT")


def probe_firewall(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Check firewall state, default policies and the allowed port set.

    An inactive firewall does not stop the policy and rule checks.
    IPv6 mirrors of IPv4 rules are not counted.
    """
    policy = config.firewall
    ports = ", ".join(str(p) for p in sorted(set(policy.expected_ports)))
    names = [
        ("Firewall active", CheckStatus.FAIL),
        (f"Default incoming policy: {policy.default_incoming}", CheckStatus.FAIL),
        (f"Default outgoing policy: {policy.default_outgoing}", CheckStatus.FAIL),
        (f"Allowed ports ({ports})", CheckStatus.WARNING),
    ]

    status, error = attempt(inspector.get_firewall_status)
    if status is None:
        return [CheckResult(name, severity, error or "") for name, severity in names]

    return [
        verdict(
            names[0][0],
            status.active,
            "Status: active" if status.active else "Status: inactive",
        ),
        verdict(
            names[1][0],
            status.default_incoming == policy.default_incoming,
            f"incoming: {status.default_incoming or 'unknown'}",
        ),
        verdict(
            names[2][0],
            status.default_outgoing == policy.default_outgoing,
            f"outgoing: {status.default_outgoing or 'unknown'}",
        ),
        _allowed_ports(names[3][0], status, set(policy.expected_ports)),
    ]


def _allowed_ports(name: str, status: FirewallStatus, expected: Set[int]) -> CheckResult:
    matching = [
        rule
        for rule in status.rules
        if not rule.ipv6
        and rule.port in expected
        and rule.action.startswith(ACCEPTING_ACTIONS)
    ]
    return verdict(
        name,
        len(matching) == len(expected),
        f"{len(matching)} matching rules, expected {len(expected)}",
        otherwise=CheckStatus.WARNING,
    )
