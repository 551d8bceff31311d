"""Listening socket probe."""

from typing import List

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, info, verdict
from posture_auditor.types import CheckResult, CheckStatus


def probe_network(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Classify every distinct listening port against the allow-list."""
    allowed = set(config.network.allowed_ports)
    results: List[CheckResult] = []

    listening, error = attempt(inspector.get_listening_sockets)
    if listening is None:
        results.append(CheckResult("Listening ports", CheckStatus.WARNING, error or ""))
    else:
        ports = sorted({s.port for s in listening})
        results.append(info("Listening ports", f"{len(ports)} ports listening"))
        for port in ports:
            results.append(
                verdict(
                    f"Port {port} listening",
                    port in allowed,
                    "expected" if port in allowed else "not in allow-list",
                    otherwise=CheckStatus.WARNING,
                )
            )

    sockets, error = attempt(inspector.get_sockets)
    if sockets is None:
        results.append(CheckResult("Established connections", CheckStatus.WARNING, error or ""))
    else:
        established = sum(1 for s in sockets if s.established)
        results.append(info("Established connections", f"{established} active connections"))

    return results
