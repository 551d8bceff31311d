"""SSH daemon configuration probe."""

from typing import List, Optional

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, guarded, verdict
from posture_auditor.types import CheckResult, CheckStatus
from posture_auditor.utils.parsers import parse_sshd_time

# (sshd -T keyword, hardened value, check name)
HARDENED_DIRECTIVES = [
    ("passwordauthentication", "no", "Password authentication disabled"),
    ("pubkeyauthentication", "yes", "Public key authentication enabled"),
    ("permitrootlogin", "no", "Root login disabled"),
    ("protocol", "2", "SSH protocol version 2"),
]


def _int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip().isdigit():
        return None
    return int(value)


def probe_ssh(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Compare the effective sshd configuration with hardened values.

    Authentication directives are hard requirements (Fail). The retry and
    grace-time limits are recommendations (Warning). When ``sshd -T`` cannot
    be read every directive check carries the error at its own severity.
    """
    policy = config.ssh
    results: List[CheckResult] = []

    results.append(
        guarded(
            "SSH service running",
            lambda: inspector.is_service_active(policy.service),
            lambda active: f"{policy.service} is {'active' if active else 'not active'}",
        )
    )

    sshd, error = attempt(inspector.get_ssh_config)
    sshd = sshd or {}

    for key, expected, name in HARDENED_DIRECTIVES:
        actual = sshd.get(key)
        if error is not None:
            detail = error
        elif actual is None:
            detail = f"{key} not set (expected {expected})"
        else:
            detail = f"{key} {actual}"
        results.append(verdict(name, actual is not None and actual.lower() == expected, detail))

    max_auth = _int(sshd.get("maxauthtries"))
    if error is not None:
        detail = error
    elif max_auth is None:
        detail = "maxauthtries not reported"
    else:
        detail = f"maxauthtries {max_auth} (recommended: <={policy.max_auth_tries})"
    results.append(
        verdict(
            "Max authentication tries",
            max_auth is not None and max_auth <= policy.max_auth_tries,
            detail,
            otherwise=CheckStatus.WARNING,
        )
    )

    raw_grace = sshd.get("logingracetime")
    grace = parse_sshd_time(raw_grace) if raw_grace is not None else None
    if error is not None:
        detail = error
    elif grace is None:
        detail = "logingracetime not reported"
    elif grace == 0:
        detail = "logingracetime 0 (no limit)"
    else:
        detail = f"logingracetime {grace}s (recommended: <={policy.login_grace_time}s)"
    results.append(
        verdict(
            "Login grace time",
            grace is not None and 0 < grace <= policy.login_grace_time,
            detail,
            otherwise=CheckStatus.WARNING,
        )
    )

    return results
