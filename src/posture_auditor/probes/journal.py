"""System journal probe."""

from typing import List

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, guarded, info, verdict
from posture_auditor.types import CheckResult, CheckStatus


def probe_journal(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Check the journal service and scan it for authentication events."""
    policy = config.journal
    results: List[CheckResult] = []

    results.append(
        guarded(
            f"{policy.service} running",
            lambda: inspector.is_service_active(policy.service),
            lambda active: "active" if active else "not active",
        )
    )

    failed, error = attempt(lambda: inspector.query_log(policy.failed_pattern, policy.since))
    if error is not None:
        results.append(CheckResult("Failed login attempts", CheckStatus.WARNING, error))
    elif not failed:
        results.append(verdict("Failed login attempts", True, "none found"))
    else:
        recent = failed[-policy.recent_failures :] if policy.recent_failures else []
        detail = "\n".join([f"{len(failed)} failed attempts"] + recent)
        results.append(CheckResult("Failed login attempts", CheckStatus.WARNING, detail))

    accepted, error = attempt(lambda: inspector.query_log(policy.accepted_pattern, policy.since))
    if error is not None:
        results.append(CheckResult("Accepted SSH sessions", CheckStatus.WARNING, error))
    else:
        sessions = [line for line in accepted or [] if policy.accepted_identifier in line]
        results.append(info("Accepted SSH sessions", f"{len(sessions)} sessions"))

    return results
