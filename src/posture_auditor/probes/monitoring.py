"""Monitoring tooling probe."""

from typing import List

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import guarded, verdict
from posture_auditor.types import CheckResult, CheckStatus


def probe_monitoring(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Check monitoring binaries, units and log directories.

    Missing binaries Fail; inactive units and missing directories are Warning,
    including when the service manager itself cannot be queried.
    """
    policy = config.monitoring
    results: List[CheckResult] = []

    for tool in policy.tools:
        present = inspector.command_exists(tool)
        results.append(
            verdict(
                f"{tool} installed",
                present,
                "found on PATH" if present else "not found on PATH",
            )
        )

    for unit in policy.services:
        results.append(
            guarded(
                f"{unit} active",
                lambda unit=unit: inspector.is_service_active(unit),
                lambda active: "active" if active else "not active",
                otherwise=CheckStatus.WARNING,
            )
        )

    for directory in policy.directories:
        results.append(
            guarded(
                f"{directory} exists",
                lambda directory=directory: _is_dir(inspector, directory),
                lambda present: "directory present" if present else "missing",
                otherwise=CheckStatus.WARNING,
            )
        )

    return results


def _is_dir(inspector: SystemInspector, path: str) -> bool:
    meta = inspector.get_file_meta(path)
    return meta.exists and meta.is_dir
