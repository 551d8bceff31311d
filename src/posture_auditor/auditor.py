"""Audit orchestration."""

from typing import List, Optional, Sequence

import structlog

from posture_auditor.config import AuditorConfig
from posture_auditor.exceptions import InspectionError, PrivilegeError, RunningAsRootError
from posture_auditor.inspector import LiveInspector, SystemInspector
from posture_auditor.probes import PROBES, Probe
from posture_auditor.report import AuditReport
from posture_auditor.types import CheckResult, CheckStatus

logger = structlog.get_logger()


class PostureAuditor:
    """Run the probe sequence against one inspector."""

    def __init__(
        self,
        config: AuditorConfig,
        inspector: Optional[SystemInspector] = None,
        probes: Optional[Sequence[Probe]] = None,
    ) -> None:
        """Initialize auditor.

        Args:
            config: Configuration object
            inspector: System inspector, a live one if omitted
            probes: Probes to run, all of them in canonical order if omitted
        """
        self.config = config
        self.inspector = inspector or LiveInspector(timeout=config.command_timeout)
        self.probes = list(probes) if probes is not None else list(PROBES)

    def check_preconditions(self) -> None:
        """Refuse to audit as root or without passwordless sudo.

        Raises:
            RunningAsRootError: If running as the superuser
            PrivilegeError: If sudo would prompt for a password
        """
        if self.inspector.effective_uid() == 0:
            raise RunningAsRootError("This audit should not be run as root")

        if not self.inspector.has_passwordless_sudo():
            raise PrivilegeError("This audit requires passwordless sudo privileges")

        logger.info("preconditions_passed")

    def run_probe(self, probe: Probe) -> List[CheckResult]:
        """Run one probe, recording inspection errors as a Fail result."""
        logger.info("probe_started", probe=probe.key)
        try:
            results = probe.func(self.inspector, self.config)
        except InspectionError as e:
            logger.warning("probe_failed", probe=probe.key, error=str(e))
            results = [CheckResult(f"{probe.title} inspection", CheckStatus.FAIL, str(e))]
        except Exception as e:
            logger.exception("probe_crashed", probe=probe.key)
            results = [
                CheckResult(
                    f"{probe.title} inspection",
                    CheckStatus.FAIL,
                    f"unexpected error: {e}",
                )
            ]

        return [r._replace(probe=probe.title) for r in results]

    def run(self, check_preconditions: bool = True) -> AuditReport:
        """Execute the audit.

        Args:
            check_preconditions: Whether to run the privilege gate first

        Returns:
            Report with every probe's results in probe order

        Raises:
            PreconditionError: If the privilege gate refuses to run
        """
        if check_preconditions:
            self.check_preconditions()

        report = AuditReport()
        for probe in self.probes:
            report.results.extend(self.run_probe(probe))

        logger.info(
            "audit_completed",
            passed=report.passed,
            warnings=report.warnings,
            failures=report.failures,
        )
        return report
