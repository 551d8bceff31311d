"""Audit results aggregation and rendering."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from posture_auditor import __version__
from posture_auditor.types import CheckResult, CheckStatus

AUDIT_THEME = Theme(
    {
        "header": "bold cyan",
        "section": "bold blue",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "detail": "dim",
    }
)

MARKERS = {
    CheckStatus.PASS: ("✓", "success"),
    CheckStatus.WARNING: ("⚠", "warning"),
    CheckStatus.FAIL: ("✗", "error"),
}

CLOSING_CHECKLIST = [
    "Review any warnings or errors above",
    "Ensure all security measures are properly configured",
    "Run this check regularly to maintain security",
    "Monitor system logs for suspicious activity",
    "Keep system packages updated",
]


@dataclass
class AuditReport:
    """Ordered check results of one audit run."""

    results: List[CheckResult] = field(default_factory=list)

    def count(self, status: CheckStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def passed(self) -> int:
        return self.count(CheckStatus.PASS)

    @property
    def warnings(self) -> int:
        return self.count(CheckStatus.WARNING)

    @property
    def failures(self) -> int:
        return self.count(CheckStatus.FAIL)

    @property
    def has_failures(self) -> bool:
        return self.failures > 0

    @property
    def score(self) -> int:
        """Percentage of passing checks."""
        if not self.results:
            return 100
        return round(100 * self.passed / len(self.results))

    def by_probe(self) -> Dict[str, List[CheckResult]]:
        """Results grouped by probe, in run order."""
        groups: Dict[str, List[CheckResult]] = {}
        for result in self.results:
            groups.setdefault(result.probe, []).append(result)
        return groups

    def remediation(self) -> List[str]:
        """One action line per probe that reported problems."""
        lines: List[str] = []
        for probe, results in self.by_probe().items():
            failed = [r.name for r in results if r.status == CheckStatus.FAIL]
            warned = [r.name for r in results if r.status == CheckStatus.WARNING]
            if failed:
                lines.append(f"{probe}: fix {len(failed)} failed check(s): {', '.join(failed)}")
            if warned:
                lines.append(f"{probe}: review {len(warned)} warning(s): {', '.join(warned)}")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": __version__,
            "summary": {
                "total": len(self.results),
                "passed": self.passed,
                "warnings": self.warnings,
                "failures": self.failures,
                "score": self.score,
            },
            "results": [
                {
                    "probe": r.probe,
                    "name": r.name,
                    "status": r.status.value,
                    "detail": r.detail,
                }
                for r in self.results
            ],
            "remediation": self.remediation(),
        }


class Reporter:
    """Render an :class:`AuditReport` to the terminal."""

    def __init__(self, console: Optional[Console] = None, show_passed: bool = True) -> None:
        """Initialize reporter.

        Args:
            console: Rich console, stdout with the audit theme if omitted
            show_passed: Whether to print passing checks
        """
        self.console = console or Console(theme=AUDIT_THEME, highlight=False, emoji=False)
        self.show_passed = show_passed

    def render(self, report: AuditReport) -> None:
        """Print results, summary, remediation and the closing checklist."""
        self.console.print(f"[header]=== Linux Server Security Check (v{__version__}) ===[/header]")
        self.console.print()

        for probe, results in report.by_probe().items():
            shown = [r for r in results if self.show_passed or r.status != CheckStatus.PASS]
            if not shown:
                continue
            self.console.print(f"[section]{escape(probe)}[/section]")
            self.console.print(f"[section]{'=' * 42}[/section]")
            for result in shown:
                self.render_result(result)
            self.console.print()

        self.render_summary(report)

    def render_result(self, result: CheckResult) -> None:
        marker, style = MARKERS[result.status]
        self.console.print(f"[{style}]{marker}[/{style}] {escape(result.name)}")
        for line in result.detail.splitlines():
            self.console.print(f"    [detail]{escape(line)}[/detail]")

    def render_summary(self, report: AuditReport) -> None:
        style = "error" if report.failures else "warning" if report.warnings else "success"
        self.console.print("[section]Summary[/section]")
        self.console.print(f"[section]{'=' * 42}[/section]")
        self.console.print(
            f"Checks: {len(report.results)}  "
            f"[success]passed {report.passed}[/success]  "
            f"[warning]warnings {report.warnings}[/warning]  "
            f"[error]failed {report.failures}[/error]"
        )
        self.console.print(f"Security score: [{style}]{report.score}%[/{style}]")

        remediation = report.remediation()
        if remediation:
            self.console.print()
            self.console.print("Required actions:")
            for line in remediation:
                self.console.print(f"  • {escape(line)}")

        self.console.print()
        self.console.print("Recommendations:")
        for i, line in enumerate(CLOSING_CHECKLIST, 1):
            self.console.print(f"{i}. {line}")

    def render_json(self, report: AuditReport) -> None:
        self.console.out(json.dumps(report.to_dict(), indent=2), highlight=False)
