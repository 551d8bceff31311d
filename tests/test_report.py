"""Tests for report aggregation and rendering."""

import io
import json

from rich.console import Console

from posture_auditor.report import AUDIT_THEME, CLOSING_CHECKLIST, AuditReport, Reporter
from posture_auditor.types import CheckResult, CheckStatus


def make_report() -> AuditReport:
    return AuditReport(
        results=[
            CheckResult("Root login disabled", CheckStatus.FAIL, "permitrootlogin yes", "SSH"),
            CheckResult("Max authentication tries", CheckStatus.WARNING, "maxauthtries 6", "SSH"),
            CheckResult("Firewall active", CheckStatus.PASS, "Status: active", "Firewall"),
            CheckResult("Port 8080 listening", CheckStatus.WARNING, "not in allow-list", "Network"),
        ]
    )


def render(report: AuditReport, **kwargs) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, theme=AUDIT_THEME, width=120, color_system=None)
    Reporter(console=console, **kwargs).render(report)
    return buffer.getvalue()


def test_counts_and_score():
    """Test aggregation counts."""
    report = make_report()

    assert report.passed == 1
    assert report.warnings == 2
    assert report.failures == 1
    assert report.score == 25
    assert report.has_failures


def test_empty_report_scores_full():
    """Test an empty report has nothing to fail."""
    report = AuditReport()
    assert report.score == 100
    assert not report.has_failures
    assert report.remediation() == []


def test_remediation_is_computed_from_results():
    """Test remediation lists only probes with problems."""
    lines = make_report().remediation()

    assert lines == [
        "SSH: fix 1 failed check(s): Root login disabled",
        "SSH: review 1 warning(s): Max authentication tries",
        "Network: review 1 warning(s): Port 8080 listening",
    ]


def test_render_text():
    """Test text output carries markers, summary and the fixed checklist."""
    output = render(make_report())

    assert "✗ Root login disabled" in output
    assert "⚠ Max authentication tries" in output
    assert "✓ Firewall active" in output
    assert "permitrootlogin yes" in output
    assert "Security score: 25%" in output
    for i, line in enumerate(CLOSING_CHECKLIST, 1):
        assert f"{i}. {line}" in output


def test_checklist_printed_for_clean_report():
    """Test the closing checklist does not depend on results."""
    report = AuditReport([CheckResult("Firewall active", CheckStatus.PASS, "", "Firewall")])
    output = render(report)

    assert "Required actions" not in output
    assert "5. Keep system packages updated" in output


def test_render_hides_passed_when_quiet():
    """Test quiet rendering drops passing checks."""
    output = render(make_report(), show_passed=False)

    assert "Firewall active" not in output
    assert "Root login disabled" in output


def test_render_escapes_markup():
    """Test bracketed journal text is printed literally."""
    report = AuditReport(
        [CheckResult("Failed login attempts", CheckStatus.WARNING, "sshd[812]: [bold]x", "Logging")]
    )
    assert "sshd[812]: [bold]x" in render(report)


def test_render_json():
    """Test JSON output round-trips the summary."""
    buffer = io.StringIO()
    Reporter(console=Console(file=buffer)).render_json(make_report())
    data = json.loads(buffer.getvalue())

    assert data["summary"] == {
        "total": 4,
        "passed": 1,
        "warnings": 2,
        "failures": 1,
        "score": 25,
    }
    assert data["results"][0]["status"] == "fail"
    assert data["results"][0]["probe"] == "SSH"
