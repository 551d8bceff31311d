"""Posture Auditor - read-only security posture checks for hardened Linux hosts."""

__version__ = "1.0.0"
__author__ = "DevOps Team"
__license__ = "MIT"

from posture_auditor.auditor import PostureAuditor
from posture_auditor.exceptions import (
    AuditorError,
    ConfigurationError,
    InspectionError,
    PreconditionError,
    PrivilegeError,
    RunningAsRootError,
)
from posture_auditor.inspector import LiveInspector, SystemInspector
from posture_auditor.report import AuditReport, Reporter
from posture_auditor.snapshot import SnapshotInspector, SystemSnapshot
from posture_auditor.types import CheckResult, CheckStatus

__all__ = [
    "PostureAuditor",
    "SystemInspector",
    "LiveInspector",
    "SnapshotInspector",
    "SystemSnapshot",
    "AuditReport",
    "Reporter",
    "CheckResult",
    "CheckStatus",
    "AuditorError",
    "ConfigurationError",
    "InspectionError",
    "PreconditionError",
    "PrivilegeError",
    "RunningAsRootError",
]
