"""Custom exceptions for the posture auditor."""


class AuditorError(Exception):
    """Base exception for all auditor errors."""

    pass


class ConfigurationError(AuditorError):
    """Raised when configuration is invalid."""

    pass


class ValidationError(ConfigurationError):
    """Raised when a policy value fails validation."""

    pass


class PreconditionError(AuditorError):
    """Raised when the audit must not start."""

    pass


class RunningAsRootError(PreconditionError, PermissionError):
    """Raised when the audit is invoked by the superuser."""

    pass


class PrivilegeError(PreconditionError):
    """Raised when the operator cannot elevate without a password prompt."""

    pass


class InspectionError(AuditorError):
    """Raised when system state cannot be inspected."""

    pass


class CommandExecutionError(InspectionError):
    """Raised when command execution fails."""

    pass
