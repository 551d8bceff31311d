"""Utility modules for the posture auditor."""

from posture_auditor.utils.command import CommandExecutor
from posture_auditor.utils.validation import Validator

__all__ = ["CommandExecutor", "Validator"]
