"""Input validation utilities."""

import re
from typing import Iterable, List

from posture_auditor.exceptions import ValidationError

_USERNAME = re.compile(r"^[a-z_][a-z0-9_.-]*\$?$")


class Validator:
    """Validate audit policy values."""

    @staticmethod
    def validate_port(port: int) -> None:
        """Validate port number.

        Args:
            port: Port number to validate

        Raises:
            ValidationError: If port is invalid
        """
        if not (1 <= port <= 65535):
            raise ValidationError(f"Invalid port: {port}. Must be between 1-65535")

    @staticmethod
    def validate_ports(ports: Iterable[int]) -> List[str]:
        """Validate a collection of port numbers.

        Returns:
            List of validation error messages
        """
        errors: List[str] = []
        for port in ports:
            try:
                Validator.validate_port(port)
            except ValidationError as e:
                errors.append(str(e))
        return errors

    @staticmethod
    def validate_username(username: str) -> List[str]:
        """Validate an account name.

        Args:
            username: Username to validate

        Returns:
            List of validation error messages
        """
        errors: List[str] = []

        if not username or not username.strip():
            errors.append("Empty username found")
            return errors

        if len(username) > 32:
            errors.append(f"Username too long: {username}")

        if not _USERNAME.match(username):
            errors.append(f"Invalid username format: {username}")

        return errors

    @staticmethod
    def validate_absolute_paths(paths: Iterable[str]) -> List[str]:
        """Check that every configured path is absolute."""
        return [f"Path must be absolute: {p}" for p in paths if not p.startswith("/")]
