"""Command execution utilities."""

import shutil
import subprocess

import structlog

from posture_auditor.exceptions import CommandExecutionError
from posture_auditor.types import CommandResult

logger = structlog.get_logger()


class CommandExecutor:
    """Execute read-only inspection commands with proper error handling."""

    def __init__(self, use_sudo: bool = True, timeout: int = 30) -> None:
        """Initialize command executor.

        Args:
            use_sudo: Whether to prepend ``sudo -n`` to commands requiring root
            timeout: Default command timeout in seconds
        """
        self.use_sudo = use_sudo
        self.timeout = timeout

    def execute(
        self,
        cmd: str,
        needs_root: bool = False,
        check: bool = True,
        timeout: int = 0,
    ) -> CommandResult:
        """Execute command with optional sudo.

        Args:
            cmd: Command to execute
            needs_root: Whether command requires root privileges
            check: Whether to raise exception on failure
            timeout: Command timeout in seconds, 0 for the executor default

        Returns:
            CommandResult with execution details

        Raises:
            CommandExecutionError: If command fails and check=True, or times out
        """
        if needs_root and self.use_sudo:
            cmd = f"sudo -n {cmd}"
        timeout = timeout or self.timeout

        logger.debug("command_started", cmd=cmd)
        try:
            result = subprocess.run(
                cmd,
                shell=True,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning("command_timeout", cmd=cmd, timeout=timeout)
            raise CommandExecutionError(f"Command timed out after {timeout}s: {cmd}") from e
        except OSError as e:
            raise CommandExecutionError(f"Command execution failed: {cmd}\nError: {e}") from e

        cmd_result = CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        )

        if check and not cmd_result.success:
            raise CommandExecutionError(
                f"Command failed: {cmd}\nError: {result.stderr.strip()}"
            )

        return cmd_result

    def check_command_available(self, command: str) -> bool:
        """Check if command is available on system."""
        return shutil.which(command) is not None
