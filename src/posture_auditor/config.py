"""Configuration management for the posture auditor."""

from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from posture_auditor.utils.validation import Validator

StrList = Annotated[List[str], NoDecode]
PortList = Annotated[List[int], NoDecode]


def _split_list(v: object) -> object:
    """Accept comma-separated strings wherever a list is expected."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class SSHPolicy(BaseSettings):
    """Hardened SSH daemon values."""

    service: str = Field(default="ssh", description="SSH daemon unit name")
    max_auth_tries: int = Field(default=3, ge=1)
    login_grace_time: int = Field(default=60, ge=1, description="Seconds")

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_SSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class FirewallPolicy(BaseSettings):
    """Expected firewall ruleset."""

    expected_ports: PortList = Field(default_factory=lambda: [22, 80, 443])
    default_incoming: str = Field(default="deny")
    default_outgoing: str = Field(default="allow")

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_FIREWALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("expected_ports", mode="before")
    @classmethod
    def parse_ports(cls, v: object) -> object:
        """Parse ports from comma-separated string or list."""
        return _split_list(v)


class AccountPolicy(BaseSettings):
    """Designated admin account."""

    admin_user: str = Field(default="admin")
    sudo_group: str = Field(default="sudo")
    shell: str = Field(default="/bin/bash")
    sudoers_file: Optional[str] = Field(
        default=None, description="Defaults to /etc/sudoers.d/<admin_user>"
    )
    sudoers_directive: Optional[str] = Field(
        default=None, description="Defaults to '<admin_user> ALL=(ALL) NOPASSWD:ALL'"
    )
    ssh_dir_mode: int = Field(default=0o700)
    authorized_keys_mode: int = Field(default=0o600)

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_ACCOUNT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ssh_dir_mode", "authorized_keys_mode", mode="before")
    @classmethod
    def parse_octal(cls, v: object) -> object:
        """Read permission modes written as octal strings, e.g. ``700``."""
        if isinstance(v, str):
            return int(v, 8)
        return v

    @property
    def sudoers_path(self) -> str:
        return self.sudoers_file or f"/etc/sudoers.d/{self.admin_user}"

    @property
    def sudoers_line(self) -> str:
        return self.sudoers_directive or f"{self.admin_user} ALL=(ALL) NOPASSWD:ALL"


class MonitoringPolicy(BaseSettings):
    """Monitoring tools, units and directories that must be present."""

    tools: StrList = Field(default_factory=lambda: ["htop", "glances", "iotop"])
    services: StrList = Field(
        default_factory=lambda: ["glances-monitor.service", "system-monitor.timer"]
    )
    directories: StrList = Field(
        default_factory=lambda: [
            "/var/log/monitoring",
            "/var/log/monitoring/glances",
            "/var/log/monitoring/system",
        ]
    )

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_MONITORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("tools", "services", "directories", mode="before")
    @classmethod
    def parse_names(cls, v: object) -> object:
        """Parse names from comma-separated string or list."""
        return _split_list(v)


class NetworkPolicy(BaseSettings):
    """Ports allowed to listen."""

    allowed_ports: PortList = Field(default_factory=lambda: [22, 80, 443, 61208])

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_NETWORK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("allowed_ports", mode="before")
    @classmethod
    def parse_ports(cls, v: object) -> object:
        """Parse ports from comma-separated string or list."""
        return _split_list(v)


class JournalPolicy(BaseSettings):
    """System journal queries."""

    service: str = Field(default="systemd-journald")
    failed_pattern: str = Field(default="Failed password")
    accepted_pattern: str = Field(default="Accepted")
    accepted_identifier: str = Field(default="sshd")
    recent_failures: int = Field(default=3, ge=0)
    since: Optional[str] = Field(
        default=None, description="journalctl --since value, e.g. '-7d'"
    )

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_JOURNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="WARNING")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class AuditorConfig(BaseSettings):
    """Main configuration container."""

    ssh: SSHPolicy = Field(default_factory=SSHPolicy)
    firewall: FirewallPolicy = Field(default_factory=FirewallPolicy)
    account: AccountPolicy = Field(default_factory=AccountPolicy)
    monitoring: MonitoringPolicy = Field(default_factory=MonitoringPolicy)
    network: NetworkPolicy = Field(default_factory=NetworkPolicy)
    journal: JournalPolicy = Field(default_factory=JournalPolicy)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    command_timeout: int = Field(default=30, ge=1, description="Seconds per command")

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "AuditorConfig":
        """Create configuration from environment variables and a ``.env`` file."""
        kwargs: Dict[str, Any] = {}
        if env_file is not None:
            kwargs["_env_file"] = env_file
        return cls(
            ssh=SSHPolicy(**kwargs),
            firewall=FirewallPolicy(**kwargs),
            account=AccountPolicy(**kwargs),
            monitoring=MonitoringPolicy(**kwargs),
            network=NetworkPolicy(**kwargs),
            journal=JournalPolicy(**kwargs),
            logging=LoggingConfig(**kwargs),
            **kwargs,
        )

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues: List[str] = []

        issues.extend(Validator.validate_username(self.account.admin_user))
        issues.extend(Validator.validate_ports(self.firewall.expected_ports))
        issues.extend(Validator.validate_ports(self.network.allowed_ports))
        issues.extend(
            Validator.validate_absolute_paths(
                [self.account.shell, self.account.sudoers_path]
                + list(self.monitoring.directories)
            )
        )

        if not self.firewall.expected_ports:
            issues.append("No expected firewall ports configured")

        return issues
