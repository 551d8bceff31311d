"""CLI entry point for the posture auditor."""

import argparse
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from pydantic import ValidationError as SettingsValidationError

from posture_auditor import __version__
from posture_auditor.auditor import PostureAuditor
from posture_auditor.config import AuditorConfig
from posture_auditor.exceptions import AuditorError, ConfigurationError, PreconditionError
from posture_auditor.inspector import LiveInspector, SystemInspector
from posture_auditor.log import configure_logging
from posture_auditor.probes import PROBES, get_probes
from posture_auditor.report import Reporter
from posture_auditor.snapshot import SnapshotInspector, SystemSnapshot

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_PRECONDITION = 2
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="posture-audit",
        description="Posture Auditor - validate SSH, firewall, account and monitoring hardening",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Audit this host (run as the admin user, not root)
  posture-audit

  # Fail the CI job when any check fails
  posture-audit --strict

  # Machine-readable output for a subset of probes
  posture-audit --format json --only ssh --only firewall

  # Audit a captured snapshot
  posture-audit --snapshot host.json --skip-preconditions

Environment variables:
  AUDIT_ACCOUNT_ADMIN_USER        - Admin account to audit (default: admin)
  AUDIT_FIREWALL_EXPECTED_PORTS   - Comma-separated ports (default: 22,80,443)
  AUDIT_NETWORK_ALLOWED_PORTS     - Comma-separated ports (default: 22,80,443,61208)
  AUDIT_JOURNAL_SINCE             - journalctl --since value
  AUDIT_COMMAND_TIMEOUT           - Seconds per inspection command
  LOG_LEVEL                       - Log level for stderr diagnostics
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any check fails",
    )

    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format (default: text)",
    )

    parser.add_argument(
        "--only",
        action="append",
        choices=[p.key for p in PROBES],
        metavar="PROBE",
        help="Run only this probe; repeatable ({})".format(", ".join(p.key for p in PROBES)),
    )

    parser.add_argument(
        "--admin-user",
        type=str,
        help="Admin account to audit (overrides config/env)",
    )

    parser.add_argument(
        "--snapshot",
        type=Path,
        help="Audit a JSON system snapshot instead of the live host",
    )

    parser.add_argument(
        "--skip-preconditions",
        action="store_true",
        help="Do not check for root or passwordless sudo",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Read settings from this .env file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print problems and the summary",
    )

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> AuditorConfig:
    """Load configuration from environment and CLI.

    Args:
        args: Parsed command-line arguments

    Returns:
        Configuration object

    Raises:
        ConfigurationError: If settings are malformed or inconsistent
    """
    try:
        config = AuditorConfig.from_env(args.env_file)
    except SettingsValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

    if args.admin_user:
        config.account.admin_user = args.admin_user

    issues = config.validate_config()
    if issues:
        raise ConfigurationError("; ".join(issues))

    return config


def build_inspector(args: argparse.Namespace, config: AuditorConfig) -> SystemInspector:
    """Pick the snapshot or live inspector."""
    if args.snapshot:
        return SnapshotInspector(SystemSnapshot.load(args.snapshot))

    if not sys.platform.startswith("linux"):
        raise AuditorError("Live audits only support Linux systems")
    return LiveInspector(timeout=config.command_timeout)


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main entry point for CLI.

    Raises:
        SystemExit: Always exits with appropriate code
    """
    args = parse_args(argv)

    try:
        config = load_config(args)

        if args.verbose:
            configure_logging("DEBUG")
        elif args.quiet:
            configure_logging("ERROR")
        else:
            configure_logging(config.logging.level)

        inspector = build_inspector(args, config)
        auditor = PostureAuditor(config, inspector, probes=get_probes(args.only))
        report = auditor.run(check_preconditions=not args.skip_preconditions)

        reporter = Reporter(show_passed=not args.quiet)
        if args.format == "json":
            reporter.render_json(report)
        else:
            reporter.render(report)

        if args.strict and report.has_failures:
            sys.exit(EXIT_FAILURES)
        sys.exit(EXIT_OK)

    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)

    except PreconditionError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(EXIT_PRECONDITION)

    except AuditorError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURES)

    except Exception as e:
        print(f"\n❌ Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_FAILURES)


if __name__ == "__main__":
    main()
