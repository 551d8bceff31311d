"""Admin account probe."""

from typing import List

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, guarded, verdict
from posture_auditor.types import CheckResult, CheckStatus


def probe_users(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Check the admin account, the root lock and the sudo grant.

    Group and shell checks are only emitted when the account exists.
    """
    policy = config.account
    admin = policy.admin_user
    results: List[CheckResult] = []

    user, error = attempt(lambda: inspector.get_user_info(admin))
    if error is not None:
        results.append(CheckResult("Admin account exists", CheckStatus.FAIL, error))
    elif user is None:
        results.append(verdict("Admin account exists", False, f"user {admin} not found"))
    else:
        results.append(verdict("Admin account exists", True, f"{admin} (uid {user.uid})"))
        results.append(
            verdict(
                f"Admin in {policy.sudo_group} group",
                policy.sudo_group in user.groups,
                f"groups: {' '.join(user.groups) or 'none'}",
            )
        )
        results.append(
            verdict(
                "Admin login shell",
                user.shell == policy.shell,
                f"{user.shell} (expected {policy.shell})",
                otherwise=CheckStatus.WARNING,
            )
        )

    results.append(
        guarded(
            "Root account locked",
            lambda: inspector.is_account_locked("root"),
            lambda locked: "root password locked" if locked else "root password usable",
            otherwise=CheckStatus.WARNING,
        )
    )

    content, error = attempt(lambda: inspector.read_file(policy.sudoers_path))
    if error is not None:
        results.append(CheckResult("Sudoers file present", CheckStatus.FAIL, error))
    elif content is None:
        results.append(
            verdict("Sudoers file present", False, f"{policy.sudoers_path} missing")
        )
    else:
        results.append(verdict("Sudoers file present", True, policy.sudoers_path))
        lines = [line.strip() for line in content.splitlines()]
        results.append(
            verdict(
                "Sudoers directive",
                policy.sudoers_line in lines,
                f"expected '{policy.sudoers_line}'",
            )
        )

    return results
