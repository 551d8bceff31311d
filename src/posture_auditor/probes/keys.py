"""SSH key material probe."""

import posixpath
from typing import List

from posture_auditor.config import AuditorConfig
from posture_auditor.inspector import SystemInspector
from posture_auditor.probes.base import attempt, verdict
from posture_auditor.types import CheckResult, CheckStatus, FileMeta
from posture_auditor.utils.parsers import count_key_entries


def _mode_check(name: str, meta: FileMeta, mode: int, is_dir: bool) -> CheckResult:
    """Missing is Warning (not yet provisioned); wrong type or mode is Fail."""
    if not meta.exists:
        return CheckResult(name, CheckStatus.WARNING, f"{meta.path} does not exist")
    if meta.is_dir != is_dir:
        kind = "a directory" if is_dir else "a regular file"
        return CheckResult(name, CheckStatus.FAIL, f"{meta.path} is not {kind}")
    return verdict(
        name,
        meta.mode == mode,
        f"{meta.path} mode {meta.octal_mode} (expected {format(mode, 'o')})",
    )


def probe_keys(inspector: SystemInspector, config: AuditorConfig) -> List[CheckResult]:
    """Check permissions of the admin's ``.ssh`` directory and authorized keys.

    Unreadable metadata is Fail, like a wrong mode.
    """
    policy = config.account
    user, _ = attempt(lambda: inspector.get_user_info(policy.admin_user))
    home = user.home if user is not None else f"/home/{policy.admin_user}"

    ssh_dir = posixpath.join(home, ".ssh")
    keys_file = posixpath.join(ssh_dir, "authorized_keys")
    results: List[CheckResult] = []

    meta, error = attempt(lambda: inspector.get_file_meta(ssh_dir))
    if meta is None:
        results.append(CheckResult("SSH directory permissions", CheckStatus.FAIL, error or ""))
    else:
        results.append(
            _mode_check("SSH directory permissions", meta, policy.ssh_dir_mode, is_dir=True)
        )

    meta, error = attempt(lambda: inspector.get_file_meta(keys_file))
    if meta is None:
        results.append(CheckResult("Authorized keys permissions", CheckStatus.FAIL, error or ""))
        return results

    results.append(
        _mode_check(
            "Authorized keys permissions",
            meta,
            policy.authorized_keys_mode,
            is_dir=False,
        )
    )

    if meta.exists and not meta.is_dir:
        content, error = attempt(lambda: inspector.read_file(keys_file))
        if error is not None:
            results.append(CheckResult("Authorized keys present", CheckStatus.WARNING, error))
        else:
            count = count_key_entries(content or "")
            results.append(
                verdict(
                    "Authorized keys present",
                    count > 0,
                    f"{count} key entries",
                    otherwise=CheckStatus.WARNING,
                )
            )

    return results
