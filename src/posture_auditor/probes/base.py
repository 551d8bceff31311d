"""Shared building blocks for probes."""

from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional, Tuple, TypeVar

from posture_auditor.exceptions import InspectionError
from posture_auditor.types import CheckResult, CheckStatus

if TYPE_CHECKING:
    from posture_auditor.config import AuditorConfig
    from posture_auditor.inspector import SystemInspector

ProbeFunc = Callable[["SystemInspector", "AuditorConfig"], List[CheckResult]]

T = TypeVar("T")


class Probe(NamedTuple):
    """A named inspection unit."""

    key: str
    title: str
    func: ProbeFunc


def verdict(
    name: str,
    passed: bool,
    detail: str = "",
    otherwise: CheckStatus = CheckStatus.FAIL,
) -> CheckResult:
    """Pass when ``passed`` holds, ``otherwise`` when it does not."""
    return CheckResult(name, CheckStatus.PASS if passed else otherwise, detail)


def info(name: str, detail: str) -> CheckResult:
    """Informational result, always Pass."""
    return CheckResult(name, CheckStatus.PASS, detail)


def attempt(query: Callable[[], T]) -> Tuple[Optional[T], Optional[str]]:
    """Run one inspector query.

    Returns:
        ``(value, None)`` on success, ``(None, error)`` when the query raised
        ``InspectionError``
    """
    try:
        return query(), None
    except InspectionError as e:
        return None, str(e)


def guarded(
    name: str,
    query: Callable[[], bool],
    describe: Callable[[bool], str],
    otherwise: CheckStatus = CheckStatus.FAIL,
) -> CheckResult:
    """Like :func:`verdict` for a single boolean query.

    A query that cannot be answered gets this check's own ``otherwise``
    severity, with the inspection error as detail.
    """
    passed, error = attempt(query)
    if error is not None:
        return CheckResult(name, otherwise, error)
    return verdict(name, bool(passed), describe(bool(passed)), otherwise)

