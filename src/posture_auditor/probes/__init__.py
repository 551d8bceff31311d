"""Probe registry.

Probes run in the order listed here.
"""

from typing import Iterable, List, Optional

from posture_auditor.exceptions import ConfigurationError
from posture_auditor.probes.base import Probe, ProbeFunc
from posture_auditor.probes.firewall import probe_firewall
from posture_auditor.probes.journal import probe_journal
from posture_auditor.probes.keys import probe_keys
from posture_auditor.probes.monitoring import probe_monitoring
from posture_auditor.probes.network import probe_network
from posture_auditor.probes.ssh import probe_ssh
from posture_auditor.probes.users import probe_users

PROBES: List[Probe] = [
    Probe("ssh", "SSH", probe_ssh),
    Probe("firewall", "Firewall", probe_firewall),
    Probe("users", "User", probe_users),
    Probe("keys", "SSH Keys", probe_keys),
    Probe("monitoring", "Monitoring", probe_monitoring),
    Probe("network", "Network", probe_network),
    Probe("logging", "Logging", probe_journal),
]


def get_probes(keys: Optional[Iterable[str]] = None) -> List[Probe]:
    """Select probes by key, keeping canonical order.

    Raises:
        ConfigurationError: If a key names no probe
    """
    if not keys:
        return list(PROBES)

    wanted = set(keys)
    unknown = wanted - {p.key for p in PROBES}
    if unknown:
        raise ConfigurationError(f"Unknown probe(s): {', '.join(sorted(unknown))}")
    return [p for p in PROBES if p.key in wanted]


__all__ = ["PROBES", "Probe", "ProbeFunc", "get_probes"]
