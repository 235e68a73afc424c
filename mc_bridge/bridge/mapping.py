"""Vocabulary mapping between MC and CRM task fields.

The remote side is coarser than the local one, so these mappings are
lossy: local→remote collapses several states into one bucket,
and remote→local always picks the earliest lifecycle state of that bucket.
Every function is total; unknown input maps to a conservative default.
"""

from typing import Dict, Optional

from ..core.models import LocalPriority, LocalStatus, RemotePriority, RemoteStatus


LOCAL_TO_REMOTE_STATUS: Dict[str, str] = {
    LocalStatus.INBOX.value: RemoteStatus.TODO.value,
    LocalStatus.PLANNING.value: RemoteStatus.TODO.value,
    LocalStatus.ASSIGNED.value: RemoteStatus.TODO.value,
    LocalStatus.IN_PROGRESS.value: RemoteStatus.DOING.value,
    LocalStatus.TESTING.value: RemoteStatus.DOING.value,
    LocalStatus.REVIEW.value: RemoteStatus.DOING.value,
    LocalStatus.DONE.value: RemoteStatus.DONE.value,
}

REMOTE_TO_LOCAL_STATUS: Dict[str, str] = {
    RemoteStatus.TODO.value: LocalStatus.INBOX.value,
    RemoteStatus.DOING.value: LocalStatus.IN_PROGRESS.value,
    RemoteStatus.DONE.value: LocalStatus.DONE.value,
}

# Canonical MC agent name -> CRM identity token.
AGENT_NAME_TO_REMOTE: Dict[str, str] = {
    "Victor": "VICTOR",
    "Radu": "BUILDER",
    "Alexandra": "COMMS",
    "Anabelle": "PIXEL",
    "Mihai": "SENTINEL",
    "Apex": "APEX",
}

REMOTE_TO_AGENT_NAME: Dict[str, str] = {token: name for name, token in AGENT_NAME_TO_REMOTE.items()}

_LOCAL_PRIORITIES = {p.value for p in LocalPriority}
_REMOTE_PRIORITIES = {p.value for p in RemotePriority}


def _value(raw) -> Optional[str]:
    """Accept either an enum member or its raw string value."""
    return getattr(raw, "value", raw)


def local_status_to_remote(status) -> str:
    return LOCAL_TO_REMOTE_STATUS.get(_value(status), RemoteStatus.TODO.value)


def remote_status_to_local(status) -> str:
    return REMOTE_TO_LOCAL_STATUS.get(_value(status), LocalStatus.INBOX.value)


def local_priority_to_remote(priority) -> str:
    value = _value(priority)
    if value == LocalPriority.NORMAL.value:
        return RemotePriority.MEDIUM.value
    if value in _REMOTE_PRIORITIES:
        return value
    return RemotePriority.MEDIUM.value


def remote_priority_to_local(priority) -> str:
    value = _value(priority)
    if value == RemotePriority.MEDIUM.value:
        return LocalPriority.NORMAL.value
    if value in _LOCAL_PRIORITIES:
        return value
    return LocalPriority.NORMAL.value


def agent_name_to_remote(name: Optional[str]) -> Optional[str]:
    """CRM token for a canonical agent name, or None if unmapped."""
    if not name:
        return None
    return AGENT_NAME_TO_REMOTE.get(name)


def remote_agent_to_name(token: Optional[str]) -> Optional[str]:
    """Canonical agent name for a CRM token (case-insensitive), or None."""
    if not token:
        return None
    return REMOTE_TO_AGENT_NAME.get(token.strip().upper())
