"""
Domain models for mc-bridge.

This module contains the data structures shared by the local store, the
remote store and the sync bridge that sits between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.date import utc_now_iso


# Origin tag stamped on every remote record the bridge writes.
BRIDGE_SOURCE = "mc-bridge"

DEFAULT_WORKSPACE = "default"


class LocalStatus(Enum):
    """Task lifecycle states on the local (MC) side."""

    INBOX = "inbox"
    PLANNING = "planning"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    TESTING = "testing"
    REVIEW = "review"
    DONE = "done"


class RemoteStatus(Enum):
    """Task states on the remote (CRM) side."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class LocalPriority(Enum):
    """Priority levels on the local side."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class RemotePriority(Enum):
    """Priority levels on the remote side."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EventType(str, Enum):
    """Kinds of local change events."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    AGENT_SPAWNED = "agent_spawned"
    AGENT_COMPLETED = "agent_completed"
    ACTIVITY_LOGGED = "activity_logged"
    DELIVERABLE_ADDED = "deliverable_added"


class SyncAction(Enum):
    """Outcome of a single record sync."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class Agent:
    """A local agent row."""

    id: str
    name: str


@dataclass
class Task:
    """A task as stored in the local database."""

    id: str
    title: str
    description: Optional[str] = None
    status: str = LocalStatus.INBOX.value
    priority: str = LocalPriority.NORMAL.value
    assigned_agent_id: Optional[str] = None
    workspace_id: str = DEFAULT_WORKSPACE
    business_id: str = ""
    due_date: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "assigned_agent_id": self.assigned_agent_id,
            "workspace_id": self.workspace_id,
            "business_id": self.business_id,
            "due_date": self.due_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description"),
            status=data.get("status") or LocalStatus.INBOX.value,
            priority=data.get("priority") or LocalPriority.NORMAL.value,
            assigned_agent_id=data.get("assigned_agent_id"),
            workspace_id=data.get("workspace_id") or DEFAULT_WORKSPACE,
            business_id=data.get("business_id") or "",
            due_date=data.get("due_date"),
            created_at=data.get("created_at") or utc_now_iso(),
            updated_at=data.get("updated_at") or utc_now_iso(),
        )


@dataclass
class RemoteTask:
    """A row of the remote ``tasks`` table.

    Status and priority are kept as raw strings so that values outside the
    known vocabulary survive until the mapper applies its defaults.
    """

    id: str
    title: str
    description: Optional[str] = None
    status: str = RemoteStatus.TODO.value
    priority: str = RemotePriority.MEDIUM.value
    assigned_agent: Optional[str] = None
    mc_task_id: Optional[str] = None
    mc_status: Optional[str] = None
    sync_source: Optional[str] = None
    agency_id: Optional[str] = None
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_bridge_authored(self) -> bool:
        return self.sync_source == BRIDGE_SOURCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "assigned_agent": self.assigned_agent,
            "mc_task_id": self.mc_task_id,
            "mc_status": self.mc_status,
            "sync_source": self.sync_source,
            "agency_id": self.agency_id,
            "due_date": self.due_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteTask":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description"),
            status=data.get("status") or RemoteStatus.TODO.value,
            priority=data.get("priority") or RemotePriority.MEDIUM.value,
            assigned_agent=data.get("assigned_agent"),
            mc_task_id=data.get("mc_task_id"),
            mc_status=data.get("mc_status"),
            sync_source=data.get("sync_source"),
            agency_id=data.get("agency_id"),
            due_date=data.get("due_date"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class ChangeEvent:
    """A local mutation event as delivered to listeners."""

    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_now_iso)


@dataclass
class SyncResult:
    """Reported (never raised) outcome of a push or pull."""

    success: bool
    action: Optional[SyncAction] = None
    error: Optional[str] = None
    reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.action is SyncAction.SKIPPED

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.action is not None:
            result["action"] = self.action.value
        if self.error:
            result["error"] = self.error
        if self.reason:
            result["reason"] = self.reason
        return result


@dataclass
class PollStats:
    """Aggregate counts for one poll cycle."""

    polled: int = 0
    synced: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"polled": self.polled, "synced": self.synced, "errors": self.errors}
