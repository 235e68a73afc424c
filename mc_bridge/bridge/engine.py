"""Push and pull paths of the MC ↔ CRM bridge."""

from typing import Any, Dict, Optional
from uuid import uuid4
import asyncio
import logging

from ..core.config import BridgeConfig
from ..core.exceptions import RemoteStoreError
from ..core.models import (
    BRIDGE_SOURCE,
    RemoteTask,
    SyncAction,
    SyncResult,
    Task,
)
from ..stores.local import LocalTaskStore
from ..stores.remote import RemoteTaskStore
from ..utils.date import format_date, parse_date, utc_now_iso
from .correlation import CROSS_REFERENCE, CorrelationResolver
from .dedup import PULL_DIRECTION, PUSH_DIRECTION, DedupGuard, dedup_key
from .mapping import (
    agent_name_to_remote,
    local_priority_to_remote,
    local_status_to_remote,
    remote_agent_to_name,
    remote_priority_to_local,
    remote_status_to_local,
)


NOT_CONFIGURED = "Bridge not configured"
RECENTLY_SYNCED = "Skipped - recently synced"
BRIDGE_AUTHORED = "Skipped - written by the bridge"


class SyncEngine:
    """Translates and upserts single records between the two stores.

    Neither path raises: remote and local failures come back as a failed
    ``SyncResult`` carrying the underlying message, because the local write
    that triggered a push has already succeeded and must not be undone.
    """

    def __init__(
        self,
        config: BridgeConfig,
        local_store: LocalTaskStore,
        remote_store: Optional[RemoteTaskStore],
        dedup: DedupGuard,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.local = local_store
        self.remote = remote_store
        self.dedup = dedup
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = CorrelationResolver(
            local_store, workspace_id=config.default_workspace, logger=self.logger
        )
        # Per-task locks and the number of pushes holding or awaiting each.
        self._push_locks: Dict[str, asyncio.Lock] = {}
        self._push_users: Dict[str, int] = {}

    @property
    def configured(self) -> bool:
        return self.config.is_configured and self.remote is not None

    # ------------------------------------------------------------------
    # MC -> CRM

    def build_remote_payload(self, task: Task) -> Dict[str, Any]:
        """Project a local task onto the remote column vocabulary."""
        agent_name = self.local.get_agent_name(task.assigned_agent_id)
        return {
            "title": task.title,
            "description": task.description or None,
            "status": local_status_to_remote(task.status),
            "priority": local_priority_to_remote(task.priority),
            "assigned_agent": agent_name_to_remote(agent_name),
            "mc_task_id": task.id,
            "mc_status": task.status,
            "due_date": task.due_date,
            "sync_source": BRIDGE_SOURCE,
            "agency_id": self.config.agency_id,
            "updated_at": utc_now_iso(),
        }

    async def push_task(self, task: Task) -> SyncResult:
        """Upsert one local task into the remote store.

        Pushes of the same task run one at a time, so a lookup never races
        another push's insert into a second remote row.
        """
        if not self.configured:
            return SyncResult(success=False, error=NOT_CONFIGURED)

        key = dedup_key(PUSH_DIRECTION, task.id)
        if self.dedup.was_recent(key):
            self.logger.debug(f"MC → CRM skipped {task.id}: recently synced")
            return SyncResult(success=True, action=SyncAction.SKIPPED, reason=RECENTLY_SYNCED)

        lock = self._push_locks.get(task.id)
        if lock is None:
            lock = self._push_locks[task.id] = asyncio.Lock()
        self._push_users[task.id] = self._push_users.get(task.id, 0) + 1
        try:
            async with lock:
                return await self._upsert_remote(task, key)
        finally:
            self._push_users[task.id] -= 1
            if not self._push_users[task.id]:
                del self._push_users[task.id]
                del self._push_locks[task.id]

    async def _upsert_remote(self, task: Task, key: str) -> SyncResult:
        try:
            payload = self.build_remote_payload(task)
            existing = await self.remote.find_by_cross_reference(task.id)

            if existing is not None:
                await self.remote.update_task_by_cross_reference(task.id, payload)
                remote_id = existing.id
                action = SyncAction.UPDATED
            else:
                remote_id = str(uuid4())
                await self.remote.insert_task(
                    {**payload, "id": remote_id, "created_at": utc_now_iso()}
                )
                action = SyncAction.CREATED
        except RemoteStoreError as e:
            self.logger.error(f"MC → CRM failed for {task.id}: {e.message}")
            return SyncResult(success=False, error=e.message)
        except Exception as e:
            self.logger.error(f"MC → CRM error for {task.id}: {e}")
            return SyncResult(success=False, error=str(e))

        self.dedup.mark(key)
        self.dedup.mark(dedup_key(PULL_DIRECTION, remote_id))
        self.logger.info(f'MC → CRM {action.value} task "{task.title}" ({task.status})')
        return SyncResult(success=True, action=action)

    async def push_agent_activity(
        self,
        agent_name: str,
        activity: str,
        task_id: Optional[str] = None,
    ) -> bool:
        """Mirror an agent lifecycle event into the remote activity feed."""
        if not self.configured:
            return False

        payload = {
            "id": str(uuid4()),
            "agent_id": agent_name_to_remote(agent_name) or agent_name.upper(),
            "status": "working",
            "task": activity,
            "activity_type": "task_update",
            "message": activity,
            "task_id": task_id or None,
            "sync_source": BRIDGE_SOURCE,
            "updated_at": utc_now_iso(),
        }
        try:
            await self.remote.insert_activity(payload)
        except RemoteStoreError as e:
            self.logger.error(f"Agent activity sync failed for {agent_name}: {e.message}")
            return False
        return True

    # ------------------------------------------------------------------
    # CRM -> MC

    def _resolve_local_agent(self, token: Optional[str]) -> Optional[str]:
        name = remote_agent_to_name(token)
        return self.local.get_agent_id(name) if name else None

    async def pull_task(self, remote: RemoteTask) -> SyncResult:
        """Upsert one remote record into the local store."""
        if not self.configured:
            return SyncResult(success=False, action=SyncAction.SKIPPED, error=NOT_CONFIGURED)

        if remote.is_bridge_authored:
            return SyncResult(success=True, action=SyncAction.SKIPPED, reason=BRIDGE_AUTHORED)

        pull_key = dedup_key(PULL_DIRECTION, remote.id)
        if self.dedup.was_recent(pull_key):
            self.logger.debug(f"CRM → MC skipped {remote.id}: recently synced")
            return SyncResult(success=True, action=SyncAction.SKIPPED, reason=RECENTLY_SYNCED)

        status = remote_status_to_local(remote.status)
        priority = remote_priority_to_local(remote.priority)
        push_key = None

        try:
            agent_id = self._resolve_local_agent(remote.assigned_agent)
            correlation = self.resolver.resolve(remote)

            # Link on the remote first: every local task the bridge creates
            # or matches by title already carries its cross-reference.
            if correlation.found:
                local_id = correlation.task.id
                fields: Dict[str, Any] = {
                    "description": remote.description or None,
                    "status": status,
                    "priority": priority,
                    "assigned_agent_id": agent_id,
                }
                if correlation.method == CROSS_REFERENCE:
                    fields["title"] = remote.title

                if correlation.needs_backfill:
                    await self.remote.update_task(remote.id, {"mc_task_id": local_id})

                # The update re-emits task_updated; its push must see the key.
                push_key = dedup_key(PUSH_DIRECTION, local_id)
                self.dedup.mark(push_key)
                self.local.update_task(local_id, **fields)
                action = SyncAction.UPDATED
            else:
                local_id = str(uuid4())
                await self.remote.update_task(remote.id, {"mc_task_id": local_id})

                push_key = dedup_key(PUSH_DIRECTION, local_id)
                self.dedup.mark(push_key)
                self.local.insert_task(Task(
                    id=local_id,
                    title=remote.title,
                    description=remote.description or None,
                    status=status,
                    priority=priority,
                    assigned_agent_id=agent_id,
                    workspace_id=self.config.default_workspace,
                    due_date=format_date(parse_date(remote.due_date)),
                ))
                action = SyncAction.CREATED
        except RemoteStoreError as e:
            self.logger.error(f"CRM → MC failed for {remote.id}: {e.message}")
            return SyncResult(success=False, action=SyncAction.SKIPPED, error=e.message)
        except Exception as e:
            if push_key is not None:
                self.dedup.discard(push_key)
            self.logger.error(f"CRM → MC error for {remote.id}: {e}")
            return SyncResult(success=False, action=SyncAction.SKIPPED, error=str(e))

        self.dedup.mark(pull_key)
        self.logger.info(
            f'CRM → MC {action.value} task "{remote.title}" → {local_id} '
            f'(via {correlation.method})'
        )
        return SyncResult(success=True, action=action)

    def stats(self) -> Dict[str, Any]:
        return {
            "recently_synced_count": len(self.dedup),
            "bridge_configured": self.configured,
        }
