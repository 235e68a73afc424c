"""Translate local change events into bridge work."""

from typing import TYPE_CHECKING, Optional
import logging

from ..core.models import ChangeEvent, EventType, Task

if TYPE_CHECKING:
    from .service import BridgeService


class BridgeEventListener:
    """Broadcaster listener that feeds the bridge's outbound queue.

    Called synchronously from the mutation path, so it only decides what to
    do and enqueues it; the remote I/O happens on the service's workers.
    It never raises.
    """

    def __init__(self, service: "BridgeService", logger: Optional[logging.Logger] = None):
        self.service = service
        self.logger = logger or logging.getLogger(__name__)

    def __call__(self, event: ChangeEvent) -> None:
        try:
            self.service.ensure_initialized()
            if not self.service.active:
                return
            self._dispatch(event)
        except Exception as e:
            self.logger.error(f"Event listener error on {event.type}: {e}")

    def _dispatch(self, event: ChangeEvent) -> None:
        payload = event.payload or {}
        engine = self.service.engine

        if event.type in (EventType.TASK_CREATED.value, EventType.TASK_UPDATED.value):
            if payload.get("id") and payload.get("title"):
                task = Task.from_dict(payload)
                self.service.submit(lambda: engine.push_task(task))

        elif event.type == EventType.TASK_DELETED.value:
            # CRM tasks are retained for audit.
            self.logger.info(f"Task deleted in MC: {payload.get('id')} - CRM task retained")

        elif event.type == EventType.AGENT_SPAWNED.value:
            agent_name = payload.get("agent_name")
            if agent_name:
                task_id = payload.get("task_id")
                task = self.service.local.get_task(task_id) if task_id else None
                label = (task.title if task else None) or task_id or "unknown task"
                activity = f"Started working on: {label}"
                self.service.submit(lambda: engine.push_agent_activity(agent_name, activity, task_id))

        elif event.type == EventType.AGENT_COMPLETED.value:
            agent_name = payload.get("agent_name")
            if agent_name:
                task_id = payload.get("task_id")
                activity = f"Completed: {payload.get('summary') or task_id or 'task'}"
                self.service.submit(lambda: engine.push_agent_activity(agent_name, activity, task_id))

        # activity_logged / deliverable_added are too fine-grained to mirror.
