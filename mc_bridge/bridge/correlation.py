"""Correlate remote CRM records with local MC tasks."""

from dataclasses import dataclass
from typing import Optional
import logging

from ..core.models import RemoteTask, Task, DEFAULT_WORKSPACE
from ..stores.local import LocalTaskStore


CROSS_REFERENCE = "cross_reference"
TITLE = "title"
NONE = "none"


@dataclass
class Correlation:
    """The local counterpart of a remote record and how it was found."""

    task: Optional[Task]
    method: str

    @property
    def found(self) -> bool:
        return self.task is not None

    @property
    def needs_backfill(self) -> bool:
        """True when the caller must write the cross-reference to the remote."""
        return self.method == TITLE


class CorrelationResolver:
    """Finds the local task a remote record corresponds to.

    The explicit cross-reference wins. Title matching only exists for pairs
    created independently on both sides before the bridge linked them;
    titles are assumed unique per workspace, so the first match is taken.
    """

    def __init__(
        self,
        store: LocalTaskStore,
        workspace_id: str = DEFAULT_WORKSPACE,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.workspace_id = workspace_id
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, remote: RemoteTask) -> Correlation:
        if remote.mc_task_id:
            task = self.store.get_task(remote.mc_task_id)
            if task is not None:
                return Correlation(task=task, method=CROSS_REFERENCE)
            self.logger.debug(
                f"Remote {remote.id} references missing local task {remote.mc_task_id}"
            )

        if remote.title:
            task = self.store.find_task_by_title(remote.title, self.workspace_id)
            if task is not None:
                self.logger.debug(f"Remote {remote.id} matched local {task.id} by title")
                return Correlation(task=task, method=TITLE)

        return Correlation(task=None, method=NONE)
