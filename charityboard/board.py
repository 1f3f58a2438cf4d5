"""
Kanban board: four fixed status columns per charity.

Moving a card is a drag-and-drop: a drop on a different column rewrites
the task status through the store (which logs the change); a drop on the
card's own column does nothing.

By default every column is reachable from every other one. With
strict=True moves follow STRICT_TRANSITIONS and anything else raises
InvalidTransition.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .errors import InvalidTransition
from .schema import Task, TaskStatus
from .store import DataStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Column:
    id: TaskStatus
    title: str


COLUMNS: List[Column] = [Column(status, status.label) for status in TaskStatus]

STRICT_TRANSITIONS: Dict[TaskStatus, List[TaskStatus]] = {
    TaskStatus.TODO: [TaskStatus.IN_PROGRESS],
    TaskStatus.IN_PROGRESS: [TaskStatus.REVIEW, TaskStatus.TODO],
    TaskStatus.REVIEW: [TaskStatus.APPROVED, TaskStatus.IN_PROGRESS],
    TaskStatus.APPROVED: [TaskStatus.REVIEW],
}


class KanbanBoard:
    """Groups a charity's tasks by status and applies card moves."""

    def __init__(self, store: DataStore, strict: bool = False):
        self.store = store
        self.strict = strict
        self.dragged_task_id: Optional[str] = None

    def columns(self, charity_id: str) -> Dict[TaskStatus, List[Task]]:
        """Every column in board order, empty ones included."""
        buckets: Dict[TaskStatus, List[Task]] = {col.id: [] for col in COLUMNS}
        for task in self.store.tasks_for_charity(charity_id):
            buckets[task.status].append(task)
        return buckets

    def counts(self, charity_id: str) -> Dict[TaskStatus, int]:
        return {status: len(tasks) for status, tasks in self.columns(charity_id).items()}

    def can_move(self, from_status: TaskStatus, to_status: TaskStatus) -> bool:
        if from_status == to_status:
            return False
        if not self.strict:
            return True
        return to_status in STRICT_TRANSITIONS.get(from_status, [])

    def move(self, task_id: str, target: TaskStatus) -> bool:
        """
        Drop a card onto a column.

        Returns True if the task changed status. An unknown task or a drop on
        the current column returns False without touching the store.
        """
        task = self.store.get_task(task_id)
        if task is None:
            logger.debug("move: no task %s", task_id)
            return False
        if task.status == target:
            return False
        if not self.can_move(task.status, target):
            raise InvalidTransition(task_id, task.status, target)

        self.store.update_task(replace(task, status=target))
        logger.info("Moved task %s: %s -> %s", task_id, task.status.value, target.value)
        return True

    # ── Drag interaction ─────────────────────────────────────────────────────

    def drag_start(self, task_id: str) -> None:
        self.dragged_task_id = task_id

    def drop(self, target: TaskStatus) -> bool:
        """Release the dragged card on a column; the drag state is always cleared."""
        task_id, self.dragged_task_id = self.dragged_task_id, None
        if task_id is None:
            return False
        return self.move(task_id, target)
