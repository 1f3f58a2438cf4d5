"""
In-memory data store for the charity board.

Owns every entity list. Mutators rebind a list to a fresh copy instead of
editing records in place, so any list a reader is holding stays a valid
snapshot. Nothing is written to disk; a new store starts from seed data.
"""
import itertools
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from .schema import (
    AppState, Charity, Project, Task, User, Message, TaskActivity,
    ActivityType, now_ms,
)
from .seed import seed_records

logger = logging.getLogger(__name__)

SYSTEM_USER_ID = "system"
SYSTEM_USER_NAME = "System"


class DataStore:
    """Process-local store: add/update mutators plus filtered reads."""

    def __init__(self, state: Optional[AppState] = None, seed: bool = True):
        """Initialize lists from seed data (or empty) bound to a session state."""
        self.state = state if state is not None else AppState()
        self.subscribers: Dict[str, list] = {}  # event -> list of callbacks
        self._counter = itertools.count(1)

        records = seed_records() if seed else {}
        self.charities: List[Charity] = list(records.get("charities", []))
        self.projects: List[Project] = list(records.get("projects", []))
        self.tasks: List[Task] = list(records.get("tasks", []))
        self.users: List[User] = list(records.get("users", []))
        self.messages: List[Message] = list(records.get("messages", []))
        self.activities: List[TaskActivity] = list(records.get("activities", []))

    # ── Events ───────────────────────────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable) -> None:
        """Register a callback for a store event (e.g. 'tasks_changed')."""
        self.subscribers.setdefault(event, []).append(callback)

    def _emit(self, event: str, **kwargs) -> None:
        for callback in self.subscribers.get(event, []):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Error in %s callback", event)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def next_id(self, prefix: str) -> str:
        """Process-unique id: <prefix>_<epoch-ms>_<counter>."""
        return f"{prefix}_{now_ms()}_{next(self._counter)}"

    def _actor(self):
        user = self.state.current_user
        if user is None:
            return SYSTEM_USER_ID, SYSTEM_USER_NAME
        return user.id, user.name

    def _history(self, task_id: str, content: str) -> TaskActivity:
        user_id, user_name = self._actor()
        activity = TaskActivity(
            id=self.next_id("act"),
            task_id=task_id,
            user_id=user_id,
            user_name=user_name,
            type=ActivityType.HISTORY,
            content=content,
        )
        self.add_task_activity(activity)
        return activity

    # ── Mutators ─────────────────────────────────────────────────────────────

    def add_charity(self, charity: Charity) -> None:
        self.charities = [*self.charities, charity]
        logger.debug("Added charity %s (%s)", charity.id, charity.username)
        self._emit("charities_changed", charity_id=charity.id)

    def update_charity(self, charity_id: str, **updates: Any) -> None:
        """Merge the given fields into one charity; unknown ids are ignored."""
        if not any(c.id == charity_id for c in self.charities):
            logger.debug("update_charity: no charity %s", charity_id)
            return
        self.charities = [
            replace(c, **updates) if c.id == charity_id else c
            for c in self.charities
        ]
        logger.debug("Updated charity %s: %s", charity_id, sorted(updates))
        self._emit("charities_changed", charity_id=charity_id)

    def add_task(self, task: Task) -> None:
        """Append a task and log its creation in the task timeline."""
        self.tasks = [*self.tasks, task]
        logger.debug("Added task %s to charity %s", task.id, task.charity_id)
        self._history(task.id, "Task created")
        self._emit("tasks_changed", task_id=task.id)

    def update_task(self, task: Task) -> None:
        """Replace a task by id; a status change is logged as history."""
        old = self.get_task(task.id)
        if old is None:
            logger.debug("update_task: no task %s", task.id)
            return
        self.tasks = [task if t.id == task.id else t for t in self.tasks]

        if old.status != task.status:
            self._history(
                task.id,
                f'Status changed from "{old.status.label}" to "{task.status.label}"',
            )
            logger.debug("Task %s: %s -> %s", task.id, old.status.value, task.status.value)
        self._emit("tasks_changed", task_id=task.id)

    def add_project(self, project: Project) -> None:
        self.projects = [*self.projects, project]
        logger.debug("Added project %s to charity %s", project.id, project.charity_id)
        self._emit("projects_changed", project_id=project.id)

    def add_user(self, user: User) -> None:
        self.users = [*self.users, user]
        logger.debug("Added user %s to charity %s", user.username, user.charity_id)
        self._emit("users_changed", user_id=user.id)

    def send_message(self, message: Message) -> None:
        """Newest messages go first."""
        self.messages = [message, *self.messages]
        logger.debug("Message %s: %s -> %s", message.id, message.sender_id, message.receiver_id)
        self._emit("message_sent", message_id=message.id)

    def mark_message_read(self, message_id: str) -> None:
        """Idempotent: a message that is already read is left untouched."""
        message = self.get_message(message_id)
        if message is None or message.is_read:
            return
        self.messages = [
            replace(m, is_read=True) if m.id == message_id else m
            for m in self.messages
        ]
        self._emit("message_read", message_id=message_id)

    def add_task_activity(self, activity: TaskActivity) -> None:
        self.activities = [*self.activities, activity]
        self._emit("activity_added", task_id=activity.task_id, activity_id=activity.id)

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_charity(self, charity_id: str) -> Optional[Charity]:
        return next((c for c in self.charities if c.id == charity_id), None)

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def get_message(self, message_id: str) -> Optional[Message]:
        return next((m for m in self.messages if m.id == message_id), None)

    def tasks_for_charity(self, charity_id: str) -> List[Task]:
        return [t for t in self.tasks if t.charity_id == charity_id]

    def tasks_for_project(self, project_id: str) -> List[Task]:
        return [t for t in self.tasks if t.project_id == project_id]

    def tasks_for_assignee(self, assignee_id: str) -> List[Task]:
        return [t for t in self.tasks if t.assignee_id == assignee_id]

    def projects_for_charity(self, charity_id: str) -> List[Project]:
        return [p for p in self.projects if p.charity_id == charity_id]

    def users_for_charity(self, charity_id: str) -> List[User]:
        return [u for u in self.users if u.charity_id == charity_id]

    def activities_for_task(self, task_id: str) -> List[TaskActivity]:
        """Timeline for one task, oldest first."""
        return sorted(
            (a for a in self.activities if a.task_id == task_id),
            key=lambda a: a.timestamp,
        )
