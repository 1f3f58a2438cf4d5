"""
Task activity log: history entries, comments and upload notes.

All tasks share one flat, append-only list held by the store.
HISTORY entries are written by the store's task mutators; this module
adds the user-driven entries and the per-task timeline view.
"""
import logging
from typing import List, Optional

from .schema import TaskActivity, ActivityType
from .store import DataStore

logger = logging.getLogger(__name__)


class ActivityLog:
    """Comment and timeline operations over a store."""

    def __init__(self, store: DataStore):
        self.store = store

    def add_task_activity(self, activity: TaskActivity) -> None:
        self.store.add_task_activity(activity)

    def add_comment(self, task_id: str, content: str) -> Optional[TaskActivity]:
        """
        Post a comment as the current user.

        Returns None (and records nothing) for blank text or when nobody
        is logged in.
        """
        user = self.store.state.current_user
        if not content or not content.strip() or user is None:
            return None

        activity = TaskActivity(
            id=self.store.next_id("act"),
            task_id=task_id,
            user_id=user.id,
            user_name=user.name,
            type=ActivityType.COMMENT,
            content=content,
        )
        self.store.add_task_activity(activity)
        logger.debug("Comment %s on task %s by %s", activity.id, task_id, user.id)
        return activity

    def add_upload(self, task_id: str, filename: str) -> Optional[TaskActivity]:
        """Record an attachment by name only; file contents are not stored."""
        user = self.store.state.current_user
        if not filename or not filename.strip() or user is None:
            return None

        activity = TaskActivity(
            id=self.store.next_id("act"),
            task_id=task_id,
            user_id=user.id,
            user_name=user.name,
            type=ActivityType.UPLOAD,
            content=filename.strip(),
        )
        self.store.add_task_activity(activity)
        return activity

    def timeline(self, task_id: str) -> List[TaskActivity]:
        """Entries for one task, oldest first."""
        return self.store.activities_for_task(task_id)
