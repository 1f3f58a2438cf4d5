"""
Derived views: project progress, dashboard statistics and mailboxes.

Everything here is computed from the store on each call; nothing is
written back.
"""
from typing import Any, Dict, List

from .schema import Message, Task, TaskStatus
from .store import DataStore


def completion_rate(tasks: List[Task]) -> int:
    """Approved share of the given tasks as a percentage, rounded half up; 0 when empty."""
    if not tasks:
        return 0
    approved = sum(1 for t in tasks if t.status == TaskStatus.APPROVED)
    return int(approved * 100 / len(tasks) + 0.5)


def project_progress(tasks: List[Task], project_id: str) -> int:
    """Share of the project's tasks that are approved, as a rounded percentage."""
    return completion_rate([t for t in tasks if t.project_id == project_id])


def _by_status(tasks: List[Task]) -> Dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status.value] += 1
    return counts


def charity_summary(store: DataStore, charity_id: str) -> Dict[str, Any]:
    """Dashboard numbers for one charity."""
    tasks = store.tasks_for_charity(charity_id)
    by_status = _by_status(tasks)
    return {
        "charity_id": charity_id,
        "total": len(tasks),
        "completed": by_status[TaskStatus.APPROVED.value],
        "in_progress": by_status[TaskStatus.IN_PROGRESS.value],
        "review": by_status[TaskStatus.REVIEW.value],
        "todo": by_status[TaskStatus.TODO.value],
        "completion_rate": completion_rate(tasks),
        "employees": len(store.users_for_charity(charity_id)),
    }


def admin_overview(store: DataStore) -> Dict[str, Any]:
    """Per-charity totals plus board-wide counts for the admin portal."""
    per_charity = []
    for charity in store.charities:
        tasks = store.tasks_for_charity(charity.id)
        per_charity.append({
            "charity_id": charity.id,
            "name": charity.name,
            "total": len(tasks),
            "completed": sum(1 for t in tasks if t.status == TaskStatus.APPROVED),
        })

    by_status = _by_status(store.tasks)
    return {
        "charities": len(store.charities),
        "total_tasks": len(store.tasks),
        "completed": by_status[TaskStatus.APPROVED.value],
        "in_progress": by_status[TaskStatus.IN_PROGRESS.value],
        "by_status": by_status,
        "per_charity": per_charity,
    }


# ── Mail ─────────────────────────────────────────────────────────────────────

def inbox(store: DataStore, owner_id: str) -> List[Message]:
    """Messages received by a mailbox ('admin' or a charity id), newest first."""
    return sorted(
        (m for m in store.messages if m.receiver_id == owner_id),
        key=lambda m: m.timestamp,
        reverse=True,
    )


def outbox(store: DataStore, owner_id: str) -> List[Message]:
    return sorted(
        (m for m in store.messages if m.sender_id == owner_id),
        key=lambda m: m.timestamp,
        reverse=True,
    )


def unread_count(store: DataStore, owner_id: str) -> int:
    return sum(1 for m in inbox(store, owner_id) if not m.is_read)
