"""
Seed data loaded into every new workspace.

The dataset is kept in its wire form (camelCase dicts, as served by the
API) and parsed through the records' from_dict. Each call builds fresh
records so workspaces never share lists.
"""
from typing import Dict, List, Any

from .schema import (
    Charity, Project, Task, User, Message, TaskActivity, ADMIN_MAILBOX, now_ms,
)


def seed_records() -> Dict[str, List[Any]]:
    """Return the demo dataset keyed by collection name."""
    now = now_ms()

    charities = [
        {"id": "c1", "name": "Al-Birr Charity", "username": "ber", "password": "123",
         "logo": "https://picsum.photos/100/100?random=1", "memberCount": 15},
        {"id": "c2", "name": "Etaam Food Bank", "username": "etaam", "password": "123",
         "logo": "https://picsum.photos/100/100?random=2", "memberCount": 22},
    ]

    projects = [
        {"id": "p1", "title": "Ramadan Iftar Project", "charityId": "c1",
         "deadline": "2024-03-10", "managerName": "Ahmed Mohammed", "progress": 50},
    ]

    tasks = [
        {"id": "t1", "title": "Distribute food baskets",
         "description": "Distribute 500 baskets in the Al-Naseem district",
         "status": "IN_PROGRESS", "charityId": "c1", "projectId": "p1",
         "isFromAdmin": True, "createdAt": now},
        {"id": "t2", "title": "First quarter report",
         "description": "Prepare the financial and administrative report",
         "status": "TODO", "charityId": "c1", "isFromAdmin": False, "createdAt": now},
        {"id": "t3", "title": "Orphans celebration",
         "description": "Prepare the hall and the gifts",
         "status": "APPROVED", "charityId": "c2", "isFromAdmin": True, "createdAt": now},
    ]

    messages = [
        {"id": "m1", "senderId": ADMIN_MAILBOX, "senderName": "General Administration",
         "receiverId": "c1", "subject": "Annual report reminder",
         "content": "Please submit the report before the end of the month.",
         "timestamp": now - 1_000_000, "isRead": False},
        {"id": "m2", "senderId": "c1", "senderName": "Al-Birr Charity",
         "receiverId": ADMIN_MAILBOX, "subject": "Re: Annual report",
         "content": "We are working on it and will deliver on time.",
         "timestamp": now, "isRead": True},
    ]

    users = [
        {"id": "u1", "username": "emp1", "password": "123", "name": "Khaled the Employee",
         "role": "EMPLOYEE", "jobRole": "EMPLOYEE", "charityId": "c1",
         "permissions": ["manage_tasks"]},
    ]

    activities = [
        {"id": "a1", "taskId": "t1", "userId": ADMIN_MAILBOX,
         "userName": "General Administration", "type": "HISTORY",
         "content": "Task created", "timestamp": now - 100_000},
        {"id": "a2", "taskId": "t1", "userId": "u1", "userName": "Khaled the Employee",
         "type": "COMMENT", "content": "Task received, work in progress", "timestamp": now},
    ]

    return {
        "charities": [Charity.from_dict(d) for d in charities],
        "projects": [Project.from_dict(d) for d in projects],
        "tasks": [Task.from_dict(d) for d in tasks],
        "messages": [Message.from_dict(d) for d in messages],
        "users": [User.from_dict(d) for d in users],
        "activities": [TaskActivity.from_dict(d) for d in activities],
    }
