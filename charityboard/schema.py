"""
Charity board schema.

Records are frozen dataclasses: the store replaces them, never edits them.

Task lifecycle:
  TODO → IN_PROGRESS → REVIEW → APPROVED

Any column can be reached from any other by a board move unless the
workspace runs with a strict workflow (see board.py).
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
import time


def now_ms() -> int:
    """Epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class Role(Enum):
    """Identity roles across both portals."""
    ADMIN = "ADMIN"
    CHARITY_MANAGER = "CHARITY_MANAGER"
    EMPLOYEE = "EMPLOYEE"

    @classmethod
    def from_str(cls, value: str) -> "Role":
        try:
            return cls[value.upper()]
        except KeyError:
            return cls.EMPLOYEE


class JobRole(Enum):
    """Job title inside a charity."""
    MANAGER = "MANAGER"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    EMPLOYEE = "EMPLOYEE"
    ACCOUNTANT = "ACCOUNTANT"

    @classmethod
    def from_str(cls, value: str) -> "JobRole":
        try:
            return cls[value.upper()]
        except KeyError:
            return cls.EMPLOYEE


class TaskStatus(Enum):
    """The four kanban columns."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    APPROVED = "APPROVED"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        try:
            return cls[value.upper()]
        except KeyError:
            return cls.TODO


_STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.REVIEW: "Review",
    TaskStatus.APPROVED: "Approved",
}


class ActivityType(Enum):
    COMMENT = "COMMENT"
    HISTORY = "HISTORY"
    UPLOAD = "UPLOAD"


class Portal(Enum):
    """Login entry point."""
    ADMIN = "ADMIN"
    CHARITY = "CHARITY"


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"


class FontSize(Enum):
    NORMAL = "normal"
    LARGE = "large"


@dataclass(frozen=True)
class Permission:
    id: str
    label: str


# Fixed catalog; charity managers implicitly hold all of it.
PERMISSION_CATALOG: List[Permission] = [
    Permission("manage_tasks", "Manage tasks"),
    Permission("manage_projects", "Manage projects"),
    Permission("view_reports", "View reports"),
    Permission("manage_team", "Manage team"),
    Permission("manage_financials", "Financial management"),
]

ALL_PERMISSION_IDS: List[str] = [p.id for p in PERMISSION_CATALOG]

# Sender/receiver token for the general administration mailbox
ADMIN_MAILBOX = "admin"


@dataclass(frozen=True)
class Charity:
    """An organizational tenant; username/password double as the manager login."""
    id: str
    name: str
    username: str
    password: str = ""
    logo: str = ""
    member_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "password": self.password,
            "logo": self.logo,
            "memberCount": self.member_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Charity":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            logo=data.get("logo", ""),
            member_count=int(data.get("memberCount", 0) or 0),
        )


@dataclass(frozen=True)
class Project:
    id: str
    title: str
    charity_id: str
    deadline: str = ""              # date string, e.g. "2024-03-10"
    manager_name: str = ""
    manager_id: Optional[str] = None
    progress: int = 0               # informational; see stats.project_progress

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "deadline": self.deadline,
            "managerName": self.manager_name,
            "managerId": self.manager_id,
            "charityId": self.charity_id,
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            charity_id=data.get("charityId", ""),
            deadline=data.get("deadline", ""),
            manager_name=data.get("managerName", ""),
            manager_id=data.get("managerId"),
            progress=int(data.get("progress", 0) or 0),
        )


@dataclass(frozen=True)
class Task:
    """A unit of work shown as a card on the charity's board."""
    id: str
    title: str
    charity_id: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    project_id: Optional[str] = None
    assignee_id: Optional[str] = None
    assignee_name: Optional[str] = None
    is_from_admin: bool = False     # assigned by the general administration
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "charityId": self.charity_id,
            "projectId": self.project_id,
            "assigneeId": self.assignee_id,
            "assigneeName": self.assignee_name,
            "isFromAdmin": self.is_from_admin,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        status = TaskStatus.TODO
        if data.get("status"):
            try:
                status = TaskStatus(data["status"])
            except ValueError:
                status = TaskStatus.from_str(str(data["status"]))
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            charity_id=data.get("charityId", ""),
            description=data.get("description", ""),
            status=status,
            project_id=data.get("projectId"),
            assignee_id=data.get("assigneeId"),
            assignee_name=data.get("assigneeName"),
            is_from_admin=bool(data.get("isFromAdmin", False)),
            created_at=int(data.get("createdAt") or now_ms()),
        )


@dataclass(frozen=True)
class User:
    """An authenticated identity: admin, charity manager or employee."""
    id: str
    username: str
    name: str
    role: Role = Role.EMPLOYEE
    password: str = ""
    job_role: Optional[JobRole] = None
    charity_id: Optional[str] = None
    permissions: List[str] = field(default_factory=list)

    def to_dict(self, include_password: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role.value,
            "jobRole": self.job_role.value if self.job_role else None,
            "charityId": self.charity_id,
            "permissions": list(self.permissions),
        }
        if include_password:
            data["password"] = self.password
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            name=data.get("name", ""),
            role=Role.from_str(data.get("role") or "EMPLOYEE"),
            password=data.get("password", ""),
            job_role=JobRole.from_str(data["jobRole"]) if data.get("jobRole") else None,
            charity_id=data.get("charityId"),
            permissions=[str(p) for p in data.get("permissions") or []],
        )


@dataclass(frozen=True)
class Message:
    """Internal mail between the administration and a charity."""
    id: str
    sender_id: str                  # ADMIN_MAILBOX or a charity id
    sender_name: str
    receiver_id: str                # ADMIN_MAILBOX or a charity id
    subject: str
    content: str
    timestamp: int = field(default_factory=now_ms)
    is_read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "senderName": self.sender_name,
            "receiverId": self.receiver_id,
            "subject": self.subject,
            "content": self.content,
            "timestamp": self.timestamp,
            "isRead": self.is_read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=data.get("id", ""),
            sender_id=data.get("senderId", ""),
            sender_name=data.get("senderName", ""),
            receiver_id=data.get("receiverId", ""),
            subject=data.get("subject", ""),
            content=data.get("content", ""),
            timestamp=int(data.get("timestamp") or now_ms()),
            is_read=bool(data.get("isRead", False)),
        )


@dataclass(frozen=True)
class TaskActivity:
    """One entry of a task's timeline."""
    id: str
    task_id: str
    user_id: str
    user_name: str
    type: ActivityType
    content: str
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "taskId": self.task_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "type": self.type.value,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskActivity":
        return cls(
            id=data.get("id", ""),
            task_id=data.get("taskId", ""),
            user_id=data.get("userId", ""),
            user_name=data.get("userName", ""),
            type=ActivityType(data.get("type") or "COMMENT"),
            content=data.get("content", ""),
            timestamp=int(data.get("timestamp") or now_ms()),
        )


@dataclass
class AppState:
    """Per-session state: who is logged in plus display preferences."""
    current_user: Optional[User] = None
    theme: Theme = Theme.LIGHT
    font_size: FontSize = FontSize.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentUser": self.current_user.to_dict() if self.current_user else None,
            "theme": self.theme.value,
            "fontSize": self.font_size.value,
        }
