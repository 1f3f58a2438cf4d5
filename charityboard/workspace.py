"""
Workspace: one session's worth of charity board state.

Holds the store, the session AppState and the engines wired to them.
Everything that used to live in a process-wide context is reached
through a Workspace instance instead.

Usage:
    with Workspace(Config.load()) as ws:
        ws.login("ber", "123", Portal.CHARITY)
        ws.board.move("t2", TaskStatus.IN_PROGRESS)
"""
import logging
from typing import List, Optional

from .activity import ActivityLog
from .auth import Authenticator
from .board import KanbanBoard
from .config import Config
from .describer import DescriptionGenerator
from .schema import (
    AppState, Charity, Project, Task, User, Message, Portal, Role, JobRole,
    Theme, FontSize, ADMIN_MAILBOX,
)
from .store import DataStore

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


class Workspace:
    """Session container with an open/close lifecycle."""

    def __init__(self, config: Optional[Config] = None, describer: Optional[DescriptionGenerator] = None):
        self.config = config or Config()
        self.state = AppState()
        self.store = DataStore(self.state, seed=self.config.seed_data)
        self.auth = Authenticator(self.store, self.config)
        self.board = KanbanBoard(self.store, strict=self.config.strict_workflow)
        self.activity = ActivityLog(self.store)
        self.describer = describer or DescriptionGenerator(self.config)
        self.is_open = False

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def open(self) -> "Workspace":
        self.is_open = True
        logger.debug("Workspace opened (%d charities, %d tasks)",
                     len(self.store.charities), len(self.store.tasks))
        return self

    def close(self) -> None:
        """End the session: log out and reset display preferences."""
        self.auth.logout()
        self.state.theme = Theme.LIGHT
        self.state.font_size = FontSize.NORMAL
        self.board.dragged_task_id = None
        self.is_open = False
        logger.debug("Workspace closed")

    def __enter__(self) -> "Workspace":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ── Session ──────────────────────────────────────────────────────────────

    @property
    def current_user(self) -> Optional[User]:
        return self.state.current_user

    def login(self, username: str, password: str, portal: Portal) -> bool:
        return self.auth.login(username, password, portal)

    def logout(self) -> None:
        self.auth.logout()

    def toggle_theme(self) -> Theme:
        self.state.theme = Theme.DARK if self.state.theme == Theme.LIGHT else Theme.LIGHT
        return self.state.theme

    def toggle_font_size(self) -> FontSize:
        self.state.font_size = (
            FontSize.LARGE if self.state.font_size == FontSize.NORMAL else FontSize.NORMAL
        )
        return self.state.font_size

    def mailbox_id(self) -> Optional[str]:
        """'admin' for the administration, the charity id for charity users."""
        user = self.current_user
        if user is None:
            return None
        if user.role == Role.ADMIN:
            return ADMIN_MAILBOX
        return user.charity_id

    # ── Form actions ─────────────────────────────────────────────────────────

    def _member(self, charity_id: Optional[str], user_id: Optional[str]) -> Optional[User]:
        """Employee of the given charity by id; None for blanks and outsiders."""
        if not user_id or not charity_id:
            return None
        return next((u for u in self.store.users_for_charity(charity_id) if u.id == user_id), None)

    def create_charity(self, name: str, username: str, password: str,
                       logo: str = "", member_count: int = 0) -> Charity:
        charity = Charity(
            id=self.store.next_id("c"),
            name=name,
            username=username,
            password=password,
            logo=logo,
            member_count=member_count,
        )
        self.store.add_charity(charity)
        return charity

    def create_task(self, title: str, charity_id: str, description: str = "",
                    project_id: Optional[str] = None,
                    assignee_id: Optional[str] = None) -> Task:
        """
        New TODO task.

        Tasks from the administration and tasks filed under a project are
        flagged as incoming. The assignee must belong to the task's charity.
        """
        user = self.current_user
        assignee = self._member(charity_id, assignee_id)
        task = Task(
            id=self.store.next_id("t"),
            title=title,
            description=description,
            charity_id=charity_id,
            project_id=project_id or None,
            assignee_id=assignee.id if assignee else None,
            assignee_name=assignee.name if assignee else None,
            is_from_admin=bool(project_id) or bool(user and user.role == Role.ADMIN),
        )
        self.store.add_task(task)
        return task

    def create_project(self, title: str, deadline: str = "",
                       manager_id: Optional[str] = None) -> Project:
        """New project for the current user's charity."""
        user = self.current_user
        charity_id = user.charity_id if user else ""
        manager = self._member(charity_id, manager_id)
        project = Project(
            id=self.store.next_id("p"),
            title=title,
            deadline=deadline,
            charity_id=charity_id,
            manager_id=manager.id if manager else None,
            manager_name=manager.name if manager else UNASSIGNED,
            progress=0,
        )
        self.store.add_project(project)
        return project

    def create_employee(self, name: str, username: str, password: str,
                        job_role: JobRole = JobRole.EMPLOYEE,
                        permissions: Optional[List[str]] = None) -> User:
        """New employee in the current user's charity."""
        user = self.current_user
        employee = User(
            id=self.store.next_id("u"),
            username=username,
            password=password,
            name=name,
            role=Role.EMPLOYEE,
            job_role=job_role,
            charity_id=user.charity_id if user else None,
            permissions=list(permissions or []),
        )
        self.store.add_user(employee)
        return employee

    def send_mail(self, receiver_id: str, subject: str, content: str) -> Optional[Message]:
        """Send from the current user's mailbox; None when nobody is logged in."""
        sender_id = self.mailbox_id()
        if sender_id is None:
            return None
        if sender_id == ADMIN_MAILBOX:
            sender_name = self.config.admin_display_name
        else:
            charity = self.store.get_charity(sender_id)
            sender_name = charity.name if charity else self.current_user.name
        message = Message(
            id=self.store.next_id("m"),
            sender_id=sender_id,
            sender_name=sender_name,
            receiver_id=receiver_id,
            subject=subject,
            content=content,
        )
        self.store.send_message(message)
        return message
