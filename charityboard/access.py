"""
Role and permission checks for both portals.

- Navigation filter: which sidebar entries a user sees
- Route guard: where a visitor is redirected when the portal is wrong
- Permission check: has_permission / require_permission

The store never calls into this module; the filter alone decides what is
shown, not what is allowed. Callers that need a real check (the HTTP
mutation routes) call require_permission themselves.
"""
from dataclasses import dataclass
from typing import List, Optional

from .errors import AccessDenied
from .schema import User, Role, Portal


@dataclass(frozen=True)
class NavEntry:
    label: str
    path: str
    permission: Optional[str] = None   # None = visible to every portal user


ADMIN_NAVIGATION: List[NavEntry] = [
    NavEntry("Charities", "/admin"),
    NavEntry("Task assignment", "/admin/tasks"),
    NavEntry("Mail", "/admin/mail"),
    NavEntry("Statistics", "/admin/stats"),
    NavEntry("Settings", "/admin/settings"),
]

CHARITY_NAVIGATION: List[NavEntry] = [
    NavEntry("Task board", "/charity"),
    NavEntry("Projects", "/charity/projects", permission="manage_projects"),
    NavEntry("Team", "/charity/team", permission="manage_team"),
    NavEntry("Mail", "/charity/mail"),
]

CHARITY_ROLES = (Role.CHARITY_MANAGER, Role.EMPLOYEE)


def has_permission(user: Optional[User], permission_id: str) -> bool:
    """Managers hold every permission; employees only what is stored."""
    if user is None:
        return False
    if user.role == Role.CHARITY_MANAGER:
        return True
    return permission_id in (user.permissions or [])


def require_permission(user: Optional[User], permission_id: str) -> None:
    """Raise AccessDenied unless the user holds the permission."""
    if not has_permission(user, permission_id):
        who = user.username if user else "anonymous"
        raise AccessDenied(f"{who} lacks permission '{permission_id}'")


def visible_navigation(user: Optional[User]) -> List[NavEntry]:
    """Sidebar entries for the user's portal."""
    if user is None:
        return []
    if user.role == Role.ADMIN:
        return list(ADMIN_NAVIGATION)
    if user.role == Role.CHARITY_MANAGER:
        return list(CHARITY_NAVIGATION)
    return [
        entry for entry in CHARITY_NAVIGATION
        if entry.permission is None or has_permission(user, entry.permission)
    ]


def portal_redirect(user: Optional[User], portal: Portal) -> Optional[str]:
    """
    Route guard for a portal.

    Returns the path to send the visitor to, or None if they may enter.
    """
    if user is None:
        return "/"
    if portal == Portal.ADMIN and user.role != Role.ADMIN:
        return "/charity"
    if portal == Portal.CHARITY and user.role not in CHARITY_ROLES:
        return "/admin"
    return None
