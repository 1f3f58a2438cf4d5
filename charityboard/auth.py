"""
Login and logout for the admin and charity portals.

Credentials are plaintext and compared against in-memory records. This is
demo behavior: anything exposed beyond a demo must switch to salted hashes.
"""
import hmac
import logging
from typing import Optional

from .config import Config
from .schema import User, Role, JobRole, Portal, Charity, ALL_PERMISSION_IDS, ADMIN_MAILBOX
from .store import DataStore

logger = logging.getLogger(__name__)


def _matches(provided: str, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


def manager_identity(charity: Charity) -> User:
    """Synthetic manager identity for a charity login; always holds every permission."""
    return User(
        id=charity.id,
        username=charity.username,
        name=f"Manager of {charity.name}",
        role=Role.CHARITY_MANAGER,
        job_role=JobRole.MANAGER,
        charity_id=charity.id,
        permissions=list(ALL_PERMISSION_IDS),
    )


class Authenticator:
    """Sets and clears the session's current user."""

    def __init__(self, store: DataStore, config: Optional[Config] = None):
        self.store = store
        self.config = config or Config()

    def login(self, username: str, password: str, portal: Portal) -> bool:
        """
        Try a login on one portal.

        On success the session's current user is replaced; on failure it is
        left as it was.
        """
        try:
            portal = Portal(portal)
        except ValueError:
            logger.warning("Failed login for %r: unknown portal %r", username, portal)
            return False

        user = self._authenticate(username or "", password or "", portal)
        if user is None:
            logger.warning("Failed login for %r on %s portal", username, portal.value)
            return False

        self.store.state.current_user = user
        logger.info("User %s logged in (%s)", user.username, user.role.value)
        return True

    def _authenticate(self, username: str, password: str, portal: Portal) -> Optional[User]:
        if portal == Portal.ADMIN:
            if (_matches(username, self.config.admin_username)
                    and _matches(password, self.config.admin_password)):
                return User(
                    id=ADMIN_MAILBOX,
                    username=self.config.admin_username,
                    name=self.config.admin_display_name,
                    role=Role.ADMIN,
                )
            return None

        # Charity managers first, then employees
        for charity in self.store.charities:
            if _matches(username, charity.username) and _matches(password, charity.password):
                return manager_identity(charity)

        for employee in self.store.users:
            if _matches(username, employee.username) and _matches(password, employee.password):
                return employee
        return None

    def logout(self) -> None:
        user = self.store.state.current_user
        self.store.state.current_user = None
        if user is not None:
            logger.info("User %s logged out", user.username)
