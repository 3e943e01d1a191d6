"""
Auth session: who is logged in and the bearer token for API calls.

Created on login and ended on logout; the gateway reads the token from the
session it was constructed with on every request.
"""
import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Role(str, Enum):
    VISITOR = "visitor"
    CUSTOMER = "customer"
    MANAGER = "manager"


class AuthSession:
    """Explicit session context (replaces a process-wide auth store)."""

    __slots__ = ("name", "email", "access_token", "venue_manager", "avatar_url")

    def __init__(self) -> None:
        self.name: str | None = None
        self.email: str | None = None
        self.access_token: str | None = None
        self.venue_manager = False
        self.avatar_url: str | None = None

    def start(
        self,
        *,
        name: str,
        email: str | None,
        access_token: str,
        venue_manager: bool = False,
        avatar_url: str | None = None,
    ) -> "AuthSession":
        """Store the authenticated user and token (login)."""
        self.name = (name or "").strip() or None
        self.email = email
        self.access_token = (access_token or "").strip() or None
        self.venue_manager = bool(venue_manager)
        self.avatar_url = avatar_url
        logger.info("Session started for %s (%s)", self.name, self.role.value)
        return self

    def end(self) -> None:
        """Forget user and token (logout)."""
        if self.name:
            logger.info("Session ended for %s", self.name)
        self.name = None
        self.email = None
        self.access_token = None
        self.venue_manager = False
        self.avatar_url = None

    @property
    def is_logged_in(self) -> bool:
        return bool(self.access_token)

    @property
    def is_manager(self) -> bool:
        return self.is_logged_in and self.venue_manager

    @property
    def role(self) -> Role:
        if not self.is_logged_in:
            return Role.VISITOR
        return Role.MANAGER if self.venue_manager else Role.CUSTOMER

    @classmethod
    def from_settings(cls, settings: Any) -> "AuthSession":
        """Session from HOLIDAZE_ACCESS_TOKEN / HOLIDAZE_PROFILE_NAME; a visitor session when unset."""
        session = cls()
        if settings.access_token and settings.profile_name:
            session.start(
                name=settings.profile_name,
                email=None,
                access_token=settings.access_token,
                venue_manager=settings.venue_manager,
            )
        return session
