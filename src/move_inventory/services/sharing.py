"""Tokenized read and edit access to an inventory session."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from move_inventory.domain.sessions import InventorySession
from move_inventory.domain.sharing import ACCESS_LEVELS, AccessToken
from move_inventory.errors import (
    AccessDeniedError,
    InvalidAccessLevelError,
    InvalidShareTokenError,
)
from move_inventory.services.sessions import SessionService

logger = logging.getLogger(__name__)


class AccessTokenRepository(Protocol):
    """Persistence interface for share tokens."""

    def create_token(  # noqa: PLR0913
        self,
        session_id: UUID,
        token: UUID,
        access_level: str,
        recipient_name: str | None,
        recipient_email: str | None,
        notes: str | None,
        created_by_name: str,
        created_by_email: str,
    ) -> AccessToken:
        """Create a token row and return it."""

    def get_token(self, token_id: UUID) -> AccessToken | None:
        """Return a token by row id, if present."""

    def get_by_token(self, token: UUID) -> AccessToken | None:
        """Return a token by its secret value, if present."""

    def list_active(self, session_id: UUID) -> list[AccessToken]:
        """Return active tokens of a session, newest first."""

    def record_access(
        self, token_id: UUID, access_count: int, accessed_at: datetime
    ) -> None:
        """Store the updated usage counters of a token."""

    def deactivate(self, token_id: UUID) -> None:
        """Revoke a token."""


@dataclass(frozen=True)
class SharedAccess:
    """A validated share grant together with the session it opens."""

    token: AccessToken
    session: InventorySession

    @property
    def can_edit(self) -> bool:
        return self.token.can_edit


@dataclass
class SharingService:
    """Creates, validates and revokes share tokens."""

    token_repository: AccessTokenRepository
    session_service: SessionService

    def create_share(  # noqa: PLR0913
        self,
        session_id: UUID,
        access_level: str,
        shared_by_name: str,
        shared_by_email: str,
        recipient_name: str | None = None,
        recipient_email: str | None = None,
        notes: str | None = None,
    ) -> AccessToken:
        """Issue a token and mark the session shared."""
        if access_level not in ACCESS_LEVELS:
            raise InvalidAccessLevelError(f"Unknown access level: {access_level}")
        self.session_service.get_session(session_id)
        created = self.token_repository.create_token(
            session_id=session_id,
            token=uuid4(),
            access_level=access_level,
            recipient_name=recipient_name,
            recipient_email=recipient_email,
            notes=notes,
            created_by_name=shared_by_name,
            created_by_email=shared_by_email,
        )
        self.session_service.session_repository.mark_shared(
            session_id,
            shared_by_name=shared_by_name,
            shared_by_email=shared_by_email,
            shared_at=datetime.now(tz=UTC),
        )
        logger.info(
            "Created share token",
            extra={"session_id": str(session_id), "access_level": access_level},
        )
        return created

    def list_shares(self, session_id: UUID) -> list[AccessToken]:
        """Return the session's active tokens."""
        self.session_service.get_session(session_id)
        return self.token_repository.list_active(session_id)

    def revoke_share(self, session_id: UUID, token_id: UUID) -> None:
        """Deactivate a token of the session."""
        self.session_service.get_session(session_id)
        token = self.token_repository.get_token(token_id)
        if token is None or token.session_id != session_id:
            raise InvalidShareTokenError("Share token not found")
        self.token_repository.deactivate(token_id)

    def open_share(self, raw_token: str, *, record: bool = True) -> SharedAccess:
        """Validate a token and, unless told otherwise, count the access."""
        try:
            token_value = UUID(raw_token)
        except ValueError as exc:
            raise InvalidShareTokenError("Invalid or expired share link") from exc
        token = self.token_repository.get_by_token(token_value)
        if token is None or not token.is_active:
            raise InvalidShareTokenError("Invalid or expired share link")
        session = self.session_service.session_repository.get_session(
            token.session_id
        )
        if session is None:
            raise InvalidShareTokenError("Invalid or expired share link")
        if record:
            self.token_repository.record_access(
                token.id, token.access_count + 1, datetime.now(tz=UTC)
            )
        return SharedAccess(token=token, session=session)

    def require_edit(self, access: SharedAccess) -> None:
        """Raise unless the grant allows edits."""
        if not access.can_edit:
            raise AccessDeniedError("This share link is view-only")
