"""Session resolution: opaque client token -> durable user row."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import UserRow
from netflim_api.services.repositories.users_repo import UsersRepo

logger = logging.getLogger(__name__)


class SessionService:
    """Create-on-write, never create on read."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = UsersRepo(session)

    @staticmethod
    def new_session_token() -> str:
        return str(uuid.uuid4())

    async def resolve_user(self, token: str) -> Optional[UserRow]:
        """Read-only lookup; an unseen token stays unseen."""
        return await self.repo.get_by_session_id(token)

    async def resolve_or_create_user(self, token: str) -> UserRow:
        """Return the user for `token`, creating it on first sight.

        Two first requests with the same token race on the unique index;
        the loser rolls back and reads the winner's row.
        """
        user = await self.repo.get_by_session_id(token)
        if user is not None:
            return user
        try:
            user = await self.repo.create(token)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            user = await self.repo.get_by_session_id(token)
            if user is None:
                raise
            logger.info("session_race_resolved", extra={"user_id": user.id})
            return user
        logger.info("user_created", extra={"user_id": user.id})
        return user
