"""SQL repository for the users table."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from netflim_api.db.tables import UserRow, new_id, utcnow


class UsersRepo:
    """Lookup and creation of visitors by session token."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_session_id(self, session_id: str) -> Optional[UserRow]:
        res = await self._session.execute(
            select(UserRow).where(UserRow.session_id == session_id)
        )
        return res.scalar_one_or_none()

    async def create(self, session_id: str) -> UserRow:
        """Insert a user; IntegrityError surfaces if the token is taken."""
        now = utcnow()
        user = UserRow(
            id=new_id(),
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get_all(self) -> List[UserRow]:
        res = await self._session.execute(
            select(UserRow).order_by(UserRow.created_at.desc())
        )
        return list(res.scalars())

    async def count(self) -> int:
        res = await self._session.execute(select(func.count(UserRow.id)))
        return int(res.scalar_one())
