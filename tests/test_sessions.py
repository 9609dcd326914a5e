import asyncio

from sqlalchemy import func, select

from netflim_api.db.tables import UserRow
from netflim_api.services.sessions_service import SessionService


async def count_users(db) -> int:
    async with db.session() as s:
        res = await s.execute(select(func.count(UserRow.id)))
        return res.scalar_one()


async def test_resolve_user_never_creates(db):
    async with db.session() as s:
        assert await SessionService(s).resolve_user("unseen") is None
    assert await count_users(db) == 0


async def test_resolve_or_create_is_stable(db):
    async with db.session() as s:
        svc = SessionService(s)
        first = await svc.resolve_or_create_user("tok")
        second = await svc.resolve_or_create_user("tok")

    assert first.id == second.id
    assert first.session_id == "tok"
    assert await count_users(db) == 1


async def test_concurrent_first_use_yields_one_user(db):
    async def resolve():
        async with db.session() as s:
            user = await SessionService(s).resolve_or_create_user("shared")
            return user.id

    a, b = await asyncio.gather(resolve(), resolve())

    assert a == b
    assert await count_users(db) == 1


async def test_duplicate_insert_is_resolved_by_reread(db, monkeypatch):
    async with db.session() as s:
        existing = await SessionService(s).resolve_or_create_user("tok")

    async with db.session() as s:
        svc = SessionService(s)
        real_lookup = svc.repo.get_by_session_id
        calls = []

        async def stale_first_lookup(token):
            # the first read misses, as if the other request had not
            # committed yet
            calls.append(token)
            if len(calls) == 1:
                return None
            return await real_lookup(token)

        monkeypatch.setattr(svc.repo, "get_by_session_id",
                            stale_first_lookup)
        user = await svc.resolve_or_create_user("tok")

    assert user.id == existing.id
    assert len(calls) == 2
    assert await count_users(db) == 1


def test_new_session_tokens_are_unique():
    tokens = {SessionService.new_session_token() for _ in range(50)}
    assert len(tokens) == 50
