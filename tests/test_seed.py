from sqlalchemy import func, select

from pipetrack.db import seed
from pipetrack.db.models.security import User
from pipetrack.services.master_data import DEFAULT_MASTER_DATA, MasterDataRegistry


async def test_seed_is_idempotent(monkeypatch, session_factory):
    async def fake_sessions():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(seed, "get_async_session", fake_sessions)
    monkeypatch.setattr(seed, "get_password_hash", lambda raw: f"hashed:{raw}")

    await seed.seed_all()
    await seed.seed_all()

    async with session_factory() as session:
        count = (await session.execute(select(func.count(User.id)))).scalar_one()
        assert count == len(seed.DEFAULT_USERS)
        roles = set((await session.execute(select(User.role))).scalars())
        assert roles == {"admin", "order_entry", "production", "operator"}
        registry = MasterDataRegistry(session)
        assert await registry.list_category("specs") == DEFAULT_MASTER_DATA["specs"]
        assert await registry.list_category("workshops") == DEFAULT_MASTER_DATA["workshops"]
