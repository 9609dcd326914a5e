import pytest

from netflim_api.core.config import settings
from netflim_api.db.store import Database
from netflim_api.main import create_app
from tests.helpers import serve


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch):
    # every test gets its own sqlite file, sentry stays off
    monkeypatch.setattr(settings, "db_path", str(tmp_path / "netflim.db"))
    monkeypatch.setattr(settings, "sentry_dsn", "")


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def client(app):
    async with serve(app) as ac:
        yield ac


@pytest.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "store.db"))
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
async def session(db):
    async with db.session() as s:
        yield s
