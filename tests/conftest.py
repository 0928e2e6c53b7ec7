import os
import tempfile

# Settings are read at import time.
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))

import httpx
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Import Base + all models so metadata is complete
from marketplace.models import Base  # noqa: F401

from marketplace.main import app
from marketplace.core.db import get_db
from marketplace.services.storage import SqlStorage
from marketplace.services.uploads import LocalUploadStore, get_upload_store


def _test_db_url() -> str:
    return os.getenv("DATABASE_URL_TEST", "sqlite+aiosqlite://")


@pytest.fixture
async def async_engine():
    url = _test_db_url()
    if url.startswith("sqlite"):
        # one shared in-memory database per test
        engine = create_async_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    else:
        engine = create_async_engine(url, pool_pre_ping=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(db_session):
    return SqlStorage(db_session)


@pytest.fixture
def upload_store(tmp_path):
    return LocalUploadStore(str(tmp_path / "uploads"), max_files=10, max_bytes=1024)


@pytest.fixture
async def client(session_factory, upload_store):
    """
    HTTP client with a fresh session per request and uploads under tmp_path.
    """
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_upload_store] = lambda: upload_store

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def listing_fields():
    return {
        "city": "Abidjan",
        "commune": "Cocody",
        "neighborhood": "Riviera 2",
        "rooms": "3",
        "propertyType": "appartement",
        "transactionType": "location",
        "price": "50000",
        "deposit": "100000",
        "description": "Bel appartement lumineux",
        "phone": "+225 07 00 00 00 00",
    }


@pytest.fixture
def jpeg():
    def _make(name: str = "photo.jpg", size: int = 16, content_type: str = "image/jpeg"):
        return ("images", (name, b"\xff\xd8" + b"0" * size, content_type))

    return _make


@pytest.fixture
def create_listing(client, listing_fields, jpeg):
    """
    POST a listing through the API and return the decoded {listing, payment} body.
    """
    async def _create(**overrides):
        data = {**listing_fields, **overrides}
        r = await client.post("/api/v1/listings", data=data, files=[jpeg()])
        assert r.status_code == 201, r.text
        return r.json()

    return _create
