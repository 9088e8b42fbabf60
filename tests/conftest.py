"""Shared fixtures: in-memory database, ASGI test client, fake collaborator.

Helpers (``create_feature``, ``create_vote``, ``create_comment``, ``make_feature``)
are imported directly by the test modules.
"""

import uuid
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.db import Base, get_db
from backend.app.main import app
from backend.app.models.feature import Feature as FeatureRecord
from backend.app.models.feature import FeatureComment, FeatureVote
from board.models import Feature, FeatureStatus

# ---------------------------------------------------------------------------
# Database / API fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncSession:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def client(db: AsyncSession) -> AsyncClient:
    """HTTP client wired to the app, with every request sharing the test session."""

    async def _override_get_db():
        yield db
        await db.commit()

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_feature(
    db: AsyncSession,
    title: str = "Feature",
    description: str = "",
    app_id: str = "app-1",
    status: str = "open",
    created_at: str | None = None,
) -> FeatureRecord:
    feature = FeatureRecord(
        id=str(uuid.uuid4()),
        app_id=app_id,
        title=title,
        description=description,
        status=status,
        created_at=created_at or datetime.now(UTC).isoformat(),
    )
    db.add(feature)
    await db.flush()
    return feature


async def create_vote(db: AsyncSession, feature_id: str, user_id: str) -> FeatureVote:
    vote = FeatureVote(
        feature_id=feature_id,
        user_id=user_id,
        created_at=datetime.now(UTC).isoformat(),
    )
    db.add(vote)
    await db.flush()
    return vote


async def create_comment(
    db: AsyncSession, feature_id: str, content: str = "+1", author_id: str = "someone"
) -> FeatureComment:
    comment = FeatureComment(
        id=str(uuid.uuid4()),
        feature_id=feature_id,
        author_id=author_id,
        content=content,
        created_at=datetime.now(UTC).isoformat(),
    )
    db.add(comment)
    await db.flush()
    return comment


# ---------------------------------------------------------------------------
# Client-side helpers
# ---------------------------------------------------------------------------


def make_feature(
    id: str,
    title: str = "Feature",
    description: str = "",
    votes: int = 0,
    day: int = 1,
    status: FeatureStatus = FeatureStatus.OPEN,
) -> Feature:
    return Feature(
        id=id,
        app_id="app-1",
        title=title,
        description=description,
        votes_count=votes,
        created_at=datetime(2025, 1, day, tzinfo=UTC),
        status=status,
    )


class FakeFeatureClient:
    """In-memory collaborator that records the calls made to it."""

    def __init__(self, features=(), voted=()):
        self.features = tuple(features)
        self.voted = set(voted)
        self.is_loading = False
        self.last_error = None
        self.fetch_calls: list[str] = []
        self.upvote_calls: list[str] = []
        self._listeners = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def notify(self):
        for listener in list(self._listeners):
            listener()

    def has_voted_for_feature(self, feature_id):
        return feature_id in self.voted

    async def fetch_features(self, app_id):
        self.fetch_calls.append(app_id)
        self.notify()

    async def upvote_feature(self, feature):
        self.upvote_calls.append(feature.id)
        self.voted.add(feature.id)
        self.features = tuple(
            f.model_copy(update={"votes_count": f.votes_count + 1}) if f.id == feature.id else f
            for f in self.features
        )
        self.notify()


@pytest.fixture
def fake_client() -> FakeFeatureClient:
    return FakeFeatureClient(
        features=[
            make_feature("1", title="Dark mode", description="Night theme", votes=5, day=3),
            make_feature("2", title="Export CSV", description="Download data", votes=12, day=1),
        ]
    )
