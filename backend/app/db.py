from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from backend.app.config import settings


class Base(DeclarativeBase):
    pass


engine = create_async_engine(
    settings.database_url,
    echo=False,
    connect_args={"check_same_thread": False},
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:
    """FastAPI dependency for database sessions."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables and apply pragmas."""
    import backend.app.models  # noqa: F401  (registers the models)

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        # SQLite performance & safety pragmas
        await conn.execute(text("PRAGMA journal_mode = WAL"))
        await conn.execute(text("PRAGMA synchronous = NORMAL"))
        await conn.execute(text("PRAGMA foreign_keys = ON"))
        await conn.execute(text("PRAGMA busy_timeout = 5000"))

        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_demo_data:
        await _seed_defaults()


async def _seed_defaults() -> None:
    """Seed sample feature requests into the default board when it is empty."""
    import uuid
    from datetime import UTC, datetime

    from sqlalchemy import select

    from backend.app.models.feature import Feature

    async with async_session() as session:
        feature_check = await session.execute(
            select(Feature).where(Feature.app_id == settings.app_id).limit(1)
        )
        if feature_check.scalar_one_or_none() is not None:
            return

        now = datetime.now(UTC).isoformat()
        seed_features = [
            (
                "Dark Mode",
                "A dark color scheme that follows the system appearance setting.",
            ),
            (
                "Export to CSV",
                "Download the feature list with votes and status as a spreadsheet.",
            ),
            (
                "Email Notifications",
                "Get an email when a feature you voted for changes status.",
            ),
            (
                "Public Roadmap",
                "Show planned and in-progress features on a shareable page.",
            ),
        ]

        for title, desc in seed_features:
            session.add(
                Feature(
                    id=str(uuid.uuid4()),
                    app_id=settings.app_id,
                    title=title,
                    description=desc,
                    status="open",
                    created_at=now,
                )
            )

        await session.commit()
