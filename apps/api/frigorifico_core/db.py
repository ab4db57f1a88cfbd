from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from frigorifico_core import config

if not config.DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set")


def build_engine(url: str) -> AsyncEngine:
    """Async engine for ``url``; SQLite files get the default pool without pre-ping."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=config.DB_ECHO)
    return create_async_engine(
        url,
        echo=config.DB_ECHO,
        pool_pre_ping=True,
        pool_size=config.DB_POOL_SIZE,
    )


engine = build_engine(config.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_session():
    """Request-scoped session; routes commit, anything uncommitted is rolled back on close."""
    async with AsyncSessionLocal() as session:
        yield session
