from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from quickbill.core.config import settings
from quickbill.models.base import Base  # noqa: F401

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    # keeps the created order usable after commit
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


async def get_db():
    """
    FastAPI dependency yielding one session per request.

        async def handler(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        yield session
