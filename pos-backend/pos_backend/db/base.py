from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

Base = declarative_base()


def build_engine(db_url: str, echo: bool = False, use_null_pool: bool = False) -> AsyncEngine:
    kwargs = {"future": True, "echo": echo}
    if use_null_pool:
        kwargs["poolclass"] = NullPool
    return create_async_engine(db_url, **kwargs)


def build_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables for the registered models."""
    # import models so their tables are attached to Base.metadata
    from pos_backend.db.models import line_items, payments, products, transactions  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request):
    session_factory = request.app.state.sessionmaker
    async with session_factory() as session:
        yield session
