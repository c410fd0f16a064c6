"""
Shared pytest fixtures and configuration for all tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from resolverkit import SQLAlchemyStore, TypeComposer, TypeRegistry, compose_with_sqlalchemy
from resolverkit.store import dumps_json


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gender: Mapped[str | None] = mapped_column(String(16))
    relocation: Mapped[bool | None] = mapped_column(Boolean)
    age: Mapped[int | None] = mapped_column(Integer)
    skills: Mapped[list[str] | None] = mapped_column(JSON, info={"item_type": str})
    contacts: Mapped[dict[str, Any] | None] = mapped_column(JSON)


@pytest.fixture
def user_model() -> type[User]:
    return User


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory SQLite database with the test tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://", poolclass=StaticPool, json_serializer=dumps_json
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest.fixture
def registry() -> TypeRegistry:
    """Fresh type registry per test."""
    return TypeRegistry()


@pytest.fixture
def user_store(session_factory: async_sessionmaker[AsyncSession]) -> SQLAlchemyStore:
    return SQLAlchemyStore(User, session_factory, default_limit=None)


@pytest.fixture
def user_tc(user_store: SQLAlchemyStore, registry: TypeRegistry) -> TypeComposer:
    return compose_with_sqlalchemy(user_store, registry=registry)


@pytest_asyncio.fixture
async def users(user_store: SQLAlchemyStore) -> tuple[User, User]:
    """Two saved users: userName1 and userName2."""
    user1 = User(
        name="userName1",
        skills=["js", "ruby", "php", "python"],
        gender="male",
        relocation=True,
        age=30,
    )
    user2 = User(
        name="userName2",
        skills=["go", "erlang"],
        gender="female",
        relocation=False,
        age=25,
    )

    await user_store.save(user1)
    await user_store.save(user2)
    return user1, user2


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
