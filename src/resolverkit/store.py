"""
Thin async store over SQLAlchemy sessions.

Resolvers only talk to the database through this class; it exposes the
find/count/remove/save contract with filter, projection, sort, skip and
limit semantics.
"""

import json
from collections.abc import AsyncGenerator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import JSON, cast, func, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import load_only
from sqlalchemy.sql import Select

from .config import settings
from .logging import get_logger
from .schema import get_mapper

logger = get_logger(__name__)

_UNSET: Any = object()


def dumps_json(value: Any) -> str:
    """Serialize JSON column values with sorted keys so equal documents store equal text."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


class SQLAlchemyStore:
    """
    Document store for one mapped model class.

    Documents returned are the ORM instances themselves. Sessions are opened
    per call unless the caller passes one in, which lets a resolver run
    fetch and delete inside one unit of work.
    """

    def __init__(
        self,
        model: type,
        session_factory: async_sessionmaker[AsyncSession],
        default_limit: int | None = _UNSET,
    ):
        self.mapper = get_mapper(model)
        self.model = model
        self.session_factory = session_factory
        # Cap applied by find() when no limit is given; None means unbounded
        self.default_limit = settings.default_limit if default_limit is _UNSET else default_limit

    @property
    def model_name(self) -> str:
        return self.mapper.class_.__name__

    @asynccontextmanager
    async def session_scope(
        self, session: AsyncSession | None = None, commit: bool = True
    ) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield ``session`` as is, or a fresh session.

        A fresh session is committed on success when ``commit`` is set. Reads
        pass ``commit=False``: the session is only closed, which detaches the
        loaded documents without expiring them whatever ``expire_on_commit``
        the factory was built with.
        """
        if session is not None:
            yield session
            return

        async with self.session_factory() as new_session:
            try:
                yield new_session
                if commit:
                    await new_session.commit()
            except Exception:
                await new_session.rollback()
                raise

    # Query building

    def _column(self, name: str) -> Any:
        return getattr(self.model, name)

    def _dialect_name(self, session: AsyncSession) -> str:
        return session.get_bind(mapper=self.mapper).dialect.name

    def _equals(self, name: str, value: Any, dialect_name: str) -> Any:
        column = self._column(name)
        if isinstance(column.type, JSON) and dialect_name == "postgresql":
            # PostgreSQL has no json = json operator; jsonb compares structurally
            return cast(column, JSONB) == cast(value, JSONB)
        # Elsewhere both sides go through the JSON serializer, see dumps_json
        return column == value

    def _apply_filter(
        self, stmt: Select, filter: Mapping[str, Any] | None, dialect_name: str
    ) -> Select:
        for name, value in (filter or {}).items():
            stmt = stmt.where(self._equals(name, value, dialect_name))
        return stmt

    def _apply_projection(self, stmt: Select, projection: Iterable[str] | None) -> Select:
        if not projection:
            return stmt
        names = set(projection)
        names.update(self.mapper.get_property_by_column(c).key for c in self.mapper.primary_key)
        columns = [self._column(name) for name in sorted(names) if name in self.mapper.column_attrs]
        return stmt.options(load_only(*columns))

    def _apply_sort(self, stmt: Select, sort: Sequence[tuple[str, int]] | None) -> Select:
        for name, direction in sort or ():
            column = self._column(name)
            stmt = stmt.order_by(column.asc() if direction >= 0 else column.desc())
        return stmt

    def _apply_window(self, stmt: Select, skip: int, limit: int | None) -> Select:
        # OFFSET is always applied before LIMIT by the database
        if skip:
            stmt = stmt.offset(skip)
        if limit is None:
            limit = self.default_limit
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    # Store contract

    async def find(
        self,
        filter: Mapping[str, Any] | None = None,
        projection: Iterable[str] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int | None = None,
        session: AsyncSession | None = None,
    ) -> list[Any]:
        """Return documents matching ``filter``, ordered, then skipped, then limited."""
        async with self.session_scope(session, commit=False) as active:
            stmt = self._apply_filter(select(self.model), filter, self._dialect_name(active))
            stmt = self._apply_projection(stmt, projection)
            stmt = self._apply_sort(stmt, sort)
            stmt = self._apply_window(stmt, skip, limit)
            result = await active.execute(stmt)
            documents = list(result.scalars().all())

        logger.debug("find", model=self.model_name, count=len(documents))
        return documents

    async def find_by_id(
        self,
        id_filter: Mapping[str, Any],
        projection: Iterable[str] | None = None,
        session: AsyncSession | None = None,
    ) -> Any | None:
        """Return the single document matching ``id_filter``, or None."""
        async with self.session_scope(session, commit=False) as active:
            stmt = self._apply_filter(select(self.model), id_filter, self._dialect_name(active))
            stmt = self._apply_projection(stmt, projection)
            result = await active.execute(stmt)
            return result.scalar_one_or_none()

    async def find_by_ids(
        self,
        id_field: str,
        ids: Sequence[Any],
        projection: Iterable[str] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        limit: int | None = None,
        session: AsyncSession | None = None,
    ) -> list[Any]:
        """Return documents whose ``id_field`` is one of ``ids``."""
        stmt = select(self.model).where(self._column(id_field).in_(list(ids)))
        stmt = self._apply_projection(stmt, projection)
        stmt = self._apply_sort(stmt, sort)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self.session_scope(session, commit=False) as active:
            result = await active.execute(stmt)
            return list(result.scalars().all())

    async def count(
        self,
        filter: Mapping[str, Any] | None = None,
        session: AsyncSession | None = None,
    ) -> int:
        """Count documents matching ``filter``."""
        async with self.session_scope(session, commit=False) as active:
            stmt = self._apply_filter(
                select(func.count()).select_from(self.model), filter, self._dialect_name(active)
            )
            result = await active.execute(stmt)
            return int(result.scalar_one())

    async def remove(self, document: Any, session: AsyncSession | None = None) -> Any:
        """
        Delete one document instance.

        Goes through ``Session.delete`` rather than a bulk DELETE statement so
        the mapper's before_delete/after_delete events and ORM cascades run.
        """
        async with self.session_scope(session) as active:
            await active.delete(document)
            await active.flush()

        logger.debug("remove", model=self.model_name)
        return document

    async def save(self, document: Any, session: AsyncSession | None = None) -> Any:
        """Insert or update one document instance."""
        async with self.session_scope(session) as active:
            active.add(document)
            await active.flush()
        return document


def create_session_factory(
    database_url: str | None = None, echo: bool | None = None
) -> async_sessionmaker[AsyncSession]:
    """Create an async engine and a sessionmaker suitable for SQLAlchemyStore."""
    db_url = database_url or settings.database_url

    engine_kwargs: dict[str, Any] = {"echo": settings.sql_echo if echo is None else echo}
    if not db_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.database_pool_size
        engine_kwargs["max_overflow"] = settings.database_max_overflow

    engine = create_async_engine(db_url, json_serializer=dumps_json, **engine_kwargs)
    logger.info("Database engine created", dialect=engine.dialect.name)

    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
