"""Relational storage for the wizard engine.

SqlStorage implements the engine's Storage interface with SQLAlchemy Core
statements over the ORM tables. Each call runs in its own session and
commits before returning, so a wizard's completion write is a short
sequence of independent statements.

Security: Table and column names come from wizard code, never from chat
input, but they are still checked against the ORM metadata so a typo
fails loudly instead of producing dynamic SQL. All values are bound
parameters.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Table, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Executable

from fanjobo.models import Base


class SqlStorage:
    """Storage backed by PostgreSQL through an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the storage.

        Args:
            session_factory: Factory producing AsyncSession objects
                (fanjobo.core.database.async_session_factory in production).
        """
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # Storage interface
    # -------------------------------------------------------------------------

    async def insert(self, table: str, values: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it (including generated id)."""
        target = self._table(table, values)
        stmt = insert(target).values(dict(values)).returning(*target.c)
        row = await self._execute(stmt, commit=True)
        if row is None:
            msg = f"Insert into {table} returned no row"
            raise RuntimeError(msg)
        return row

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Update rows matching where; return the first updated row."""
        if not where:
            msg = f"Refusing unfiltered update of {table}"
            raise ValueError(msg)
        target = self._table(table, {**values, **where})
        stmt = (
            update(target)
            .where(*(target.c[column] == value for column, value in where.items()))
            .values(dict(values))
            .returning(*target.c)
        )
        return await self._execute(stmt, commit=True)

    async def upsert(
        self,
        table: str,
        values: Mapping[str, Any],
        conflict_keys: Sequence[str],
    ) -> dict[str, Any]:
        """Insert or update on conflict_keys; return the resulting row."""
        target = self._table(table, values)
        self._check_columns(target, conflict_keys)
        stmt = insert(target).values(dict(values))
        changes = {
            column: stmt.excluded[column]
            for column in values
            if column not in conflict_keys
        }
        if "updated_at" in target.c:
            changes["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_keys),
            set_=changes,
        ).returning(*target.c)
        row = await self._execute(stmt, commit=True)
        if row is None:
            msg = f"Upsert into {table} returned no row"
            raise RuntimeError(msg)
        return row

    async def fetch_one(
        self,
        table: str,
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Return the first row matching where, or None."""
        target = self._table(table, where)
        stmt = (
            select(target)
            .where(*(target.c[column] == value for column, value in where.items()))
            .limit(1)
        )
        return await self._execute(stmt, commit=False)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _table(name: str, columns: Mapping[str, Any] | Sequence[str]) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            msg = f"Unknown table: {name}"
            raise ValueError(msg)
        SqlStorage._check_columns(table, list(columns))
        return table

    @staticmethod
    def _check_columns(table: Table, columns: Sequence[str]) -> None:
        unknown = sorted(set(columns) - set(table.c.keys()))
        if unknown:
            msg = f"Unknown columns for {table.name}: {', '.join(unknown)}"
            raise ValueError(msg)

    async def _execute(self, stmt: Executable, *, commit: bool) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            if commit:
                await session.commit()
        return dict(row) if row is not None else None
