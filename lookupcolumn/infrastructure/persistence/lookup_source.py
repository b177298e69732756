"""SQLAlchemy implementation of ILookupDataSource.

Lookup tables are resolved from schema metadata (MetaData, a declarative
base, or reflection) and read with a single SELECT of (primary key,
field) streamed from one connection.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping
from typing import Any

from sqlalchemy import Engine, MetaData, Table, select
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class SqlAlchemyLookupSource:
    """Lookup data source over a SQLAlchemy Engine.

    Tables are addressed by identifier: the table name, or for
    from_declarative_base() also the mapped class name (e.g.
    'PermissionType' for a class mapped to 'permission_type').
    """

    def __init__(self, engine: Engine, tables: Mapping[str, Table]) -> None:
        self.engine = engine
        self._tables = dict(tables)

    @classmethod
    def from_metadata(cls, engine: Engine, metadata: MetaData) -> SqlAlchemyLookupSource:
        """Address every table of metadata by its name."""
        return cls(engine, {table.name: table for table in metadata.tables.values()})

    @classmethod
    def from_declarative_base(
        cls, engine: Engine, base: type[DeclarativeBase]
    ) -> SqlAlchemyLookupSource:
        """Address tables of a declarative base by table name and mapped class name."""
        tables: dict[str, Table] = {
            table.name: table for table in base.metadata.tables.values()
        }
        for mapper in base.registry.mappers:
            local_table = mapper.local_table
            if isinstance(local_table, Table):
                tables[mapper.class_.__name__] = local_table
        return cls(engine, tables)

    @classmethod
    def reflect(cls, engine: Engine, schema: str | None = None) -> SqlAlchemyLookupSource:
        """Reflect the database schema and address tables by name."""
        metadata = MetaData()
        metadata.reflect(bind=engine, schema=schema)
        logger.info("Reflected %d tables for lookups", len(metadata.tables))
        return cls.from_metadata(engine, metadata)

    def schema_has_table(self, table: str) -> bool:
        return table in self._tables

    def table_has_column(self, table: str, column: str) -> bool:
        sa_table = self._tables.get(table)
        return sa_table is not None and column in sa_table.c

    def primary_key_columns(self, table: str) -> list[str]:
        return [column.name for column in self._tables[table].primary_key.columns]

    def query_all_pairs(
        self, table: str, primary_key_column: str, field_name: str
    ) -> Iterator[tuple[Hashable, Any]]:
        """Yield (primary key, field) for every row of the table."""
        sa_table = self._tables[table]
        stmt = select(sa_table.c[primary_key_column], sa_table.c[field_name])
        with self.engine.connect() as conn:
            result = conn.execution_options(stream_results=True).execute(stmt)
            for key, value in result:
                yield key, value
