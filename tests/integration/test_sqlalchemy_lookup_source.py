"""SqlAlchemyLookupSource and lookup accessors against an in-memory SQLite database."""

import pytest
from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    insert,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from lookupcolumn.application.services.lookup_accessors import add_lookup
from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.domain.exceptions import AccessorConflictException, LookupSchemaException
from lookupcolumn.infrastructure.persistence.lookup_source import SqlAlchemyLookupSource


class Base(DeclarativeBase):
    pass


class PermissionType(Base):
    __tablename__ = "permission_type"

    permission_type_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(45), unique=True)


class Translation(Base):
    __tablename__ = "translation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lang: Mapped[str] = mapped_column(String(2), primary_key=True)
    name: Mapped[str] = mapped_column(String(45))


class User(Base):
    __tablename__ = "app_user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(45))
    last_name: Mapped[str] = mapped_column(String(45))
    permission_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("permission_type.permission_type_id"), nullable=True
    )


@pytest.fixture(scope="module")
def engine():
    """In-memory SQLite engine seeded with PermissionType and two users."""
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    with Session(eng) as session:
        session.add_all(
            [
                PermissionType(permission_type_id=1, name="Administrator"),
                PermissionType(permission_type_id=2, name="User"),
                PermissionType(permission_type_id=3, name="Reader"),
                Translation(id=1, lang="en", name="hello"),
                User(user_id=1, first_name="Itachi", last_name="Uchiha", permission_type_id=1),
                User(user_id=2, first_name="Kakashi", last_name="Hatake", permission_type_id=None),
            ]
        )
        session.commit()
    yield eng
    eng.dispose()


@pytest.fixture
def statements(engine) -> list[str]:
    """SQL statements executed on the engine during the test."""
    executed: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        executed.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield executed
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture(scope="module")
def sql_cache(engine) -> LookupCache:
    """Cache over the declarative base; binds permission accessors onto User once."""
    source = SqlAlchemyLookupSource.from_declarative_base(engine, Base)
    lookup_cache = LookupCache(source)
    add_lookup(User, "permission", "permission_type_id", "PermissionType", cache=lookup_cache)
    return lookup_cache


@pytest.fixture(autouse=True)
def _fresh_cache(sql_cache: LookupCache):
    sql_cache.reset_all()
    yield


def _lookup_selects(statements: list[str]) -> list[str]:
    return [s for s in statements if "FROM permission_type" in s]


def test_tables_addressed_by_class_and_table_name(engine) -> None:
    """from_declarative_base exposes mapped class names and table names."""
    source = SqlAlchemyLookupSource.from_declarative_base(engine, Base)
    assert source.schema_has_table("PermissionType")
    assert source.schema_has_table("permission_type")
    assert not source.schema_has_table("Nope")
    assert source.table_has_column("PermissionType", "name")
    assert not source.table_has_column("PermissionType", "label")
    assert not source.table_has_column("Nope", "name")
    assert source.primary_key_columns("PermissionType") == ["permission_type_id"]
    assert source.primary_key_columns("translation") == ["id", "lang"]


def test_query_all_pairs(engine) -> None:
    """query_all_pairs yields every (primary key, field) row."""
    source = SqlAlchemyLookupSource.from_declarative_base(engine, Base)
    pairs = sorted(source.query_all_pairs("PermissionType", "permission_type_id", "name"))
    assert pairs == [(1, "Administrator"), (2, "User"), (3, "Reader")]


def test_round_trip_and_single_query(sql_cache: LookupCache, statements: list[str]) -> None:
    """Lookups resolve both ways with one SELECT against the lookup table."""
    assert sql_cache.fetch_name_by_id("PermissionType", "name", 2) == "User"
    assert sql_cache.fetch_id_by_name("PermissionType", "name", "Reader") == 3
    assert sql_cache.fetch_id_by_name("PermissionType", "name", "Administrator") == 1
    assert len(_lookup_selects(statements)) == 1


def test_reset_table_requeries(sql_cache: LookupCache, statements: list[str]) -> None:
    """reset_table forces one fresh SELECT with identical results."""
    first = sql_cache.fetch_id_by_name("PermissionType", "name", "Reader")
    sql_cache.reset_table("PermissionType")
    second = sql_cache.fetch_id_by_name("PermissionType", "name", "Reader")
    assert first == second == 3
    assert len(_lookup_selects(statements)) == 2


def test_composite_key_rejected(sql_cache: LookupCache) -> None:
    """Tables with a composite primary key raise LookupSchemaException."""
    with pytest.raises(LookupSchemaException):
        sql_cache.fetch_name_by_id("Translation", "name", 1)


def test_orm_accessors(engine, sql_cache: LookupCache) -> None:
    """Bound accessors work on ORM rows; the setter change persists on commit."""
    with Session(engine) as session:
        user = session.get(User, 1)
        assert user.permission() == "Administrator"
        assert user.is_permission("Administrator") is True
        user.set_permission("Reader")
        assert user.permission_type_id == 3
        session.commit()

    with Session(engine) as session:
        user = session.get(User, 1)
        assert user.permission() == "Reader"
        user.set_permission("Administrator")
        session.commit()


def test_checker_on_null_foreign_key(engine, sql_cache: LookupCache, statements) -> None:
    """A user without permission is not any permission; no lookup query runs."""
    with Session(engine) as session:
        user = session.get(User, 2)
        statements.clear()
        assert not user.is_permission("User")
    assert _lookup_selects(statements) == []


def test_mapped_column_name_conflicts(sql_cache: LookupCache) -> None:
    """A generated name clashing with a mapped column is rejected."""
    with pytest.raises(AccessorConflictException):
        add_lookup(
            User,
            "permission_type_id",
            "permission_type_id",
            "PermissionType",
            cache=sql_cache,
        )


def test_reflected_source(tmp_path) -> None:
    """reflect() discovers tables from the database by name."""
    eng = create_engine(f"sqlite:///{tmp_path / 'lookups.db'}")
    metadata = MetaData()
    status = Table(
        "status",
        metadata,
        Column("status_id", Integer, primary_key=True),
        Column("label", String(20), nullable=False),
    )
    metadata.create_all(eng)
    with eng.begin() as conn:
        conn.execute(insert(status), [{"status_id": 1, "label": "open"}, {"status_id": 2, "label": "closed"}])

    cache = LookupCache(SqlAlchemyLookupSource.reflect(eng))
    assert cache.fetch_name_by_id("status", "label", 2) == "closed"
    assert cache.fetch_id_by_name("status", "label", "open") == 1
    eng.dispose()
