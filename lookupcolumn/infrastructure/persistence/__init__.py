"""Persistence: engine lifecycle and the SQLAlchemy lookup data source."""

from lookupcolumn.infrastructure.persistence.database import dispose_engine, get_engine
from lookupcolumn.infrastructure.persistence.lookup_source import SqlAlchemyLookupSource

__all__ = ["SqlAlchemyLookupSource", "dispose_engine", "get_engine"]
