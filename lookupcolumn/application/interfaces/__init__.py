"""Application interfaces (ports) implemented by infrastructure."""

from lookupcolumn.application.interfaces.data_source import ILookupDataSource

__all__ = ["ILookupDataSource"]
