"""Infrastructure: SQLAlchemy persistence adapters."""
