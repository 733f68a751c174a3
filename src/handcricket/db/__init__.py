"""Persistence: SQLAlchemy engine, ORM rows, repository."""
