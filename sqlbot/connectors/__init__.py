"""
Database Connectors Module

Async database connectors used to run validated SQL and introspect the
live schema.

Usage:
    from sqlbot.connectors import PostgresConnector

    async with PostgresConnector.from_url(url) as connector:
        result = await connector.execute("SELECT * FROM users LIMIT 10")
"""

from sqlbot.connectors.base import (
    BaseConnector,
    ConnectionError,
    ConnectorError,
    ForeignKey,
    LiveTable,
    QueryError,
    QueryResult,
    SchemaError,
)
from sqlbot.connectors.postgres import PostgresConnector

__all__ = [
    "BaseConnector",
    "PostgresConnector",
    "ForeignKey",
    "LiveTable",
    "QueryResult",
    "ConnectorError",
    "ConnectionError",
    "QueryError",
    "SchemaError",
]
