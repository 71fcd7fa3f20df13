"""
Base Database Connector

Abstract base class for database connectors. Provides a consistent async
interface for executing validated read-only SQL and introspecting the live
schema.

All connectors must implement:
- connect(): Establish connection with connection pooling
- execute(): Run a read-only query with timeout
- get_live_schema(): Tables, columns, comments and foreign keys
- close(): Clean up connections and pools
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ============================================================================
# Data Models
# ============================================================================


class ForeignKey(BaseModel):
    """Foreign-key relationship triple."""

    column: str = Field(..., description="Referencing column")
    foreign_table: str = Field(..., description="Referenced table")
    foreign_column: str = Field(..., description="Referenced column")

    def render(self) -> str:
        """Render as 'column -> table.column'."""
        return f"{self.column} -> {self.foreign_table}.{self.foreign_column}"


class LiveTable(BaseModel):
    """Introspected table from the live database."""

    table_name: str = Field(..., description="Table name")
    columns: list[str] = Field(default_factory=list, description="Column names in order")
    comment: str | None = Field(None, description="Table comment, if any")
    foreign_keys: list[ForeignKey] = Field(
        default_factory=list, description="Outgoing foreign keys"
    )


class QueryResult(BaseModel):
    """Result from query execution."""

    rows: list[dict[str, Any]] = Field(..., description="Query result rows")
    row_count: int = Field(..., description="Number of rows returned")
    columns: list[str] = Field(..., description="Column names")
    execution_time_ms: float = Field(..., description="Query execution time in ms")


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConnectionError(ConnectorError):
    """Error establishing or managing database connection."""

    pass


class QueryError(ConnectorError):
    """Error executing database query."""

    pass


class SchemaError(ConnectorError):
    """Error introspecting database schema."""

    pass


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Abstract base class for database connectors.

    Usage:
        connector = PostgresConnector(host="localhost", ...)
        async with connector:
            result = await connector.execute("SELECT count(*) FROM users")
            tables = await connector.get_live_schema()
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        pool_size: int = 5,
        timeout: int = 15,
        **kwargs,
    ):
        """
        Initialize connector.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
            pool_size: Connection pool size (default: 5)
            timeout: Statement timeout in seconds (default: 15)
            **kwargs: Additional connector-specific parameters
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.timeout = timeout
        self.kwargs = kwargs

        self._pool = None
        self._connected = False

        logger.info(f"Initialized {self.__class__.__name__} for {user}@{host}:{port}/{database}")

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection and create connection pool.

        Idempotent.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    async def execute(self, query: str, timeout: int | None = None) -> QueryResult:
        """
        Execute a validated read-only SQL query.

        Raises:
            QueryError: If query execution fails
            ConnectionError: If not connected
        """
        pass

    @abstractmethod
    async def get_live_schema(self, schema_name: str | None = None) -> list[LiveTable]:
        """
        Introspect tables, columns, comments and foreign keys.

        Raises:
            SchemaError: If schema introspection fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connection and clean up pool. Idempotent."""
        pass

    @property
    def is_connected(self) -> bool:
        """Check if connector is connected."""
        return self._connected

    @property
    def pool(self):
        """Underlying connection pool (None until connected)."""
        return self._pool

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.user}@{self.host}:{self.port}/{self.database} ({status})>"
