"""
PostgreSQL session handle for the document store.
Opening the session is a precondition only; there is no pooling or reconnect logic here.
"""

from typing import Any, List, Optional, Protocol

import asyncpg

from .config import get_connection_options
from .options import ConnectionOptions
from ..util.logging import logger


class Executor(Protocol):
    """What the store needs from the execution layer; asyncpg connections and pools both fit."""

    async def fetch(self, query: str, *args: Any) -> List[Any]:
        ...

    async def execute(self, query: str, *args: Any) -> str:
        ...


class Session:
    """An open connection plus the lost-connection hook registered on it."""

    def __init__(self, connection: asyncpg.Connection, options: ConnectionOptions):
        self.connection = connection
        self.options = options
        self._listener = None

        if options.on_lost is not None:
            self._listener = self._on_terminated
            connection.add_termination_listener(self._listener)

    def _on_terminated(self, connection):
        logger.log_operation("db.connection_lost", "failed", {
            "host": self.options.host,
            "port": self.options.port,
            "database": self.options.database,
        })
        self.options.on_lost(connection)

    async def fetch(self, query: str, *args: Any) -> List[Any]:
        return await self.connection.fetch(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        return await self.connection.execute(query, *args)

    def is_closed(self) -> bool:
        return self.connection.is_closed()

    async def close(self) -> None:
        """Close the connection without reporting it as lost."""
        if self._listener is not None:
            self.connection.remove_termination_listener(self._listener)
            self._listener = None
        await self.connection.close()
        logger.log_operation("db.close", "success", {"database": self.options.database})


async def connect(options: Optional[ConnectionOptions] = None) -> Session:
    """Open a PostgreSQL session, using environment configuration when no options are given."""
    if options is None:
        options = get_connection_options()

    connection = await asyncpg.connect(
        host=options.host,
        port=options.port,
        user=options.user,
        password=options.password or None,
        database=options.database,
        timeout=options.timeout,
    )

    logger.log_operation("db.connect", "success", {
        "host": options.host,
        "port": options.port,
        "database": options.database,
    })
    return Session(connection, options)


async def health_check(executor: Executor) -> bool:
    """Check database health."""
    try:
        rows = await executor.fetch("select 1 as ok")
        return bool(rows) and rows[0]["ok"] == 1
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return False
