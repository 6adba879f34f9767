"""
PostgreSQL Client Wrapper

Centralized PostgreSQL client wrapper around an asyncpg connection pool.
Provides configuration from InfraConfig and a consistent database access pattern.

Usage:
    from core.postgres_client import PostgresClientWrapper

    # Create client
    db = PostgresClientWrapper("crowdfund_service")

    # Execute queries (the pool is created on first use)
    row = await db.query_row("SELECT record FROM crowdfund.campaigns WHERE campaign_id = $1", [campaign_id])
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from core.config import InfraConfig

logger = logging.getLogger(__name__)


class PostgresClientWrapper:
    """
    PostgreSQL client wrapper.

    Wraps an asyncpg pool and provides:
    - Lazy pool creation on first use
    - Environment variable fallbacks via InfraConfig
    - Row results as plain dictionaries
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Initialize PostgreSQL client wrapper.

        Args:
            service_name: Name of the service using this client
            config: Infrastructure config (defaults to environment)
            host: PostgreSQL host override
            port: PostgreSQL port override
            database: Database name override
            username: Database username override
            password: Database password override
        """
        config = config or InfraConfig.from_env()

        self.service_name = service_name
        self.host = host or config.postgres_host
        self.port = port or config.postgres_port
        self.database = database or config.postgres_db
        self.username = username or config.postgres_user
        self.password = password or config.postgres_password
        self.min_size = config.postgres_pool_min
        self.max_size = config.postgres_pool_max

        self._pool: Optional[asyncpg.Pool] = None

        logger.info(f"PostgreSQL client initialized for {service_name}: {self.host}:{self.port}/{self.database}")

    @property
    def pool(self) -> Optional[asyncpg.Pool]:
        """Get underlying asyncpg pool"""
        return self._pool

    async def connect(self) -> None:
        """Create the connection pool if it does not exist yet"""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                user=self.username,
                password=self.password,
                database=self.database,
                min_size=self.min_size,
                max_size=self.max_size,
            )

    async def health_check(self) -> bool:
        """Check database health"""
        try:
            row = await self.query_row("SELECT 1 AS healthy")
            return bool(row and row.get("healthy") == 1)
        except Exception as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return False

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return single row"""
        await self.connect()
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(sql, *(params or []))
        return dict(row) if row is not None else None

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> str:
        """Execute SQL statement and return the command status"""
        await self.connect()
        async with self._pool.acquire() as conn:
            return await conn.execute(sql, *(params or []))

    async def close(self):
        """Close connection pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
