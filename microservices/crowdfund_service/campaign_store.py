"""
Crowdfund Service Campaign Stores

Durable map implementations keyed by campaign id:
- InMemoryCampaignStore: process-local, for tests and the memory backend
- PostgresCampaignStore: JSONB rows in PostgreSQL (Async)
"""

import logging
from typing import Dict, Optional

from core.config import InfraConfig
from core.postgres_client import PostgresClientWrapper

from .models import Campaign

logger = logging.getLogger(__name__)


class InMemoryCampaignStore:
    """Campaign store held in process memory

    Records are kept in their JSON encoding, so every ``get`` returns a fresh
    object and callers can never mutate stored state by accident.
    """

    def __init__(self):
        self._records: Dict[str, str] = {}

    async def initialize(self) -> None:
        logger.info("In-memory campaign store initialized")

    async def close(self) -> None:
        logger.info("In-memory campaign store closed")

    async def health_check(self) -> bool:
        return True

    async def get(self, key: str) -> Optional[Campaign]:
        raw = self._records.get(key)
        if raw is None:
            return None
        return Campaign.model_validate_json(raw)

    async def insert(self, key: str, value: Campaign) -> None:
        self._records[key] = value.model_dump_json()

    async def remove(self, key: str) -> Optional[Campaign]:
        raw = self._records.pop(key, None)
        if raw is None:
            return None
        return Campaign.model_validate_json(raw)

    def raw(self, key: str) -> Optional[str]:
        """Stored encoding for a key"""
        return self._records.get(key)

    def __len__(self) -> int:
        return len(self._records)


class PostgresCampaignStore:
    """Campaign store backed by PostgreSQL (Async)"""

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        db: Optional[PostgresClientWrapper] = None,
    ):
        config = config or InfraConfig.from_env()

        logger.info(f"Connecting to PostgreSQL at {config.postgres_host}:{config.postgres_port}")
        self.db = db or PostgresClientWrapper(
            service_name="crowdfund_service",
            config=config,
        )
        self.schema = config.postgres_schema

        # Table names
        self.campaigns_table = "campaigns"

    @property
    def table(self) -> str:
        return f"{self.schema}.{self.campaigns_table}"

    async def initialize(self) -> None:
        """Initialize database connection and schema"""
        await self.db.connect()
        await self.db.execute(f"CREATE SCHEMA IF NOT EXISTS {self.schema}")
        await self.db.execute(
            f'''
            CREATE TABLE IF NOT EXISTS {self.table} (
                campaign_id TEXT PRIMARY KEY,
                record JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            '''
        )
        logger.info("Campaign store initialized with PostgreSQL")

    async def close(self) -> None:
        """Close database connection"""
        await self.db.close()
        logger.info("Campaign store database connection closed")

    async def health_check(self) -> bool:
        """Check store health"""
        return await self.db.health_check()

    async def get(self, key: str) -> Optional[Campaign]:
        row = await self.db.query_row(
            f"SELECT record FROM {self.table} WHERE campaign_id = $1",
            [key],
        )
        if row is None:
            return None
        return self._record_to_campaign(row["record"])

    async def insert(self, key: str, value: Campaign) -> None:
        await self.db.execute(
            f'''
            INSERT INTO {self.table} (campaign_id, record, updated_at)
            VALUES ($1, $2::jsonb, NOW())
            ON CONFLICT (campaign_id) DO UPDATE SET
                record = EXCLUDED.record,
                updated_at = EXCLUDED.updated_at
            ''',
            [key, value.model_dump_json()],
        )

    async def remove(self, key: str) -> Optional[Campaign]:
        row = await self.db.query_row(
            f"DELETE FROM {self.table} WHERE campaign_id = $1 RETURNING record",
            [key],
        )
        if row is None:
            return None
        return self._record_to_campaign(row["record"])

    @staticmethod
    def _record_to_campaign(record) -> Campaign:
        """asyncpg returns jsonb as text unless a codec is registered"""
        if isinstance(record, (str, bytes)):
            return Campaign.model_validate_json(record)
        return Campaign.model_validate(record)


__all__ = [
    "InMemoryCampaignStore",
    "PostgresCampaignStore",
]
