"""Database and aggregation configuration."""

import logging
from typing import Any, Dict, Optional

from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pgcache_geohash.base_settings import ApiBaseSettings

logger = logging.getLogger(__name__)

DEFAULT_GEOHASH_PRECISION = 8
DEFAULT_SRID = 4326


class PgCacheSettings(BaseSettings, ApiBaseSettings):
    """
    Settings for the PostGIS feature cache.

    Connection values follow the libpq environment variables (PGHOST, PGPORT,
    PGDATABASE, PGUSER, PGPASSWORD). Set PG_USE_SSL to require TLS and
    GEOHASH_CLAMP_TO_FLOOR to return precision 1 buckets instead of raising when
    no precision satisfies a limit.
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    pghost: str = "localhost"
    pgport: int = 5432
    pgdatabase: str = "postgres"
    pguser: Optional[str] = None
    pgpassword: Optional[str] = None
    pg_timeout: Optional[int] = None
    pg_pool_min_size: int = 1
    pg_pool_max_size: int = 4
    pg_use_ssl: bool = False

    geohash_default_precision: int = DEFAULT_GEOHASH_PRECISION
    geohash_srid: int = DEFAULT_SRID
    clamp_to_floor: bool = Field(default=False, alias="GEOHASH_CLAMP_TO_FLOOR")

    @property
    def conninfo(self) -> str:
        """Build a libpq connection string from the settings."""
        params: Dict[str, Any] = {
            "host": self.pghost,
            "port": self.pgport,
            "dbname": self.pgdatabase,
            "user": self.pguser,
            "password": self.pgpassword,
            "connect_timeout": self.pg_timeout,
        }
        if self.pg_use_ssl:
            params["sslmode"] = "require"
        return make_conninfo(**{k: v for k, v in params.items() if v is not None})

    @property
    def create_client(self):
        """Create an unopened async psycopg connection pool."""
        logger.info(
            f"Creating connection pool for {self.pghost}:{self.pgport}/{self.pgdatabase}"
        )
        return AsyncConnectionPool(
            self.conninfo,
            min_size=self.pg_pool_min_size,
            max_size=self.pg_pool_max_size,
            kwargs={"row_factory": dict_row},
            open=False,
        )
