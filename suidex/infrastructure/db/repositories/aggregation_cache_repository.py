from __future__ import annotations

import json
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from suidex.application.ports.aggregation_cache_port import AggregationCachePort
from suidex.domain.entities.cache import CacheEntry
from suidex.domain.exceptions import SnapshotFormatError
from suidex.infrastructure.db.mappers.aggregation_result_mapper import (
    map_payload_to_result,
    map_result_to_payload,
)


logger = logging.getLogger(__name__)


class SqlAggregationCacheRepository(AggregationCachePort):
    """Aggregation cache persisted in ``pool_data_cache``, one row per mode.

    A row that cannot be decoded is reported as a miss so the next pass
    refetches and overwrites it.
    """

    def __init__(self, engine):
        self._engine = engine

    def ensure_schema(self) -> None:
        sql = """
            CREATE TABLE IF NOT EXISTS pool_data_cache (
                cache_key VARCHAR(64) PRIMARY KEY,
                payload TEXT NOT NULL,
                stored_at DOUBLE PRECISION NOT NULL
            )
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql))

    def get(self, key: str) -> CacheEntry | None:
        sql = """
            SELECT payload, stored_at
            FROM pool_data_cache
            WHERE cache_key = :cache_key
        """
        try:
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"cache_key": key}).mappings().first()
        except SQLAlchemyError as exc:
            logger.warning("aggregation_cache_repository: read_failed key=%s error=%s", key, exc)
            return None
        if row is None:
            return None

        try:
            result = map_payload_to_result(json.loads(row["payload"]))
            timestamp = float(row["stored_at"])
        except (ValueError, TypeError, SnapshotFormatError) as exc:
            logger.warning("aggregation_cache_repository: corrupt_row key=%s error=%s", key, exc)
            return None
        return CacheEntry(data=result, timestamp=timestamp)

    def set(self, key: str, entry: CacheEntry) -> None:
        sql = """
            INSERT INTO pool_data_cache (cache_key, payload, stored_at)
            VALUES (:cache_key, :payload, :stored_at)
            ON CONFLICT (cache_key) DO UPDATE
            SET payload = excluded.payload,
                stored_at = excluded.stored_at
        """
        params = {
            "cache_key": key,
            "payload": json.dumps(map_result_to_payload(entry.data)),
            "stored_at": entry.timestamp,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(text(sql), params)
        except SQLAlchemyError as exc:
            logger.warning("aggregation_cache_repository: write_failed key=%s error=%s", key, exc)

    def invalidate(self, key: str) -> None:
        sql = "DELETE FROM pool_data_cache WHERE cache_key = :cache_key"
        try:
            with self._engine.begin() as conn:
                conn.execute(text(sql), {"cache_key": key})
        except SQLAlchemyError as exc:
            logger.warning("aggregation_cache_repository: invalidate_failed key=%s error=%s", key, exc)
