from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import tempfile
import time
from typing import Callable

from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.domain.entities.pool import FETCH_SUCCESS, AggregationResult
from suidex.domain.exceptions import SnapshotFormatError
from suidex.domain.services.pool_stats import compute_dex_stats, compute_summary
from suidex.infrastructure.db.mappers.aggregation_result_mapper import (
    map_payload_to_pools,
    map_result_to_payload,
    parse_timestamp,
)


logger = logging.getLogger(__name__)

SNAPSHOT_MODE = "snapshot"


def _empty_result() -> AggregationResult:
    return AggregationResult(
        pools=[],
        dex_stats={},
        summary=compute_summary([]),
        last_updated=datetime.fromtimestamp(0, tz=timezone.utc),
        mode=SNAPSHOT_MODE,
        fetch_status={},
    )


class JsonSnapshotPoolDataSource:
    """Serves a previously exported aggregation artifact from disk.

    Stats are recomputed from the pool list so a hand-edited artifact cannot
    disagree with its own pools.
    """

    def __init__(self, path: str | Path, *, clock: Callable[[], float] = time.time):
        self._path = Path(path)
        self._clock = clock

    async def execute(self, command: FetchPoolDataInput | None = None) -> AggregationResult:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            pools = map_payload_to_pools(payload)
        except FileNotFoundError:
            logger.warning("json_snapshot: missing path=%s", self._path)
            return _empty_result()
        except (OSError, ValueError, AttributeError, SnapshotFormatError) as exc:
            logger.warning("json_snapshot: unreadable path=%s error=%s", self._path, exc)
            return _empty_result()

        try:
            last_updated = parse_timestamp(payload.get("lastUpdated"))
        except SnapshotFormatError as exc:
            logger.warning("json_snapshot: missing_last_updated path=%s error=%s", self._path, exc)
            last_updated = datetime.fromtimestamp(self._clock(), tz=timezone.utc)

        dex_stats = compute_dex_stats(pools)
        return AggregationResult(
            pools=pools,
            dex_stats=dex_stats,
            summary=compute_summary(pools),
            last_updated=last_updated,
            mode=SNAPSHOT_MODE,
            fetch_status={dex: FETCH_SUCCESS for dex in dex_stats},
        )

    def clear_cache(self) -> None:
        return None


class JsonSnapshotWriter:
    def __init__(self, path: str | Path):
        self._path = Path(path)

    def write(self, result: AggregationResult) -> str:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        body = json.dumps(map_result_to_payload(result), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return str(self._path)
