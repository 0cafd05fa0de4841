from __future__ import annotations

import logging

from suidex.application.dto.export_snapshot import ExportSnapshotInput, ExportSnapshotOutput
from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.application.ports.snapshot_writer_port import SnapshotWriterPort
from suidex.application.use_cases.fetch_pool_data import MODE_SNAPSHOT, FetchPoolDataUseCase
from suidex.domain.exceptions import DataSourceModeError


logger = logging.getLogger(__name__)


class ExportSnapshotUseCase:
    def __init__(self, *, fetch_pool_data: FetchPoolDataUseCase, writer: SnapshotWriterPort):
        self._fetch_pool_data = fetch_pool_data
        self._writer = writer

    async def execute(self, command: ExportSnapshotInput) -> ExportSnapshotOutput:
        mode = self._fetch_pool_data.resolve_mode(command.mode)
        if mode == MODE_SNAPSHOT:
            raise DataSourceModeError("Snapshot export needs a live data source mode.")

        result = await self._fetch_pool_data.execute(
            FetchPoolDataInput(force_refresh=True, mode=mode)
        )
        location = self._writer.write(result)
        logger.info(
            "export_snapshot: written location=%s mode=%s pools=%s",
            location,
            result.mode,
            result.summary.total_pools,
        )
        return ExportSnapshotOutput(
            location=location,
            mode=result.mode,
            total_pools=result.summary.total_pools,
            fetch_status=dict(result.fetch_status),
        )
