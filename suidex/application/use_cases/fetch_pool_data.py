from __future__ import annotations

from collections.abc import Mapping
import logging

from suidex.application.dto.fetch_pool_data import DataSourceInfoOutput, FetchPoolDataInput
from suidex.application.ports.pool_data_source_port import PoolDataSourcePort
from suidex.domain.entities.pool import AggregationResult
from suidex.domain.exceptions import DataSourceModeError


logger = logging.getLogger(__name__)

MODE_DEFILLAMA = "defillama"
MODE_GRAPHQL = "graphql"
MODE_SDK = "sdk"
MODE_SNAPSHOT = "snapshot"
DATA_SOURCE_MODES = (MODE_DEFILLAMA, MODE_GRAPHQL, MODE_SDK, MODE_SNAPSHOT)
DEFAULT_MODE = MODE_DEFILLAMA


def normalize_mode(value: str | None) -> str | None:
    if value is None:
        return None
    candidate = value.strip().lower()
    return candidate if candidate in DATA_SOURCE_MODES else None


class FetchPoolDataUseCase:
    def __init__(
        self,
        *,
        sources: Mapping[str, PoolDataSourcePort],
        configured_mode: str | None = None,
    ):
        unknown = set(sources) - set(DATA_SOURCE_MODES)
        if unknown:
            raise DataSourceModeError(f"Unsupported data source modes: {sorted(unknown)}.")
        if DEFAULT_MODE not in sources:
            raise DataSourceModeError(f"The {DEFAULT_MODE} data source must be registered.")
        self._sources = dict(sources)

        mode = normalize_mode(configured_mode)
        if mode is None or mode not in self._sources:
            if configured_mode:
                logger.warning(
                    "fetch_pool_data: invalid_configured_mode value=%s fallback=%s",
                    configured_mode,
                    DEFAULT_MODE,
                )
            mode = DEFAULT_MODE
        self._configured_mode = mode

    @property
    def current_mode(self) -> str:
        return self._configured_mode

    @property
    def available_modes(self) -> list[str]:
        return [mode for mode in DATA_SOURCE_MODES if mode in self._sources]

    def describe(self) -> DataSourceInfoOutput:
        return DataSourceInfoOutput(
            current_mode=self.current_mode,
            available_modes=self.available_modes,
        )

    def resolve_mode(self, override: str | None) -> str:
        mode = normalize_mode(override)
        if mode is not None and mode in self._sources:
            return mode
        if override:
            logger.info(
                "fetch_pool_data: ignored_mode_override value=%s using=%s",
                override,
                self._configured_mode,
            )
        return self._configured_mode

    async def execute(self, command: FetchPoolDataInput | None = None) -> AggregationResult:
        command = command or FetchPoolDataInput()
        mode = self.resolve_mode(command.mode)
        result = await self._sources[mode].execute(command)
        return result.with_mode(mode)

    def clear_cache(self, mode: str | None = None) -> None:
        if mode is None:
            for source in self._sources.values():
                source.clear_cache()
            return
        resolved = normalize_mode(mode)
        if resolved is None or resolved not in self._sources:
            raise DataSourceModeError(f"Unknown data source mode: {mode}.")
        self._sources[resolved].clear_cache()
