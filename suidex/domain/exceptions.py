from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class DataSourceModeError(DomainError):
    """Requested aggregation mode is not registered."""


class PoolNormalizationError(DomainError):
    """Raw pool payload cannot be projected into a PoolRecord."""


class SnapshotFormatError(DomainError):
    """Snapshot artifact does not follow the pool data contract."""


class HistoryPeriodError(DomainError):
    """Requested history window is outside the supported range."""
