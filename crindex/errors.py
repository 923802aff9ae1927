"""Exception taxonomy for the C→R index core."""

from __future__ import annotations


class CrIndexError(Exception):
    """Base class for all crindex errors."""


class InvalidMetricIdError(CrIndexError, KeyError):
    """A metric id is not part of the catalog.

    Indicates a mismatch between the caller and the catalog, so it is
    surfaced rather than recovered.
    """

    def __init__(self, metric_id: str) -> None:
        super().__init__(metric_id)
        self.metric_id = metric_id

    def __str__(self) -> str:
        return f"Unknown metric id: {self.metric_id!r}"


class SnapshotDecodeError(CrIndexError, ValueError):
    """Transport payload is malformed or carries an unsupported version."""


class PersistenceUnavailableError(CrIndexError):
    """Local storage could not be read or written."""
