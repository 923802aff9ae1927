"""Port interfaces (Protocols) for the storage collaborator."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StoragePort(Protocol):
    """Keyed JSON blob storage used to persist the assessment between sessions.

    ``load`` may raise PersistenceUnavailableError; ``save`` must not raise
    and reports failure through its return value.
    """

    def load(self, key: str) -> str | None: ...
    def save(self, key: str, data_json: str) -> bool: ...
