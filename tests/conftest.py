"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from crindex.config import Settings
from crindex.db import StateDatabase
from crindex.models.catalog import DEFAULT_CATALOG
from crindex.store import AssessmentStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        share_base_url="https://example.test/cer/",
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def db(tmp_path: Path) -> Iterator[StateDatabase]:
    db = StateDatabase(tmp_path / "test.db")
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def store(db: StateDatabase) -> AssessmentStore:
    store = AssessmentStore(DEFAULT_CATALOG, storage=db)
    store.initialize()
    return store
