"""Canonical assessment state: initialization, merge-on-load, edits and persistence.

The store owns one assessment (metric values, weights, context) scored
against an injected, read-only catalog. It resolves its initial state once
per session from, in order of precedence:

1. the persisted parts in storage (each of items / weights / context
   independently, when present and parseable)
2. an imported share token or link
3. catalog defaults

Whatever the source, the merged state always holds exactly one value per
catalog metric, in catalog order. Every mutation is applied first and then
handed to storage; storage reports its own write failures.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from crindex.codec import build_share_link, decode_snapshot, encode_snapshot, extract_fragment
from crindex.engine import chart_series, score_assessment
from crindex.errors import PersistenceUnavailableError
from crindex.models.assessment import (
    AssessmentContext,
    AssessmentSnapshot,
    MetricValue,
    SnapshotItem,
    WeightPair,
)
from crindex.models.catalog import DEFAULT_CATALOG, Catalog, MetricGroup

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from crindex.models.scoring import AssessmentScores, ChartSeries
    from crindex.protocols import StoragePort

logger = structlog.get_logger()

T = TypeVar("T")

ITEMS_KEY = "cer_items"
WEIGHTS_KEY = "cer_weights"
CONTEXT_KEY = "cer_context"

_ITEMS_ADAPTER: TypeAdapter[list[SnapshotItem]] = TypeAdapter(list[SnapshotItem])


class StateSource(StrEnum):
    """Where an initialized part of the state came from."""

    PERSISTED = "persisted"
    IMPORTED = "imported"
    DEFAULT = "default"


def default_values(catalog: Catalog) -> list[MetricValue]:
    return [MetricValue(definition=d, value=d.default) for d in catalog]


def merge_values(catalog: Catalog, values_by_id: Mapping[str, int]) -> list[MetricValue]:
    """Overlay *values_by_id* on the catalog defaults.

    Known ids are adopted (clamped), missing ids keep their default and
    unknown ids are dropped.
    """
    unknown = [metric_id for metric_id in values_by_id if metric_id not in catalog]
    if unknown:
        logger.debug("merge_dropped_unknown_ids", ids=unknown)
    merged: list[MetricValue] = []
    for d in catalog:
        if d.id in values_by_id:
            merged.append(MetricValue.clamped(d, values_by_id[d.id]))
        else:
            merged.append(MetricValue(definition=d, value=d.default))
    return merged


def merge_snapshot(catalog: Catalog, snapshot: AssessmentSnapshot) -> list[MetricValue]:
    """Full catalog coverage from a possibly partial snapshot."""
    return merge_values(catalog, snapshot.values_by_id())


class AssessmentStore:
    """Owns the current assessment for a single session.

    Usage::

        store = AssessmentStore(storage=StateDatabase(path))
        store.initialize(imported=link_from_url)
        store.set_metric_value("autonomy", 72)
        store.scores().composite
    """

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        storage: StoragePort | None = None,
    ) -> None:
        self.catalog = catalog
        self._storage = storage
        self._values: list[MetricValue] = default_values(catalog)
        self._weights = WeightPair()
        self._context = AssessmentContext()
        self._initialized = False
        self.sources: dict[str, StateSource] = {}

    # --- Lifecycle ---

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, imported: str | None = None) -> None:
        """Resolve the starting state. Runs once; later calls are no-ops.

        *imported* may be a bare share token or a full share link.
        Unreadable storage and undecodable imports fall through to the
        next source instead of raising.
        """
        if self._initialized:
            return

        snapshot = self._decode_import(imported)

        items = self._load_persisted(ITEMS_KEY, _ITEMS_ADAPTER.validate_json)
        if items is not None:
            self._values = merge_values(self.catalog, {i.id: i.value for i in items})
            self.sources["items"] = StateSource.PERSISTED
        elif snapshot is not None:
            self._values = merge_snapshot(self.catalog, snapshot)
            self.sources["items"] = StateSource.IMPORTED
        else:
            self._values = default_values(self.catalog)
            self.sources["items"] = StateSource.DEFAULT

        weights = self._load_persisted(WEIGHTS_KEY, WeightPair.model_validate_json)
        if weights is not None:
            self._weights = weights
            self.sources["weights"] = StateSource.PERSISTED
        elif snapshot is not None and snapshot.weights is not None:
            self._weights = snapshot.weights
            self.sources["weights"] = StateSource.IMPORTED
        else:
            self._weights = WeightPair()
            self.sources["weights"] = StateSource.DEFAULT

        context = self._load_persisted(CONTEXT_KEY, AssessmentContext.model_validate_json)
        if context is not None:
            self._context = context
            self.sources["context"] = StateSource.PERSISTED
        elif snapshot is not None and snapshot.context is not None:
            self._context = snapshot.context
            self.sources["context"] = StateSource.IMPORTED
        else:
            self._context = AssessmentContext()
            self.sources["context"] = StateSource.DEFAULT

        self._initialized = True
        logger.info("assessment_initialized", **{k: v.value for k, v in self.sources.items()})
        self._persist()

    def _decode_import(self, imported: str | None) -> AssessmentSnapshot | None:
        if not imported:
            return None
        token = extract_fragment(imported)
        if token is None:
            return None
        snapshot = decode_snapshot(token)
        if snapshot is None:
            logger.warning("import_ignored", reason="undecodable share token")
        return snapshot

    def _load_persisted(self, key: str, parse: Callable[[str], T]) -> T | None:
        """Load and parse one stored part, or None if missing/unreadable/invalid."""
        if self._storage is None:
            return None
        try:
            data_json = self._storage.load(key)
        except PersistenceUnavailableError as exc:
            logger.warning("persisted_state_unavailable", key=key, error=str(exc))
            return None
        if data_json is None:
            return None
        try:
            return parse(data_json)
        except ValidationError as exc:
            logger.debug("persisted_state_invalid", key=key, errors=exc.error_count())
            return None

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("AssessmentStore.initialize() must be called first")

    # --- Reads ---

    @property
    def values(self) -> tuple[MetricValue, ...]:
        self._require_initialized()
        return tuple(self._values)

    @property
    def weights(self) -> WeightPair:
        self._require_initialized()
        return self._weights

    @property
    def context(self) -> AssessmentContext:
        self._require_initialized()
        return self._context

    def value_of(self, metric_id: str) -> int:
        self._require_initialized()
        self.catalog.require(metric_id)
        return next(v.value for v in self._values if v.id == metric_id)

    def scores(self) -> AssessmentScores:
        self._require_initialized()
        return score_assessment(self._values, self._weights)

    def chart(self) -> ChartSeries:
        return chart_series(self.values, self.scores())

    def snapshot(self) -> AssessmentSnapshot:
        """Current state as a snapshot; context is omitted while empty."""
        self._require_initialized()
        return AssessmentSnapshot(
            items=[SnapshotItem(id=v.id, value=v.value) for v in self._values],
            weights=self._weights,
            context=None if self._context.is_empty else self._context,
        )

    def share_token(self) -> str:
        return encode_snapshot(self.snapshot())

    def share_link(self, base_url: str) -> str:
        return build_share_link(base_url, self.snapshot())

    # --- Mutations ---

    def set_metric_value(self, metric_id: str, value: int) -> MetricValue:
        """Set one metric, clamped to 0-100. Raises InvalidMetricIdError."""
        self._require_initialized()
        definition = self.catalog.require(metric_id)
        updated = MetricValue.clamped(definition, value)
        index = next(i for i, v in enumerate(self._values) if v.id == metric_id)
        self._values[index] = updated
        logger.debug("metric_value_set", metric_id=metric_id, value=updated.value)
        self._persist_items()
        return updated

    def set_weight(self, which: MetricGroup | str, value: float) -> WeightPair:
        """Replace one group weight as entered; scoring clamps it later."""
        self._require_initialized()
        self._weights = self._weights.with_group(MetricGroup(which), value)
        logger.debug("weight_set", group=str(which), value=value)
        self._persist_weights()
        return self._weights

    def update_context(self, **fields: str) -> AssessmentContext:
        """Replace the named context fields, keeping the rest."""
        self._require_initialized()
        unknown = set(fields) - set(AssessmentContext.model_fields)
        if unknown:
            raise TypeError(f"Unknown context field(s): {', '.join(sorted(unknown))}")
        self._context = AssessmentContext.model_validate({**self._context.model_dump(), **fields})
        self._persist_context()
        return self._context

    def apply_snapshot(self, snapshot: AssessmentSnapshot) -> None:
        """Adopt an explicitly imported snapshot, replacing the current state."""
        self._require_initialized()
        self._values = merge_snapshot(self.catalog, snapshot)
        self._weights = snapshot.weights or WeightPair()
        self._context = snapshot.context or AssessmentContext()
        logger.info("snapshot_applied", items=len(snapshot.items))
        self._persist()

    def reset(self) -> None:
        """Restore catalog defaults, 0.5/0.5 weights and an empty context."""
        self._require_initialized()
        self._values = default_values(self.catalog)
        self._weights = WeightPair()
        self._context = AssessmentContext()
        logger.info("assessment_reset")
        self._persist()

    # --- Persistence ---

    def _persist(self) -> None:
        self._persist_items()
        self._persist_weights()
        self._persist_context()

    def _persist_items(self) -> None:
        if self._storage is None:
            return
        items = [SnapshotItem(id=v.id, value=v.value) for v in self._values]
        self._storage.save(ITEMS_KEY, _ITEMS_ADAPTER.dump_json(items).decode("utf-8"))

    def _persist_weights(self) -> None:
        if self._storage is not None:
            self._storage.save(WEIGHTS_KEY, self._weights.model_dump_json(by_alias=True))

    def _persist_context(self) -> None:
        if self._storage is not None:
            self._storage.save(CONTEXT_KEY, self._context.model_dump_json(by_alias=True))
