"""Transport encoding for share links: versioned JSON, UTF-8, base64.

Wire shape::

    {"v": 1,
     "items": [{"id": "autonomy", "value": 60}, ...],
     "weights": {"capacityWeight": 0.5, "adaptabilityWeight": 0.5},
     "context": {"teamName": "...", ...}}          # optional

``context`` (and ``weights``) are omitted when absent.
"""

from __future__ import annotations

import base64
import binascii
import json

import structlog
from pydantic import ValidationError

from crindex.errors import SnapshotDecodeError
from crindex.models.assessment import SNAPSHOT_VERSION, AssessmentSnapshot

logger = structlog.get_logger()


def encode_snapshot(snapshot: AssessmentSnapshot) -> str:
    """Encode *snapshot* as an opaque, URL-fragment-safe token.

    Deterministic: equal snapshots always produce the same token.
    """
    payload = snapshot.model_dump_json(by_alias=True, exclude_none=True)
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_snapshot_strict(token: str) -> AssessmentSnapshot:
    """Decode a token produced by ``encode_snapshot``.

    Raises SnapshotDecodeError describing the first problem found.
    """
    token = token.strip().removeprefix("#")
    if not token:
        raise SnapshotDecodeError("empty token")

    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SnapshotDecodeError(f"not base64: {exc}") from exc

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        # int() raises a plain ValueError past the integer digit limit.
        raise SnapshotDecodeError(f"not UTF-8 JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise SnapshotDecodeError(f"expected a JSON object, got {type(payload).__name__}")
    version = payload.get("v")
    if version is None:
        raise SnapshotDecodeError("missing version field 'v'")
    if type(version) is not int or version != SNAPSHOT_VERSION:
        raise SnapshotDecodeError(f"unsupported snapshot version: {version!r}")

    try:
        return AssessmentSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotDecodeError(
            f"schema mismatch: {exc.error_count()} error(s), first at "
            f"{'.'.join(str(p) for p in exc.errors()[0]['loc'])}"
        ) from exc


def decode_snapshot(token: str) -> AssessmentSnapshot | None:
    """Decode a token, returning None for anything malformed. Never raises."""
    try:
        return decode_snapshot_strict(token)
    except SnapshotDecodeError as exc:
        logger.debug("snapshot_decode_failed", reason=str(exc), token_length=len(token))
        return None


def build_share_link(base_url: str, snapshot: AssessmentSnapshot) -> str:
    """Append the encoded snapshot to *base_url* as a URL fragment."""
    base = base_url.split("#", 1)[0]
    return f"{base}#{encode_snapshot(snapshot)}"


def extract_fragment(link: str) -> str | None:
    """Return the share token carried by *link*.

    A bare token (no ``#``) is returned as-is; an empty fragment means
    there is nothing to import.
    """
    link = link.strip()
    if "#" in link:
        link = link.split("#", 1)[1]
    return link or None
