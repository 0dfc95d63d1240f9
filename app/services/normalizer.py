"""Pull canonical values out of provider responses of unknown shape.

Every lookup goes through ``extract_field``: an ordered list of key paths is
walked against the body and the first path that resolves to a usable scalar
wins. Nothing here raises on odd input; a missing or mismatched shape simply
yields ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

KeyPath = Tuple[str, ...]


class FieldKind(str, Enum):
    IMMEDIATE_URL = "immediate_url"
    JOB_ID = "job_id"
    STATUS = "status"
    TERMINAL_URL = "terminal_url"
    ERROR_DETAIL = "error_detail"
    FAILURE_DETAIL = "failure_detail"


class StatusClass(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    UNKNOWN = "unknown"


FIELD_ALIASES: dict[FieldKind, tuple[KeyPath, ...]] = {
    FieldKind.IMMEDIATE_URL: (
        ("video_url",),
        ("data", "video_url"),
        ("url",),
        ("data", "url"),
    ),
    FieldKind.JOB_ID: (
        ("video_id",),
        ("id",),
        ("data", "video_id"),
        ("data", "id"),
        ("job_id",),
        ("data", "job_id"),
        ("task_id",),
        ("data", "task_id"),
    ),
    FieldKind.STATUS: (
        ("status",),
        ("data", "status"),
        ("state",),
        ("data", "state"),
    ),
    FieldKind.TERMINAL_URL: (
        ("asset_url",),
        ("data", "asset_url"),
        ("result_url",),
        ("data", "result_url"),
        ("video_url_caption",),
        ("data", "video_url_caption"),
    ),
    FieldKind.ERROR_DETAIL: (
        ("error", "message"),
        ("data", "error", "message"),
        ("error", "detail"),
        ("data", "error", "detail"),
        ("error",),
        ("data", "error"),
        ("message",),
        ("detail",),
        ("data", "message"),
    ),
    # Job failure reasons only; envelope "message" fields often just say "Success".
    FieldKind.FAILURE_DETAIL: (
        ("error", "message"),
        ("data", "error", "message"),
        ("error", "detail"),
        ("data", "error", "detail"),
        ("error",),
        ("data", "error"),
        ("failure_reason",),
        ("data", "failure_reason"),
    ),
}

# Only identifiers may arrive as numbers.
NUMERIC_KINDS = frozenset({FieldKind.JOB_ID})

SUCCESS_STATUSES = frozenset({"completed", "succeeded", "success", "done", "ready"})
FAILURE_STATUSES = frozenset({"failed", "failure", "error", "errored", "cancelled", "canceled", "rejected"})


def _resolve(body: Any, path: KeyPath) -> Any:
    node = body
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def extract_field(body: Any, aliases: Sequence[KeyPath], allow_numbers: bool = False) -> Optional[str]:
    for path in aliases:
        value = _resolve(body, path)
        # bool is an int subclass and never a meaningful id or url
        if isinstance(value, bool):
            continue
        if isinstance(value, str) and value.strip():
            return value.strip()
        if allow_numbers and isinstance(value, int):
            return str(value)
    return None


def extract(body: Any, kind: FieldKind) -> Optional[str]:
    return extract_field(body, FIELD_ALIASES[kind], allow_numbers=kind in NUMERIC_KINDS)


def classify_status(value: Optional[str]) -> StatusClass:
    if not isinstance(value, str) or not value.strip():
        return StatusClass.UNKNOWN
    normalized = value.strip().lower()
    if normalized in SUCCESS_STATUSES:
        return StatusClass.SUCCESS
    if normalized in FAILURE_STATUSES:
        return StatusClass.FAILURE
    return StatusClass.PENDING


def extract_error_detail(body: Any, fallback_text: str = "", limit: int = 500) -> str:
    detail = extract(body, FieldKind.ERROR_DETAIL)
    if detail:
        return detail
    text = (fallback_text or "").strip()
    if not text and body is not None and not isinstance(body, Mapping):
        text = str(body)
    return text[:limit] if text else "no detail provided"
