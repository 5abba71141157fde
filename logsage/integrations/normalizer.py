"""
Coerce raw backend documents into canonical LogEntry records.

Defaulting is the same for every backend; only the list of backend-specific
timestamp fields differs. A document that still cannot be coerced is dropped,
never raised: a bad hit lowers the result count and nothing else.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from logsage.models.schemas import LogEntry
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

MESSAGE_FIELDS = ("message", "log", "msg")
DEFAULT_LEVEL = "INFO"
# Coerced into LogEntry attributes; the raw values never survive as extras.
CANONICAL_FIELDS = frozenset(LogEntry.model_fields)


class _Uncoercible(Exception):
    pass


def _get_field(source: dict, *keys: str):
    """Check multiple field names, supporting dot-notation for nested dicts."""
    for key in keys:
        val: Any = source
        for part in key.split("."):
            if isinstance(val, dict):
                val = val.get(part)
            else:
                val = None
                break
        if val is not None:
            return val
    return None


def _coerce_timestamp(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise _Uncoercible("timestamp missing")
    if isinstance(value, str):
        if not value.strip():
            raise _Uncoercible("empty timestamp")
        return value
    if isinstance(value, (int, float)):
        # Epoch microseconds / milliseconds / seconds
        try:
            if value > 1e15:
                return datetime.fromtimestamp(value / 1_000_000, tz=timezone.utc).isoformat()
            if value > 1e12:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
            return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
        except (ValueError, OverflowError, OSError) as e:
            raise _Uncoercible(f"bad epoch timestamp {value!r}") from e
    raise _Uncoercible(f"timestamp of type {type(value).__name__}")


def _coerce_text(value: Any, name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    raise _Uncoercible(f"{name} of type {type(value).__name__}")


def _coerce_optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _extract_service(source: dict) -> Optional[str]:
    # Bare "service" can be a string or an ECS object
    raw = source.get("service")
    if isinstance(raw, dict):
        return _coerce_optional_text(raw.get("name"))
    return _coerce_optional_text(raw)


def normalize_document(raw: Any, timestamp_fields: Iterable[str] = ()) -> Optional[LogEntry]:
    """Map one raw document to a LogEntry, or None when it cannot be coerced."""
    if not isinstance(raw, dict):
        return None
    source = dict(raw)

    if source.get("timestamp") is None:
        for alias in timestamp_fields:
            if source.get(alias) is not None:
                source["timestamp"] = source[alias]
                break

    try:
        timestamp = _coerce_timestamp(source.get("timestamp"))
        level = _coerce_text(source["level"], "level") if source.get("level") is not None else DEFAULT_LEVEL
        message_value = _get_field(source, *MESSAGE_FIELDS)
        message = _coerce_text(message_value, "message") if message_value is not None else ""
    except _Uncoercible:
        return None

    service = _extract_service(source)
    trace_id = _coerce_optional_text(_get_field(source, "trace_id", "trace.id"))

    extras = {str(k): v for k, v in source.items() if k not in CANONICAL_FIELDS}
    return LogEntry.model_validate({
        **extras,
        "timestamp": timestamp,
        "level": level,
        "message": message,
        "service": service,
        "trace_id": trace_id,
    })


def normalize_documents(raws: Iterable[Any], timestamp_fields: Iterable[str] = (), source: str = "") -> list[LogEntry]:
    """Normalize every document, silently dropping the uncoercible ones."""
    timestamp_fields = tuple(timestamp_fields)
    entries: list[LogEntry] = []
    dropped = 0
    for raw in raws:
        entry = normalize_document(raw, timestamp_fields)
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)
    if dropped:
        logger.debug("Dropped uncoercible documents", extra={
            "source": source,
            "action": "normalize",
            "extra": {"dropped": dropped, "kept": len(entries)},
        })
    return entries
