"""Interval gate deciding whether a scope is due for re-aggregation."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from healthscope.errors import TimestampParseFailure
from healthscope.models import ScopeStatus

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_rfc3339(moment: datetime) -> str:
    """Render a moment as an RFC3339 UTC timestamp."""
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Accepts ``Z`` or a numeric offset and fractional seconds of any
    precision (truncated to microseconds). A timestamp without an offset
    is rejected.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise TimestampParseFailure(f"Invalid RFC3339 timestamp: {value!r}") from exc

    if parsed.tzinfo is None:
        raise TimestampParseFailure(f"RFC3339 timestamp has no offset: {value!r}")
    return parsed


def due_for_aggregation(
    status: Optional[ScopeStatus],
    interval_seconds: int,
    now: Optional[datetime] = None,
) -> bool:
    """Return True when the scope has never been aggregated or its interval has elapsed."""
    if interval_seconds <= 0:
        return True
    if status is None or status.last_aggregate_timestamp is None:
        return True

    try:
        last = parse_rfc3339(status.last_aggregate_timestamp)
    except TimestampParseFailure as exc:
        logger.error("parse last aggregate time failed: %s", exc)
        return True

    current = now if now is not None else utcnow()
    elapsed = int((current - last).total_seconds())
    return elapsed >= interval_seconds
