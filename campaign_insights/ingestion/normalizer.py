"""Normalize raw Mailchimp report records into CampaignMetrics.

Handles two upstream shapes:
- `/reports` records: `subject_line`, `campaign_title` at the top level
- campaign records: `settings.subject_line`, `settings.title`

Every lookup defaults instead of raising, so any dict (or non-dict) yields a
complete record.
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..analytics.models import CampaignMetrics, ClickStats, OpenStats
from ..models.scope import as_utc

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _mapping(value: Any) -> Mapping[str, Any]:
    """Return value if it is a mapping, else an empty one."""
    return value if isinstance(value, Mapping) else {}


def _number(value: Any) -> float:
    """Coerce to a finite, non-negative float; anything else becomes 0.0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _count(value: Any) -> int:
    return int(_number(value))


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _send_time(value: Any, campaign_id: str) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    text = _text(value)
    if text is not None:
        try:
            # fromisoformat on older interpreters rejects the trailing Z
            return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            pass
    logger.warning("Campaign %s has no usable send_time (%r)", campaign_id, value)
    return EPOCH


def _title(raw: Mapping[str, Any]) -> str:
    settings = _mapping(raw.get("settings"))
    candidates = (
        raw.get("subject_line"),
        settings.get("subject_line"),
        raw.get("campaign_title"),
        raw.get("title"),
        settings.get("title"),
    )
    for candidate in candidates:
        text = _text(candidate)
        if text:
            return text
    return UNTITLED


def _forwards(value: Any) -> int:
    if isinstance(value, Mapping):
        return _count(value.get("forwards_count"))
    return _count(value)


def normalize(raw: Any) -> CampaignMetrics:
    """Map one raw report record to the canonical shape.

    Args:
        raw: Record as returned upstream; field presence is not guaranteed

    Returns:
        CampaignMetrics with every numeric field present and non-negative
    """
    raw = _mapping(raw)
    campaign_id = _text(raw.get("id")) or ""
    opens = _mapping(raw.get("opens"))
    clicks = _mapping(raw.get("clicks"))

    return CampaignMetrics(
        id=campaign_id,
        send_time=_send_time(raw.get("send_time"), campaign_id),
        title=_title(raw),
        emails_sent=_count(raw.get("emails_sent")),
        opens=OpenStats(
            total_opens=_count(opens.get("opens_total")),
            unique_opens=_count(opens.get("unique_opens")),
            open_rate=_number(opens.get("open_rate")),
        ),
        clicks=ClickStats(
            total_clicks=_count(clicks.get("clicks_total")),
            unique_clicks=_count(clicks.get("unique_clicks")),
            click_rate=_number(clicks.get("click_rate")),
        ),
        unsubscribed=_count(raw.get("unsubscribed")),
        abuse_reports=_count(raw.get("abuse_reports")),
        forwards=_forwards(raw.get("forwards")),
    )


def normalize_all(raws: list[Any]) -> list[CampaignMetrics]:
    """Normalize a batch of raw records, preserving order."""
    return [normalize(raw) for raw in raws]
