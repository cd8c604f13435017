"""Output models for campaign analytics.

All rates are stored as fractions (0.27 = 27%). Conversion to percentages
happens only at the presentation boundary.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal


@dataclass(frozen=True)
class OpenStats:
    """Open counts for a single campaign."""

    total_opens: int = 0
    unique_opens: int = 0
    open_rate: float = 0.0


@dataclass(frozen=True)
class ClickStats:
    """Click counts for a single campaign."""

    total_clicks: int = 0
    unique_clicks: int = 0
    click_rate: float = 0.0


@dataclass(frozen=True)
class CampaignMetrics:
    """Canonical per-campaign report record.

    Every numeric field is present and non-negative.
    """

    id: str
    send_time: datetime  # UTC, timezone-aware
    title: str
    emails_sent: int = 0
    opens: OpenStats = OpenStats()
    clicks: ClickStats = ClickStats()
    unsubscribed: int = 0
    abuse_reports: int = 0
    forwards: int = 0


@dataclass(frozen=True)
class AggregateTotals:
    """Summed totals across a campaign set with volume-weighted rates."""

    total_sent: int
    total_opens: int
    total_unique_opens: int
    total_clicks: int
    total_unique_clicks: int
    total_unsubscribed: int
    total_abuse: int
    total_forwards: int
    avg_open_rate: float  # total_unique_opens / total_sent
    avg_click_rate: float  # total_unique_clicks / total_sent
    campaign_count: int


@dataclass(frozen=True)
class Benchmark:
    """Industry reference rates, in percentage units (27.0 = 27%)."""

    label: str
    open_rate: float
    click_rate: float


@dataclass(frozen=True)
class ComparisonResult:
    """Aggregate rate compared against one industry benchmark metric."""

    benchmark_label: str
    metric: Literal["open", "click"]
    your_rate: float  # fraction
    industry_rate: float  # percentage
    delta: float  # percentage points
    direction: Literal["above", "below"]


@dataclass(frozen=True)
class Highlights:
    """Best and worst campaign by open rate."""

    best: CampaignMetrics
    worst: CampaignMetrics


@dataclass(frozen=True)
class TrendPoint:
    """Aggregated stats for a single week or month."""

    period_start: date
    campaign_count: int
    emails_sent: int
    unique_opens: int
    unique_clicks: int
    unsubscribed: int
    open_rate: float
    click_rate: float
