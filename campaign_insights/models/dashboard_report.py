"""DashboardReport - consolidated output handed to the presentation layer."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..analytics.benchmarks import to_points
from ..analytics.highlights import open_rate
from ..analytics.models import (
    AggregateTotals,
    CampaignMetrics,
    ComparisonResult,
    Highlights,
    TrendPoint,
)
from .scope import DateRange, Scope


def _pct(fraction: float, decimals: int = 2) -> float:
    return round(to_points(fraction), decimals)


def _campaign_dict(c: CampaignMetrics) -> dict[str, Any]:
    return {
        "id": c.id,
        "title": c.title,
        "send_time": c.send_time.isoformat(),
        "emails_sent": c.emails_sent,
        "unique_opens": c.opens.unique_opens,
        "open_rate_pct": _pct(open_rate(c)),
        "unique_clicks": c.clicks.unique_clicks,
        "click_rate_pct": _pct(c.clicks.click_rate),
        "unsubscribed": c.unsubscribed,
    }


@dataclass(frozen=True)
class DashboardReport:
    """Everything computed for one scope and window.

    Rates are fractions here; `to_dict` converts them to percentages.
    """

    generated_at: datetime
    scope: Scope
    date_range: DateRange
    campaigns: tuple[CampaignMetrics, ...]
    totals: AggregateTotals
    comparisons: tuple[ComparisonResult, ...]
    highlights: Highlights | None
    trends: tuple[TrendPoint, ...]
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict in presentation units."""
        t = self.totals
        return {
            "meta": {
                "generated_at": self.generated_at.isoformat(),
                "account": self.scope.account_key,
                "list_id": self.scope.list_id,
                "date_range": {
                    "start": self.date_range.start.isoformat(),
                    "end": self.date_range.end.isoformat(),
                },
                "from_cache": self.from_cache,
            },
            "totals": {
                "campaign_count": t.campaign_count,
                "total_sent": t.total_sent,
                "total_opens": t.total_opens,
                "total_unique_opens": t.total_unique_opens,
                "total_clicks": t.total_clicks,
                "total_unique_clicks": t.total_unique_clicks,
                "total_unsubscribed": t.total_unsubscribed,
                "total_abuse": t.total_abuse,
                "total_forwards": t.total_forwards,
                "avg_open_rate_pct": _pct(t.avg_open_rate),
                "avg_click_rate_pct": _pct(t.avg_click_rate),
            },
            "benchmarks": [
                {
                    "label": r.benchmark_label,
                    "metric": r.metric,
                    "your_rate_pct": _pct(r.your_rate),
                    "industry_rate_pct": r.industry_rate,
                    "delta_points": round(r.delta, 2),
                    "direction": r.direction,
                }
                for r in self.comparisons
            ],
            "highlights": (
                {
                    "best": _campaign_dict(self.highlights.best),
                    "worst": _campaign_dict(self.highlights.worst),
                }
                if self.highlights
                else None
            ),
            "trends": [
                {
                    "period_start": p.period_start.isoformat(),
                    "campaign_count": p.campaign_count,
                    "emails_sent": p.emails_sent,
                    "open_rate_pct": _pct(p.open_rate),
                    "click_rate_pct": _pct(p.click_rate),
                    "unsubscribed": p.unsubscribed,
                }
                for p in self.trends
            ],
            "campaigns": [_campaign_dict(c) for c in self.campaigns],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)
