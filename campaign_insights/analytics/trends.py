"""Time-series trends over a campaign collection."""

from collections.abc import Sequence
from typing import Literal

from .expressions import period_start_expr, trend_aggregates_expr
from .frames import campaigns_frame
from .models import CampaignMetrics, TrendPoint

PERIODS: dict[str, str] = {"week": "1w", "month": "1mo"}


def build_trends(
    campaigns: Sequence[CampaignMetrics],
    period: Literal["week", "month"] = "week",
) -> list[TrendPoint]:
    """Group campaigns by send week (Monday start) or month.

    Args:
        campaigns: Normalized campaigns, any order
        period: "week" or "month"

    Returns:
        One TrendPoint per period that has at least one campaign, oldest first
    """
    if period not in PERIODS:
        raise ValueError(f"Unsupported period: {period}. Use one of {list(PERIODS)}")

    df = campaigns_frame(campaigns)
    if df.is_empty():
        return []

    trend_df = (
        df.with_columns(period_start_expr(PERIODS[period]))
        .group_by("period_start")
        .agg(trend_aggregates_expr())
        .sort("period_start")
    )

    return [
        TrendPoint(
            period_start=row["period_start"],
            campaign_count=row["campaign_count"],
            emails_sent=row["emails_sent"],
            unique_opens=row["unique_opens"],
            unique_clicks=row["unique_clicks"],
            unsubscribed=row["unsubscribed"],
            open_rate=row["open_rate"],
            click_rate=row["click_rate"],
        )
        for row in trend_df.to_dicts()
    ]
