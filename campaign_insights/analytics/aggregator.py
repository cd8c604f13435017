"""Reduce a campaign set into summary totals."""

from collections.abc import Iterable

from .models import AggregateTotals, CampaignMetrics


def safe_rate(numerator: int | float, denominator: int | float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def aggregate(campaigns: Iterable[CampaignMetrics]) -> AggregateTotals:
    """Sum counts and compute volume-weighted open and click rates.

    Rates divide summed unique opens/clicks by summed sends; they are not
    the mean of per-campaign rates.

    Empty input gives all zeros.
    """
    sent = opens = unique_opens = clicks = unique_clicks = 0
    unsubscribed = abuse = forwards = count = 0

    for c in campaigns:
        count += 1
        sent += c.emails_sent
        opens += c.opens.total_opens
        unique_opens += c.opens.unique_opens
        clicks += c.clicks.total_clicks
        unique_clicks += c.clicks.unique_clicks
        unsubscribed += c.unsubscribed
        abuse += c.abuse_reports
        forwards += c.forwards

    return AggregateTotals(
        total_sent=sent,
        total_opens=opens,
        total_unique_opens=unique_opens,
        total_clicks=clicks,
        total_unique_clicks=unique_clicks,
        total_unsubscribed=unsubscribed,
        total_abuse=abuse,
        total_forwards=forwards,
        avg_open_rate=safe_rate(unique_opens, sent),
        avg_click_rate=safe_rate(unique_clicks, sent),
        campaign_count=count,
    )
