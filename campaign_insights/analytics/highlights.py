"""Best and worst campaign selection."""

from collections.abc import Iterable

from .aggregator import safe_rate
from .models import CampaignMetrics, Highlights


def open_rate(campaign: CampaignMetrics) -> float:
    """Unique opens / emails sent, the same fraction `aggregate` reports."""
    return safe_rate(campaign.opens.unique_opens, campaign.emails_sent)


def select_highlights(campaigns: Iterable[CampaignMetrics]) -> Highlights | None:
    """Pick the highest and lowest open-rate campaigns in one pass.

    Comparisons are strict, so on exact ties the first campaign encountered
    wins for both best and worst.

    Returns:
        Highlights, or None for an empty input
    """
    best: CampaignMetrics | None = None
    worst: CampaignMetrics | None = None
    best_rate = worst_rate = 0.0

    for campaign in campaigns:
        rate = open_rate(campaign)
        if best is None or rate > best_rate:
            best, best_rate = campaign, rate
        if worst is None or rate < worst_rate:
            worst, worst_rate = campaign, rate

    if best is None or worst is None:
        return None
    return Highlights(best=best, worst=worst)
