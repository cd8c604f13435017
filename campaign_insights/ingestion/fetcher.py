"""Report fetcher: one paginated upstream query, normalized and windowed."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ..analytics.models import CampaignMetrics
from ..models.scope import Credentials, DateRange
from .client import MailchimpClient
from .normalizer import normalize_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchRequest:
    """One scope to fetch in a batch."""

    credentials: Credentials
    date_range: DateRange
    list_id: str | None = None


class ReportFetcher:
    """Retrieve campaign metrics for an account within a date window.

    Uses the `/reports` endpoint, which returns pre-aggregated stats for every
    campaign in a single paginated query, rather than listing campaigns and
    requesting one report each.

    Usage:
        fetcher = ReportFetcher(MailchimpClient())
        campaigns = fetcher.fetch(credentials, DateRange.last_days(30))
    """

    def __init__(self, client: MailchimpClient | None = None, max_workers: int = 4):
        self.client = client or MailchimpClient()
        self.max_workers = max_workers

    def fetch(
        self,
        credentials: Credentials,
        date_range: DateRange,
        list_filter: str | None = None,
    ) -> list[CampaignMetrics]:
        """Fetch, normalize and window reports, newest first.

        Args:
            credentials: Account API key and server
            date_range: Inclusive send-time window
            list_filter: Restrict to one audience list id (optional)

        Returns:
            Campaigns sent within [start, end], sorted by send time descending

        Raises:
            UpstreamError: On non-success status or malformed payload
        """
        raw_reports = self.client.get_reports(credentials, date_range, list_filter)
        campaigns = normalize_all(raw_reports)

        # Upstream filters and sorts too; both are re-applied client side.
        in_window = [c for c in campaigns if date_range.contains(c.send_time)]
        dropped = len(campaigns) - len(in_window)
        if dropped:
            logger.debug("Dropped %d reports outside %s", dropped, date_range)

        return sorted(in_window, key=lambda c: c.send_time, reverse=True)

    def fetch_many(self, batch: list[FetchRequest]) -> list[list[CampaignMetrics]]:
        """Fetch several scopes concurrently.

        Every fetch is joined before returning. If any fails, its error is
        raised and no results are returned.

        Returns:
            One campaign list per request, in request order
        """
        if not batch:
            return []

        workers = min(self.max_workers, len(batch))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.fetch, r.credentials, r.date_range, r.list_id)
                for r in batch
            ]
            # result() re-raises; the executor still waits for the rest on exit
            return [future.result() for future in futures]
