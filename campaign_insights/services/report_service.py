"""Report service - orchestrates fetching, caching and analytics."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from ..analytics import (
    DEFAULT_BENCHMARKS,
    AggregateTotals,
    Benchmark,
    CampaignMetrics,
    aggregate,
    build_trends,
    campaigns_csv,
    compare,
    select_highlights,
)
from ..ingestion import FetchRequest, MailchimpClient, ReportFetcher
from ..models.dashboard_report import DashboardReport
from ..models.scope import DateRange, Scope
from ..settings import InsightsSettings, load_settings
from .cache import ScopeCache
from .list_resolver import ListResolver

logger = logging.getLogger(__name__)


class ReportService:
    """Service for building campaign dashboards from the Mailchimp API.

    Orchestrates:
    1. Validation of account, audience tab and date range
    2. Fetching reports (or reading the scope cache)
    3. Running aggregate, benchmark, highlight and trend analytics
    4. Returning one consolidated DashboardReport

    One instance per user session; the cache lives on the instance.

    Usage:
        service = ReportService()
        report = service.load_report("1", DateRange.last_days(30))
        summary = report.to_dict()
    """

    def __init__(
        self,
        settings: InsightsSettings | None = None,
        settings_path: Path | None = None,
        client: MailchimpClient | None = None,
    ):
        """Initialize service.

        Args:
            settings: Pre-loaded settings. Loaded from settings_path otherwise.
            settings_path: YAML settings file. Defaults to bundled config.
            client: Upstream HTTP client (injected in tests)
        """
        self.settings = settings or load_settings(settings_path)
        self.client = client or MailchimpClient(
            page_size=self.settings.page_size,
            timeout=self.settings.timeout_seconds,
        )
        self.fetcher = ReportFetcher(self.client, max_workers=self.settings.max_workers)
        self.resolver = ListResolver(
            self.client, max_age=self.settings.list_cache_seconds
        )
        self.cache = ScopeCache()

    @property
    def benchmarks(self) -> list[Benchmark]:
        return self.settings.benchmark_table() or list(DEFAULT_BENCHMARKS)

    def resolve_scope(self, account_key: str, list_key: str | None = None) -> Scope:
        """Validate the account and map an audience tab to its list id.

        Raises:
            ValidationError: Unknown account, missing API key, or unknown tab
        """
        account = self.settings.account(account_key)
        account.credentials()
        list_id = None
        if list_key:
            list_id = self.resolver.list_id(account_key, account, list_key)
        return Scope(account_key=account_key, list_id=list_id)

    def fetch_campaigns(
        self,
        scope: Scope,
        date_range: DateRange,
        refresh: bool = False,
    ) -> tuple[list[CampaignMetrics], bool]:
        """Return campaigns for the scope, from cache when the window matches.

        Returns:
            (campaigns, from_cache)

        Raises:
            UpstreamError: If the fetch fails; the cache is left untouched
        """
        if not refresh:
            cached = self.cache.get(scope)
            if cached is not None and cached.date_range == date_range:
                self.cache.activate(scope)
                return list(cached.campaigns), True

        credentials = self.settings.account(scope.account_key).credentials()
        ticket = self.cache.begin(scope)
        campaigns = self.fetcher.fetch(credentials, date_range, scope.list_id)
        self.cache.store(ticket, date_range, campaigns)
        return campaigns, False

    def build_report(
        self,
        scope: Scope,
        date_range: DateRange,
        campaigns: list[CampaignMetrics],
        from_cache: bool = False,
        trend_period: Literal["week", "month"] = "week",
    ) -> DashboardReport:
        """Run all analytics over an already-fetched collection."""
        totals = aggregate(campaigns)
        return DashboardReport(
            generated_at=datetime.now(timezone.utc),
            scope=scope,
            date_range=date_range,
            campaigns=tuple(campaigns),
            totals=totals,
            comparisons=tuple(compare(totals, self.benchmarks)),
            highlights=select_highlights(campaigns),
            trends=tuple(build_trends(campaigns, trend_period)),
            from_cache=from_cache,
        )

    def load_report(
        self,
        account_key: str,
        date_range: DateRange,
        list_key: str | None = None,
        refresh: bool = False,
        trend_period: Literal["week", "month"] = "week",
    ) -> DashboardReport:
        """Generate the dashboard report for one account/audience and window.

        Args:
            account_key: Key under `accounts` in settings
            date_range: Inclusive send-time window
            list_key: Audience tab key (optional; all lists when omitted)
            refresh: Bypass the scope cache
            trend_period: "week" or "month" grouping for trends

        Returns:
            DashboardReport; zero campaigns is a valid, all-zero report

        Raises:
            ValidationError: Rejected before any reports call
            UpstreamError: Upstream failure; no partial report is returned
        """
        scope = self.resolve_scope(account_key, list_key)
        campaigns, from_cache = self.fetch_campaigns(scope, date_range, refresh)
        logger.info(
            "Built report for %s: %d campaigns (cache=%s)",
            scope,
            len(campaigns),
            from_cache,
        )
        return self.build_report(
            scope, date_range, campaigns, from_cache, trend_period
        )

    def load_overview(
        self, account_keys: list[str], date_range: DateRange
    ) -> dict[str, AggregateTotals]:
        """Totals for several accounts, fetched concurrently.

        All accounts are validated first; any upstream failure fails the
        whole overview.
        """
        batch = [
            FetchRequest(
                credentials=self.settings.account(key).credentials(),
                date_range=date_range,
            )
            for key in account_keys
        ]
        results = self.fetcher.fetch_many(batch)
        return {
            key: aggregate(campaigns)
            for key, campaigns in zip(account_keys, results)
        }

    def export_csv(self, report: DashboardReport) -> str:
        """CSV of the report's campaign table, rates as percentages."""
        return campaigns_csv(report.campaigns)
