"""Tests for the Mailchimp client and report fetcher."""

from datetime import date, datetime, timezone

import pytest
import requests

from campaign_insights.exceptions import UpstreamError, ValidationError
from campaign_insights.ingestion import FetchRequest, MailchimpClient, ReportFetcher
from campaign_insights.models import Credentials, DateRange

from .conftest import FakeResponse, FakeSession, report

JANUARY = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 31))


class TestDateRange:
    """DateRange validation and windowing."""

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid date range"):
            DateRange.from_dates(date(2024, 2, 1), date(2024, 1, 1))

    def test_end_day_inclusive(self) -> None:
        assert JANUARY.contains(datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc))
        assert JANUARY.contains(datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc))
        assert not JANUARY.contains(datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc))

    def test_naive_bounds_taken_as_utc(self) -> None:
        window = DateRange(datetime(2024, 1, 1), datetime(2024, 1, 2))
        assert window.start.tzinfo is timezone.utc

    def test_last_days(self) -> None:
        now = datetime(2024, 3, 31, 12, tzinfo=timezone.utc)
        window = DateRange.last_days(30, now=now)
        assert window.end == now
        assert window.start == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)


class TestMailchimpClient:
    """Tests for MailchimpClient.get_reports() and get_lists()."""

    def test_single_filtered_query(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"reports": [report("a", "2024-01-15T10:00:00+00:00")], "total_items": 1}))

        result = client.get_reports(credentials, JANUARY, list_id="list-9")

        assert len(result) == 1
        assert len(session.calls) == 1
        call = session.calls[0]
        assert call["url"] == "https://us19.api.mailchimp.com/3.0/reports"
        assert call["auth"] == ("anystring", "abc123-us19")
        assert call["params"]["list_id"] == "list-9"
        assert call["params"]["sort_dir"] == "DESC"
        assert call["params"]["since_send_time"] == "2023-12-31T23:59:59Z"
        assert call["params"]["offset"] == 0

    def test_upstream_bounds_widened(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        """The exclusive upstream filter must not drop sends on a bound."""
        window = DateRange(
            datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 17, 0, tzinfo=timezone.utc),
        )
        session.add("/reports", FakeResponse({"reports": []}))

        client.get_reports(credentials, window)

        params = session.calls[0]["params"]
        assert params["since_send_time"] == "2024-01-01T08:59:59Z"
        assert params["before_send_time"] == "2024-01-01T17:00:01Z"

    def test_paginates_until_total(
        self, session: FakeSession, credentials: Credentials
    ) -> None:
        client = MailchimpClient(session=session, page_size=2)
        session.add("/reports", FakeResponse({"reports": [report("a", "2024-01-20T00:00:00Z"), report("b", "2024-01-19T00:00:00Z")], "total_items": 3}))
        session.add("/reports", FakeResponse({"reports": [report("c", "2024-01-18T00:00:00Z")], "total_items": 3}))

        result = client.get_reports(credentials, JANUARY)

        assert [r["id"] for r in result] == ["a", "b", "c"]
        assert [c["params"]["offset"] for c in session.calls] == [0, 2]

    def test_http_error(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"title": "API Key Invalid", "detail": "Your API key may be invalid"}, status_code=401, reason="Unauthorized"))

        with pytest.raises(UpstreamError) as exc:
            client.get_reports(credentials, JANUARY)
        assert exc.value.status == 401
        assert "API key may be invalid" in str(exc.value)

    def test_error_without_body_uses_reason(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse(status_code=503, reason="Service Unavailable", invalid_json=True))

        with pytest.raises(UpstreamError, match="Service Unavailable"):
            client.get_reports(credentials, JANUARY)

    def test_invalid_json(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse(invalid_json=True))
        with pytest.raises(UpstreamError, match="Malformed JSON"):
            client.get_reports(credentials, JANUARY)

    @pytest.mark.parametrize(
        "payload",
        [[], {"total_items": 0}, {"reports": "nope"}, {"reports": [1, 2]}],
    )
    def test_malformed_payload(
        self,
        payload,
        session: FakeSession,
        client: MailchimpClient,
        credentials: Credentials,
    ) -> None:
        session.add("/reports", FakeResponse(payload))
        with pytest.raises(UpstreamError):
            client.get_reports(credentials, JANUARY)

    def test_transport_error(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", requests.ConnectionError("connection refused"))
        with pytest.raises(UpstreamError) as exc:
            client.get_reports(credentials, JANUARY)
        assert exc.value.status is None

    def test_get_lists(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/lists", FakeResponse({"lists": [{"id": "l1", "name": "Weekly Newsletter"}], "total_items": 1}))
        lists = client.get_lists(credentials)
        assert [(l.id, l.name) for l in lists] == [("l1", "Weekly Newsletter")]


class TestReportFetcher:
    """Tests for ReportFetcher.fetch() and fetch_many()."""

    def test_window_filter(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        """Only records inside the inclusive window are kept."""
        session.add("/reports", FakeResponse({"reports": [
            report("dec", "2023-12-31T12:00:00+00:00"),
            report("jan", "2024-01-15T12:00:00+00:00"),
        ]}))

        result = ReportFetcher(client).fetch(credentials, JANUARY)

        assert [c.id for c in result] == ["jan"]

    def test_sends_on_either_bound_kept(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        window = DateRange(
            datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 17, 0, tzinfo=timezone.utc),
        )
        session.add("/reports", FakeResponse({"reports": [
            report("slack-after", "2024-01-01T17:00:01Z"),
            report("end", "2024-01-01T17:00:00Z"),
            report("start", "2024-01-01T09:00:00Z"),
            report("slack-before", "2024-01-01T08:59:59Z"),
        ]}))

        result = ReportFetcher(client).fetch(credentials, window)

        assert [c.id for c in result] == ["end", "start"]

    def test_sorted_newest_first(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"reports": [
            report("early", "2024-01-02T00:00:00Z"),
            report("late", "2024-01-30T00:00:00Z"),
            report("mid", "2024-01-15T00:00:00Z"),
        ]}))

        result = ReportFetcher(client).fetch(credentials, JANUARY)

        assert [c.id for c in result] == ["late", "mid", "early"]

    def test_records_are_normalized(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"reports": [{"id": "bare", "send_time": "2024-01-10T00:00:00Z"}]}))

        (campaign,) = ReportFetcher(client).fetch(credentials, JANUARY)

        assert campaign.title == "Untitled"
        assert campaign.emails_sent == 0

    def test_empty_result_is_not_an_error(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"reports": [], "total_items": 0}))
        assert ReportFetcher(client).fetch(credentials, JANUARY) == []

    def test_fetch_many_joins_all(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse({"reports": [report("a", "2024-01-15T00:00:00Z")]}))
        fetcher = ReportFetcher(client, max_workers=2)

        results = fetcher.fetch_many([
            FetchRequest(credentials, JANUARY),
            FetchRequest(credentials, JANUARY, list_id="l1"),
        ])

        assert [[c.id for c in r] for r in results] == [["a"], ["a"]]

    def test_fetch_many_fails_whole_batch(
        self, session: FakeSession, client: MailchimpClient, credentials: Credentials
    ) -> None:
        session.add("/reports", FakeResponse(status_code=500, reason="Internal Server Error", invalid_json=True))
        fetcher = ReportFetcher(client)

        with pytest.raises(UpstreamError):
            fetcher.fetch_many([FetchRequest(credentials, JANUARY)] * 3)

    def test_fetch_many_one_failure_returns_nothing(
        self, session: FakeSession, credentials: Credentials
    ) -> None:
        """One failed scope fails the batch even when the others succeed."""

        class OneListFails(FakeSession):
            def get(self, url: str, **kwargs) -> FakeResponse:
                if kwargs.get("params", {}).get("list_id") == "broken":
                    self.calls.append({"url": url, **kwargs})
                    return FakeResponse(
                        {"detail": "Resource Not Found"},
                        status_code=404,
                        reason="Not Found",
                    )
                return super().get(url, **kwargs)

        flaky = OneListFails()
        flaky.add("/reports", FakeResponse({"reports": [report("a", "2024-01-15T00:00:00Z")]}))
        fetcher = ReportFetcher(MailchimpClient(session=flaky), max_workers=3)

        with pytest.raises(UpstreamError) as exc:
            fetcher.fetch_many([
                FetchRequest(credentials, JANUARY, list_id="ok-1"),
                FetchRequest(credentials, JANUARY, list_id="broken"),
                FetchRequest(credentials, JANUARY, list_id="ok-2"),
            ])

        assert exc.value.status == 404
        assert len(flaky.calls_to("/reports")) == 3

    def test_fetch_many_empty(self, client: MailchimpClient) -> None:
        assert ReportFetcher(client).fetch_many([]) == []
