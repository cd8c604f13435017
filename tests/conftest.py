"""Shared fixtures: a fake requests session standing in for the Mailchimp API."""

from typing import Any

import pytest

from campaign_insights.ingestion import MailchimpClient
from campaign_insights.models import Credentials


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        reason: str = "OK",
        invalid_json: bool = False,
    ):
        self.payload = payload
        self.status_code = status_code
        self.reason = reason
        self.invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Queues responses per endpoint path and records every call.

    The last queued response for a path is reused once the queue drains.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[FakeResponse | Exception]] = {}
        self.calls: list[dict[str, Any]] = []

    def add(self, path: str, response: FakeResponse | Exception) -> None:
        self.responses.setdefault(path, []).append(response)

    def calls_to(self, path: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["url"].endswith(path)]

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        path = "/" + url.rsplit("/", 1)[-1]
        queue = self.responses.get(path)
        if not queue:
            raise AssertionError(f"Unexpected request to {url}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response


def report(
    campaign_id: str,
    send_time: str,
    sent: int = 1000,
    unique_opens: int = 250,
    unique_clicks: int = 25,
    subject: str | None = None,
) -> dict[str, Any]:
    """Raw `/reports` record as Mailchimp returns it."""
    return {
        "id": campaign_id,
        "send_time": send_time,
        "subject_line": subject or f"Campaign {campaign_id}",
        "campaign_title": f"internal-{campaign_id}",
        "emails_sent": sent,
        "opens": {
            "opens_total": unique_opens * 2,
            "unique_opens": unique_opens,
            "open_rate": unique_opens / sent if sent else 0,
        },
        "clicks": {
            "clicks_total": unique_clicks * 2,
            "unique_clicks": unique_clicks,
            "click_rate": unique_clicks / sent if sent else 0,
        },
        "unsubscribed": 2,
        "abuse_reports": 0,
        "forwards": {"forwards_count": 1, "forwards_opens": 0},
    }


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> MailchimpClient:
    return MailchimpClient(session=session, page_size=100, timeout=5)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="abc123-us19", server="us19")
