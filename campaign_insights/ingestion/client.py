"""Thin Mailchimp Marketing API client built on requests."""

import logging
from datetime import datetime, timedelta
from typing import Any

import requests
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import UpstreamError
from ..models.scope import Credentials, DateRange
from ..models.upstream import AudienceList, ListsPage, ReportsPage

logger = logging.getLogger(__name__)

# Projection keeps each page small; everything the normalizer reads.
REPORT_FIELDS = ",".join(
    f"reports.{name}"
    for name in (
        "id",
        "send_time",
        "subject_line",
        "campaign_title",
        "emails_sent",
        "opens",
        "clicks",
        "unsubscribed",
        "abuse_reports",
        "forwards",
    )
) + ",total_items"

LIST_FIELDS = "lists.id,lists.name,total_items"

# Upstream send-time filters are exclusive; the fetcher enforces [start, end].
BOUND_SLACK = timedelta(seconds=1)


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class MailchimpClient:
    """HTTP collaborator for the report fetcher.

    Usage:
        client = MailchimpClient()
        raw = client.get_reports(credentials, date_range, list_id="abc123")
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        page_size: int = 100,
        timeout: float = 30.0,
    ):
        self.session = session or requests.Session()
        self.page_size = page_size
        self.timeout = timeout

    def _get(
        self, credentials: Credentials, path: str, params: dict[str, Any]
    ) -> dict[str, Any]:
        url = f"{credentials.base_url}{path}"
        try:
            response = self.session.get(
                url,
                params=params,
                auth=("anystring", credentials.api_key),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Request to {path} failed: {e}") from e

        if not response.ok:
            raise UpstreamError(_error_detail(response), status=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Malformed JSON from {path}", status=response.status_code
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamError(
                f"Unexpected payload type from {path}: {type(payload).__name__}",
                status=response.status_code,
            )
        return payload

    def get_reports(
        self,
        credentials: Credentials,
        date_range: DateRange,
        list_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all send reports in the window, newest first.

        Pages through `/reports` with count/offset until `total_items` is
        reached or a short page comes back. The send-time filter is widened
        by BOUND_SLACK on both sides, so callers must re-apply the window.

        Raises:
            UpstreamError: On any failed or malformed page
        """
        params: dict[str, Any] = {
            "count": self.page_size,
            "since_send_time": _iso(date_range.start - BOUND_SLACK),
            "before_send_time": _iso(date_range.end + BOUND_SLACK),
            "sort_field": "send_time",
            "sort_dir": "DESC",
            "fields": REPORT_FIELDS,
        }
        if list_id:
            params["list_id"] = list_id

        reports: list[dict[str, Any]] = []
        offset = 0
        while True:
            payload = self._get(credentials, "/reports", {**params, "offset": offset})
            try:
                page = ReportsPage.model_validate(payload)
            except PydanticValidationError as e:
                raise UpstreamError(f"Malformed reports payload: {e}") from e

            reports.extend(page.reports)
            offset += len(page.reports)

            if len(page.reports) < self.page_size:
                break
            if page.total_items is not None and offset >= page.total_items:
                break

        logger.info(
            "Fetched %d reports from %s (list=%s)",
            len(reports),
            credentials.server,
            list_id or "all",
        )
        return reports

    def get_lists(self, credentials: Credentials) -> list[AudienceList]:
        """Fetch every audience list (id and name) for the account."""
        params: dict[str, Any] = {"count": self.page_size, "fields": LIST_FIELDS}

        lists: list[AudienceList] = []
        offset = 0
        while True:
            payload = self._get(credentials, "/lists", {**params, "offset": offset})
            try:
                page = ListsPage.model_validate(payload)
            except PydanticValidationError as e:
                raise UpstreamError(f"Malformed lists payload: {e}") from e

            lists.extend(page.lists)
            offset += len(page.lists)

            if len(page.lists) < self.page_size:
                break
            if page.total_items is not None and offset >= page.total_items:
                break

        return lists


def _error_detail(response: requests.Response) -> str:
    """Prefer Mailchimp's problem-detail JSON, fall back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("title")
        if detail:
            return str(detail)
    return response.reason or "request failed"
