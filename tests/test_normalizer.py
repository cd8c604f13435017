"""Tests for raw report normalization."""

from datetime import datetime, timezone

from campaign_insights.ingestion import normalize
from campaign_insights.ingestion.normalizer import EPOCH, UNTITLED


class TestMissingFields:
    """Absent nested objects and leaves default to zero."""

    def test_missing_nested_objects(self) -> None:
        """opens, clicks and forwards entirely absent yield zeros."""
        result = normalize({"id": "c1", "send_time": "2024-01-15T10:00:00+00:00"})

        assert result.emails_sent == 0
        assert result.opens.total_opens == 0
        assert result.opens.unique_opens == 0
        assert result.opens.open_rate == 0.0
        assert result.clicks.total_clicks == 0
        assert result.clicks.unique_clicks == 0
        assert result.clicks.click_rate == 0.0
        assert result.forwards == 0
        assert result.unsubscribed == 0
        assert result.abuse_reports == 0

    def test_untitled_when_no_title_source(self) -> None:
        result = normalize({"id": "c1", "send_time": "2024-01-15T10:00:00Z"})
        assert result.title == UNTITLED

    def test_missing_leaves_inside_objects(self) -> None:
        result = normalize(
            {"id": "c1", "opens": {"unique_opens": 12}, "clicks": {}}
        )
        assert result.opens.unique_opens == 12
        assert result.opens.total_opens == 0
        assert result.clicks.unique_clicks == 0

    def test_non_mapping_input(self) -> None:
        """Anything that is not a dict still yields a complete record."""
        result = normalize(None)
        assert result.id == ""
        assert result.title == UNTITLED
        assert result.send_time == EPOCH


class TestTitle:
    """Title fallback chain."""

    def test_prefers_subject_line(self) -> None:
        result = normalize({"subject_line": "Hello", "campaign_title": "internal"})
        assert result.title == "Hello"

    def test_falls_back_to_campaign_title(self) -> None:
        result = normalize({"subject_line": "", "campaign_title": "internal"})
        assert result.title == "internal"

    def test_nested_settings_shape(self) -> None:
        """Campaign records carry titles under settings."""
        result = normalize({"settings": {"subject_line": "Nested", "title": "t"}})
        assert result.title == "Nested"

        result = normalize({"settings": {"title": "Only title"}})
        assert result.title == "Only title"


class TestNumericCoercion:
    """Malformed-but-present values default instead of raising."""

    def test_negative_and_garbage_become_zero(self) -> None:
        result = normalize(
            {
                "emails_sent": -5,
                "unsubscribed": "lots",
                "abuse_reports": float("nan"),
                "opens": {"unique_opens": float("inf"), "open_rate": True},
            }
        )
        assert result.emails_sent == 0
        assert result.unsubscribed == 0
        assert result.abuse_reports == 0
        assert result.opens.unique_opens == 0
        assert result.opens.open_rate == 0.0

    def test_numeric_strings_parsed(self) -> None:
        result = normalize({"emails_sent": "1,200", "opens": {"open_rate": "0.25"}})
        assert result.emails_sent == 1200
        assert result.opens.open_rate == 0.25

    def test_forwards_object_or_number(self) -> None:
        assert normalize({"forwards": {"forwards_count": 3}}).forwards == 3
        assert normalize({"forwards": 4}).forwards == 4

    def test_opens_not_a_mapping(self) -> None:
        result = normalize({"opens": 17, "clicks": [1, 2]})
        assert result.opens.unique_opens == 0
        assert result.clicks.unique_clicks == 0


class TestSendTime:
    """Send time parsing."""

    def test_zulu_suffix(self) -> None:
        result = normalize({"send_time": "2024-01-15T10:30:00Z"})
        assert result.send_time == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self) -> None:
        result = normalize({"send_time": "2024-01-15T10:30:00-05:00"})
        assert result.send_time == datetime(2024, 1, 15, 15, 30, tzinfo=timezone.utc)

    def test_unparseable_falls_back_to_epoch(self) -> None:
        assert normalize({"send_time": "yesterday"}).send_time == EPOCH
        assert normalize({}).send_time == EPOCH
