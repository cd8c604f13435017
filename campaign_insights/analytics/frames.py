"""Polars views over a campaign collection, for trends and CSV export."""

from collections.abc import Sequence

import polars as pl

from .expressions import as_percent_expr
from .highlights import open_rate
from .models import CampaignMetrics

FRAME_SCHEMA: dict[str, pl.DataType] = {
    "id": pl.String,
    "send_time": pl.Datetime("us", "UTC"),
    "title": pl.String,
    "emails_sent": pl.Int64,
    "total_opens": pl.Int64,
    "unique_opens": pl.Int64,
    "open_rate": pl.Float64,
    "total_clicks": pl.Int64,
    "unique_clicks": pl.Int64,
    "click_rate": pl.Float64,
    "unsubscribed": pl.Int64,
    "abuse_reports": pl.Int64,
    "forwards": pl.Int64,
}


def campaigns_frame(campaigns: Sequence[CampaignMetrics]) -> pl.DataFrame:
    """One row per campaign with flattened open/click columns.

    Always carries FRAME_SCHEMA, even when empty.
    """
    columns: dict[str, list] = {name: [] for name in FRAME_SCHEMA}
    for c in campaigns:
        columns["id"].append(c.id)
        columns["send_time"].append(c.send_time)
        columns["title"].append(c.title)
        columns["emails_sent"].append(c.emails_sent)
        columns["total_opens"].append(c.opens.total_opens)
        columns["unique_opens"].append(c.opens.unique_opens)
        columns["open_rate"].append(open_rate(c))
        columns["total_clicks"].append(c.clicks.total_clicks)
        columns["unique_clicks"].append(c.clicks.unique_clicks)
        columns["click_rate"].append(c.clicks.click_rate)
        columns["unsubscribed"].append(c.unsubscribed)
        columns["abuse_reports"].append(c.abuse_reports)
        columns["forwards"].append(c.forwards)
    return pl.DataFrame(columns, schema=FRAME_SCHEMA)


def campaigns_table(campaigns: Sequence[CampaignMetrics]) -> pl.DataFrame:
    """Display table: rates converted to percentages, send time formatted."""
    return campaigns_frame(campaigns).select(
        pl.col("title").alias("Campaign"),
        pl.col("send_time").dt.strftime("%Y-%m-%d %H:%M").alias("Sent"),
        pl.col("emails_sent").alias("Recipients"),
        pl.col("unique_opens").alias("Unique Opens"),
        as_percent_expr("open_rate").alias("Open Rate (%)"),
        pl.col("unique_clicks").alias("Unique Clicks"),
        as_percent_expr("click_rate").alias("Click Rate (%)"),
        pl.col("unsubscribed").alias("Unsubscribed"),
    )


def campaigns_csv(campaigns: Sequence[CampaignMetrics]) -> str:
    """CSV text of the display table."""
    return campaigns_table(campaigns).write_csv()
