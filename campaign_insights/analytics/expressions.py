"""Reusable Polars expressions for campaign analytics."""

import polars as pl

# =============================================================================
# RATE EXPRESSIONS
# =============================================================================


def weighted_rate_expr(numerator: str, denominator: str = "emails_sent") -> pl.Expr:
    """Summed numerator over summed denominator, 0.0 when nothing was sent."""
    total = pl.col(denominator).sum()
    return pl.when(total > 0).then(pl.col(numerator).sum() / total).otherwise(0.0)


def as_percent_expr(col_name: str, decimals: int = 2) -> pl.Expr:
    """Fraction column to rounded percentage (0.2667 -> 26.67)."""
    return (pl.col(col_name) * 100).round(decimals)


# =============================================================================
# TREND EXPRESSIONS
# =============================================================================


def period_start_expr(every: str) -> pl.Expr:
    """UTC calendar date of the send, truncated to the period start.

    `1w` truncates to Monday, `1mo` to the first of the month.
    """
    return pl.col("send_time").dt.date().dt.truncate(every).alias("period_start")


def trend_aggregates_expr() -> list[pl.Expr]:
    """Per-period sums with volume-weighted rates."""
    return [
        pl.len().alias("campaign_count"),
        pl.col("emails_sent").sum().alias("emails_sent"),
        pl.col("unique_opens").sum().alias("unique_opens"),
        pl.col("unique_clicks").sum().alias("unique_clicks"),
        pl.col("unsubscribed").sum().alias("unsubscribed"),
        weighted_rate_expr("unique_opens").alias("open_rate"),
        weighted_rate_expr("unique_clicks").alias("click_rate"),
    ]
