"""Analytics module for email campaign performance."""

from .aggregator import aggregate, safe_rate
from .benchmarks import DEFAULT_BENCHMARKS, compare
from .frames import campaigns_csv, campaigns_frame, campaigns_table
from .highlights import open_rate, select_highlights
from .models import (
    AggregateTotals,
    Benchmark,
    CampaignMetrics,
    ClickStats,
    ComparisonResult,
    Highlights,
    OpenStats,
    TrendPoint,
)
from .trends import build_trends

__all__ = [
    "AggregateTotals",
    "Benchmark",
    "CampaignMetrics",
    "ClickStats",
    "ComparisonResult",
    "DEFAULT_BENCHMARKS",
    "Highlights",
    "OpenStats",
    "TrendPoint",
    "aggregate",
    "build_trends",
    "campaigns_csv",
    "campaigns_frame",
    "campaigns_table",
    "compare",
    "open_rate",
    "safe_rate",
    "select_highlights",
]
