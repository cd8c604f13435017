"""Compare aggregate rates with industry benchmarks."""

from typing import Literal

from .models import AggregateTotals, Benchmark, ComparisonResult

# Used when settings provide no benchmark table. Percentage units.
DEFAULT_BENCHMARKS: tuple[Benchmark, ...] = (
    Benchmark(label="Church / Religious", open_rate=27.0, click_rate=3.2),
    Benchmark(label="Nonprofit", open_rate=25.2, click_rate=2.8),
    Benchmark(label="Marketing & Advertising", open_rate=17.4, click_rate=2.0),
    Benchmark(label="All Industries", open_rate=21.3, click_rate=2.6),
)


def to_points(fraction: float) -> float:
    """Fraction (0.27) to percentage points (27.0)."""
    return fraction * 100


def _compare_one(
    label: str,
    metric: Literal["open", "click"],
    your_rate: float,
    industry_rate: float,
) -> ComparisonResult:
    delta = to_points(your_rate) - industry_rate
    return ComparisonResult(
        benchmark_label=label,
        metric=metric,
        your_rate=your_rate,
        industry_rate=industry_rate,
        delta=delta,
        direction="above" if delta >= 0 else "below",
    )


def compare(
    totals: AggregateTotals, benchmarks: list[Benchmark] | tuple[Benchmark, ...]
) -> list[ComparisonResult]:
    """Open and click comparison for each benchmark, in benchmark order.

    `your_rate` stays a fraction; `delta` is in percentage points. A tie
    (delta == 0) counts as above.
    """
    results: list[ComparisonResult] = []
    for b in benchmarks:
        results.append(_compare_one(b.label, "open", totals.avg_open_rate, b.open_rate))
        results.append(
            _compare_one(b.label, "click", totals.avg_click_rate, b.click_rate)
        )
    return results
