"""Streamlit UI for the email campaign insights dashboard."""

import html
import logging
from datetime import date, timedelta

import plotly.graph_objects as go
import streamlit as st

from campaign_insights.analytics import campaigns_table
from campaign_insights.exceptions import InsightsError, UpstreamError, ValidationError
from campaign_insights.models import DateRange
from campaign_insights.services import ReportService

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Page config
st.set_page_config(
    page_title="Email Campaign Insights",
    page_icon="📧",
    layout="wide",
)

DATE_PRESETS = {
    "Last 7 days": 7,
    "Last 30 days": 30,
    "Last 90 days": 90,
    "Last 12 months": 365,
}

# Custom CSS
st.markdown(
    """
    <style>
    .highlight-best { background-color: #d4edda; border-left: 4px solid #28a745; padding: 1rem; margin: 0.5rem 0; }
    .highlight-worst { background-color: #f8d7da; border-left: 4px solid #dc3545; padding: 1rem; margin: 0.5rem 0; }
    </style>
    """,
    unsafe_allow_html=True,
)


def format_number(n: int | float, decimals: int = 0) -> str:
    """Format number with commas."""
    if decimals == 0:
        return f"{int(n):,}"
    return f"{n:,.{decimals}f}"


def format_pct(n: float | None, decimals: int = 2) -> str:
    """Format a value already in percentage units."""
    if n is None:
        return "N/A"
    return f"{n:.{decimals}f}%"


def get_service() -> ReportService:
    """One service (and scope cache) per browser session."""
    if "service" not in st.session_state:
        st.session_state.service = ReportService()
    return st.session_state.service


def highlight_html(kind: str, campaign: dict) -> str:
    """HTML for a best/worst campaign card; the title is escaped."""
    label = "🏆 Best Campaign" if kind == "best" else "📉 Needs Attention"
    return f"""
        <div class="highlight-{kind}">
            <strong>{label}</strong><br/>
            {html.escape(campaign['title'])}<br/>
            <em>{format_pct(campaign['open_rate_pct'])} open rate ·
            {format_number(campaign['emails_sent'])} sent</em>
        </div>
        """


def render_highlight(kind: str, campaign: dict) -> None:
    """Render a best/worst campaign card."""
    st.markdown(highlight_html(kind, campaign), unsafe_allow_html=True)


def create_trend_chart(trends: list[dict]) -> go.Figure:
    """Create trend chart with emails sent and open/click rates."""
    fig = go.Figure()

    periods = [t["period_start"] for t in trends]

    fig.add_trace(go.Bar(
        x=periods,
        y=[t["emails_sent"] for t in trends],
        name="Emails Sent",
        marker_color="#667eea",
        yaxis="y",
    ))

    fig.add_trace(go.Scatter(
        x=periods,
        y=[t["open_rate_pct"] for t in trends],
        name="Open Rate (%)",
        yaxis="y2",
        mode="lines+markers",
        line=dict(color="#28a745", width=3),
    ))

    fig.add_trace(go.Scatter(
        x=periods,
        y=[t["click_rate_pct"] for t in trends],
        name="Click Rate (%)",
        yaxis="y2",
        mode="lines+markers",
        line=dict(color="#dc3545", width=3),
    ))

    fig.update_layout(
        title="Performance Trend",
        yaxis=dict(title="Emails Sent", side="left", showgrid=True),
        yaxis2=dict(title="Rate (%)", side="right", overlaying="y", showgrid=False),
        legend=dict(x=0, y=1.15, orientation="h"),
        height=400,
        plot_bgcolor="white",
    )

    return fig


def create_benchmark_chart(benchmarks: list[dict], metric: str) -> go.Figure:
    """Bar chart of your rate versus each industry benchmark."""
    rows = [b for b in benchmarks if b["metric"] == metric]
    colors = ["#28a745" if b["direction"] == "above" else "#dc3545" for b in rows]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[b["label"] for b in rows],
        y=[b["industry_rate_pct"] for b in rows],
        name="Industry",
        marker_color="#adb5bd",
    ))
    fig.add_trace(go.Bar(
        x=[b["label"] for b in rows],
        y=[b["your_rate_pct"] for b in rows],
        name="You",
        marker_color=colors,
    ))

    fig.update_layout(
        title=f"{metric.title()} Rate vs Industry",
        yaxis_title="Rate (%)",
        barmode="group",
        height=350,
        plot_bgcolor="white",
    )

    return fig


def render_report(report, summary: dict, service: ReportService) -> None:
    """Render a dashboard from a DashboardReport and its summary dict."""
    totals = summary["totals"]

    # KPI row
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(
        "Total Emails Sent",
        format_number(totals["total_sent"]),
        help=f"{totals['campaign_count']} campaigns",
    )
    col2.metric(
        "Average Open Rate",
        format_pct(totals["avg_open_rate_pct"]),
        help=f"{format_number(totals['total_unique_opens'])} unique opens",
    )
    col3.metric(
        "Average Click Rate",
        format_pct(totals["avg_click_rate_pct"]),
        help=f"{format_number(totals['total_unique_clicks'])} unique clicks",
    )
    col4.metric("Total Unsubscribed", format_number(totals["total_unsubscribed"]))

    if totals["campaign_count"] == 0:
        st.info("No campaigns found in this time period")
        return

    # Highlights
    if summary["highlights"]:
        col1, col2 = st.columns(2)
        with col1:
            render_highlight("best", summary["highlights"]["best"])
        with col2:
            render_highlight("worst", summary["highlights"]["worst"])

    # Benchmarks
    st.subheader("📏 Industry Benchmarks")
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            create_benchmark_chart(summary["benchmarks"], "open"),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(
            create_benchmark_chart(summary["benchmarks"], "click"),
            use_container_width=True,
        )

    # Trends
    if summary["trends"]:
        st.subheader("📈 Trends")
        st.plotly_chart(create_trend_chart(summary["trends"]), use_container_width=True)

    # Campaign table
    st.subheader("📋 Campaigns")
    st.dataframe(campaigns_table(report.campaigns), use_container_width=True)

    st.download_button(
        "⬇️ Download CSV",
        data=service.export_csv(report),
        file_name=f"campaigns_{report.scope.account_key}_{date.today().isoformat()}.csv",
        mime="text/csv",
    )


def main():
    st.title("📧 Email Campaign Insights")

    service = get_service()
    accounts = service.settings.accounts

    # Sidebar - scope and window
    with st.sidebar:
        st.header("⚙️ Filters")

        account_key = st.selectbox(
            "Account",
            options=list(accounts),
            format_func=lambda k: accounts[k].label,
        )

        tabs = accounts[account_key].tabs
        list_key = st.selectbox(
            "Audience",
            options=[None] + [t.key for t in tabs],
            format_func=lambda k: "All audiences" if k is None else accounts[account_key].tab(k).label,
        )

        preset = st.selectbox("Date range", options=list(DATE_PRESETS), index=1)
        trend_period = st.radio("Trend grouping", options=["week", "month"], horizontal=True)

        refresh = st.button("🔄 Refresh")

        st.divider()

    today = date.today()
    date_range = DateRange.from_dates(today - timedelta(days=DATE_PRESETS[preset]), today)

    try:
        with st.spinner("Loading campaign data..."):
            report = service.load_report(
                account_key,
                date_range,
                list_key=list_key,
                refresh=refresh,
                trend_period=trend_period,
            )
        st.session_state.last_report = report
    except ValidationError as e:
        st.error(f"Invalid selection: {e}")
        report = st.session_state.get("last_report")
    except UpstreamError as e:
        st.error(f"Error loading data: {e}. Please check your API credentials and try again.")
        report = st.session_state.get("last_report")
    except InsightsError as e:
        st.error(f"Error: {e}")
        report = st.session_state.get("last_report")

    if report is None:
        return

    st.caption(
        f"Last updated: {report.generated_at.strftime('%H:%M:%S UTC')}"
        + (" (cached)" if report.from_cache else "")
    )
    render_report(report, report.to_dict(), service)


if __name__ == "__main__":
    main()
