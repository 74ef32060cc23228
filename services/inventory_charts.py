from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from services.inventory_metrics import LowStockEntry, RenderedBar

CHART_TITLE = 'Product Quantity Distribution'
BAR_COLOR = '#1864ab'


def format_money(value: Optional[Decimal]) -> str:
    if value is None:
        value = Decimal('0')
    rounded = Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f"${rounded:,.2f}"


def format_low_stock(entries: Iterable[LowStockEntry]) -> str:
    labels = [f"{entry.name} ({entry.quantity})" for entry in entries]
    return ', '.join(labels) if labels else 'None'


def render_distribution_chart(report: List[RenderedBar]) -> str:
    """Plain-text bar chart, one line per ranked item."""
    if not report:
        return ''
    lines = [f"{CHART_TITLE}:"]
    lines.extend(bar.line for bar in report)
    return '\n'.join(lines) + '\n'


def _build_empty_figure(message: str, title: str, height: int = 400) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        showarrow=False,
        font=dict(size=14, color="gray"),
    )
    fig.update_layout(title=title, template="plotly_white", height=height)
    return fig


def build_distribution_chart(report: List[RenderedBar], bar_width: int = 30) -> go.Figure:
    if not report:
        return _build_empty_figure(
            "No inventory data to analyze yet.",
            CHART_TITLE,
            height=400,
        )

    df = pd.DataFrame(
        [
            {
                'sku_label': f"{rank}. {bar.name}",
                'quantity': bar.quantity,
                'bar_length': bar.bar_length,
            }
            for rank, bar in enumerate(report, start=1)
        ]
    )

    fig = px.bar(
        df,
        x="bar_length",
        y="sku_label",
        orientation="h",
        custom_data=["quantity"],
        color_discrete_sequence=[BAR_COLOR],
    )

    fig.update_layout(
        title=f"{CHART_TITLE} (Top {len(df)})",
        template="plotly_white",
        height=max(300, 40 * len(df) + 120),
        margin=dict(t=80, b=60, l=120, r=40),
        xaxis=dict(title="Relative stock", range=[0, bar_width]),
        # highest quantity on top
        yaxis=dict(title="Product", automargin=True, categoryorder="array", categoryarray=df["sku_label"].tolist()[::-1]),
    )

    fig.update_traces(
        hovertemplate="Product: %{y}<br>Quantity: %{customdata[0]:,}<extra></extra>"
    )

    return fig
