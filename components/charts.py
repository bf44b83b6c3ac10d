"""Plotly-figurer"""
from typing import List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import plotly.io as pio

from config.settings import COLORS

# Egne Plotly-temaer
pio.templates["husholdning_light"] = go.layout.Template(
    layout=go.Layout(
        font=dict(family="sans-serif", color="#333"),
        title_font=dict(size=20, color="#333"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(
            gridcolor="#e0e0e0",
            linecolor="#e0e0e0",
            zerolinecolor="#e0e0e0",
            tickfont=dict(color="#666"),
            title_font=dict(color="#666"),
        ),
        yaxis=dict(
            gridcolor="#e0e0e0",
            linecolor="#e0e0e0",
            zerolinecolor="#e0e0e0",
            tickfont=dict(color="#666"),
            title_font=dict(color="#666"),
        ),
        legend=dict(
            font=dict(color="#666"),
            bgcolor="rgba(255,255,255,0.5)",
            bordercolor="#e0e0e0",
            borderwidth=1,
        ),
        colorway=px.colors.qualitative.Plotly,
    )
)

pio.templates.default = "husholdning_light"

_LAYOUT = dict(
    hovermode="x unified",
    margin=dict(t=60, b=60, l=60, r=20),
    height=400,
)


def _kroner(values) -> List[float]:
    return [v / 100 for v in values]


def create_balance_line(schedule: pd.DataFrame, template: str = "husholdning_light") -> go.Figure:
    """Restgjeld over tid, ekstra innbetalinger markert"""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=schedule["month"],
        y=_kroner(schedule["closing_balance_oere"]),
        mode="lines",
        name="Restgjeld",
        fill="tozeroy",
        line=dict(color=COLORS["balance"], width=2),
        hovertemplate="%{x}<br>Restgjeld: %{y:,.0f} kr<extra></extra>",
    ))

    extra = schedule[schedule["extra_payment_oere"] > 0]
    if not extra.empty:
        fig.add_trace(go.Scatter(
            x=extra["month"],
            y=_kroner(extra["closing_balance_oere"]),
            mode="markers",
            name="Ekstra innbetaling",
            marker=dict(color=COLORS["extra"], size=11, symbol="star"),
        ))

    fig.update_layout(
        title="Restgjeld",
        xaxis_title="Måned",
        yaxis_title="Kroner",
        template=template,
        **_LAYOUT,
    )
    return fig


def create_interest_cumulative(schedule: pd.DataFrame, template: str = "husholdning_light") -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=schedule["month"],
        y=_kroner(schedule["cumulative_interest_oere"]),
        mode="lines",
        name="Sum renter",
        line=dict(color=COLORS["interest"], width=2),
        hovertemplate="%{x}<br>Sum renter: %{y:,.0f} kr<extra></extra>",
    ))
    fig.update_layout(
        title="Akkumulerte renter",
        xaxis_title="Måned",
        yaxis_title="Kroner",
        template=template,
        **_LAYOUT,
    )
    return fig


def create_what_if_chart(
    regular_path: List[int],
    extra_path: List[int],
    template: str = "husholdning_light",
) -> go.Figure:
    """Restgjeld med og uten ekstra nedbetaling"""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=list(range(1, len(regular_path) + 1)),
        y=_kroner(regular_path),
        mode="lines",
        name="Vanlig betaling",
        line=dict(color=COLORS["balance"], width=2),
    ))
    fig.add_trace(go.Scatter(
        x=list(range(1, len(extra_path) + 1)),
        y=_kroner(extra_path),
        mode="lines",
        name="Med ekstra",
        line=dict(color=COLORS["extra"], width=2, dash="dash"),
    ))
    fig.update_layout(
        title="Hva om jeg betaler ekstra?",
        xaxis_title="Måneder fra nå",
        yaxis_title="Restgjeld (kr)",
        template=template,
        **_LAYOUT,
    )
    return fig


def create_savings_chart(series: pd.DataFrame, template: str = "husholdning_light") -> go.Figure:
    """Sparesaldo mot innskutt beløp"""
    years = series["month"] / 12
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=years,
        y=_kroner(series["contributed_oere"]),
        mode="lines",
        name="Innskutt",
        fill="tozeroy",
        line=dict(color=COLORS["contributed"]),
        hovertemplate="År %{x:.1f}<br>Innskutt: %{y:,.0f} kr<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=years,
        y=_kroner(series["balance_oere"]),
        mode="lines",
        name="Verdi",
        line=dict(color=COLORS["success"], width=2),
        hovertemplate="År %{x:.1f}<br>Verdi: %{y:,.0f} kr<extra></extra>",
    ))
    fig.update_layout(
        title="Spareprognose",
        xaxis_title="År",
        yaxis_title="Kroner",
        template=template,
        **_LAYOUT,
    )
    return fig
