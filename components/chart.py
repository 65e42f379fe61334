"""
components/chart.py
Per-index sparkline: intraday price line, green when at/above previous close,
red when below, with a vertical gradient fill fading to transparent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import plotly.graph_objects as go
from dash import dcc

from data.fetch import QuoteSnapshot
from data.indices import IndexDescriptor
from components.price import is_positive

# ── Color constants ────────────────────────────────────────────────────────────
UP_COLOR   = "#2ebd85"   # green
DOWN_COLOR = "#f6465d"   # red
FILL_ALPHA = 0.2

TICK_COLOR      = "#8b92a5"
GRID_COLOR      = "rgba(255, 255, 255, 0.05)"
TOOLTIP_BG      = "rgba(23, 25, 30, 0.9)"
TOOLTIP_BORDER  = "rgba(255, 255, 255, 0.1)"
TOOLTIP_TEXT    = "#fff"
TICK_FONT       = "JetBrains Mono, monospace"

CHART_HEIGHT_PX = 180


def rgba(hex_color: str, alpha: float) -> str:
    """'#2ebd85', 0.2 → 'rgba(46, 189, 133, 0.2)'"""
    h = hex_color.lstrip("#")
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"


@dataclass(frozen=True)
class ChartStyle:
    """Shared visual configuration. Frozen; every figure gets its own layout dict."""
    line_width: int = 2
    line_smoothing: float = 0.8
    tick_size: int = 11
    height: int = CHART_HEIGHT_PX

    def layout(self) -> dict:
        return {
            "height": self.height,
            "showlegend": False,
            "paper_bgcolor": "rgba(0, 0, 0, 0)",
            "plot_bgcolor": "rgba(0, 0, 0, 0)",
            "margin": {"l": 0, "r": 0, "t": 8, "b": 0},
            "hovermode": "x",
            "hoverlabel": {
                "bgcolor": TOOLTIP_BG,
                "bordercolor": TOOLTIP_BORDER,
                "font": {"color": TOOLTIP_TEXT, "family": TICK_FONT},
            },
            "transition": {"duration": 0},
            "xaxis": {
                "visible": False,
                "showgrid": False,
                "showspikes": True,
                "spikemode": "across",
                "spikethickness": 1,
                "spikecolor": TICK_COLOR,
                "spikedash": "dot",
            },
            "yaxis": {
                "side": "right",
                "gridcolor": GRID_COLOR,
                "zeroline": False,
                "tickfont": {"color": TICK_COLOR, "family": TICK_FONT, "size": self.tick_size},
                "tickformat": ",.0f",
            },
        }


BASE_STYLE = ChartStyle()


@dataclass
class ChartState:
    """What one chart currently shows. labels are blank placeholders, one per price."""
    index_id: str
    name: str
    prices: list[float] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    color: str = UP_COLOR
    fill: str = rgba(UP_COLOR, FILL_ALPHA)

    @classmethod
    def for_index(cls, index: IndexDescriptor) -> "ChartState":
        return cls(index_id=index.id, name=index.name)


def make_chart_figure(state: ChartState, style: ChartStyle = BASE_STYLE) -> go.Figure:
    """
    Build a fresh figure for one chart state.

    Trace 0 is an invisible baseline at the series minimum; the price trace fills
    down to it so the y axis keeps the intraday range instead of stretching to zero.

    Args:
        state: Current chart state for the index.
        style: Shared visual configuration.

    Returns:
        Plotly Figure (empty axes when the state has no prices).
    """
    n = len(state.prices)
    x = list(range(n))
    floor = min(state.prices) if n else None

    baseline = go.Scatter(
        x=x,
        y=[floor] * n,
        mode="lines",
        line={"width": 0, "color": "rgba(0, 0, 0, 0)"},
        hoverinfo="skip",
        showlegend=False,
    )
    price_line = go.Scatter(
        x=x,
        y=state.prices,
        text=state.labels,
        name=state.name,
        mode="lines",
        line={
            "color": state.color,
            "width": style.line_width,
            "shape": "spline",
            "smoothing": style.line_smoothing,
        },
        fill="tonexty",
        fillgradient={
            "type": "vertical",
            "colorscale": [[0.0, rgba(state.color, 0)], [1.0, state.fill]],
        },
        hovertemplate="%{y:,.2f}<extra></extra>",
    )

    fig = go.Figure([baseline, price_line])
    fig.update_layout(**style.layout())
    return fig


def update_chart(
    charts: dict[str, ChartState],
    index_id: str,
    snapshot: QuoteSnapshot,
) -> Optional[ChartState]:
    """
    Replace the displayed series for index_id and recolor it by sign.

    Labels are regenerated to match the new series length, so repeated updates with
    the same snapshot leave the same state. The previous color is kept when the
    snapshot lacks either price.
    """
    state = charts.get(index_id)
    if state is None:
        return None

    state.prices = list(snapshot.prices)
    state.labels = [""] * len(state.prices)

    if snapshot.current_price is not None and snapshot.previous_close is not None:
        positive = is_positive(snapshot.current_price, snapshot.previous_close)
        state.color = UP_COLOR if positive else DOWN_COLOR
        state.fill = rgba(state.color, FILL_ALPHA)

    return state


def build_chart_graph(state: ChartState) -> dcc.Graph:
    """The drawing surface for one index, addressed as '<index>-chart'."""
    return dcc.Graph(
        id=f"{state.index_id}-chart",
        figure=make_chart_figure(state),
        animate=False,
        config={"displayModeBar": False, "responsive": True},
        style={"height": f"{CHART_HEIGHT_PX}px"},
    )
