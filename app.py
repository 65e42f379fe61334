"""
app.py — Market Pulse Dashboard
Entry point. Initializes Dash, builds the index cards, wires the refresh and clock timers.
Keep this file thin — chart and readout logic lives in components/, fetching in data/.
"""

import os

from dash import Dash, dcc, html, Input, Output, callback

from components.chart import build_chart_graph, make_chart_figure
from components.clock import clock_zone, format_clock
from components.price import build_price_block
from data.dashboard import Dashboard
from data.indices import INDICES

# ── Timers ────────────────────────────────────────────────────────────────────
REFRESH_INTERVAL_MS = int(os.getenv("REFRESH_INTERVAL_MS", "60000"))  # quotes, kept slow for the upstream API
CLOCK_INTERVAL_MS   = int(os.getenv("CLOCK_INTERVAL_MS", "1000"))

CLOCK_TZ = clock_zone()

# ══════════════════════════════════════════════════════════════════════════════
# STATE
# ══════════════════════════════════════════════════════════════════════════════

dashboard = Dashboard(tz=CLOCK_TZ)

# ══════════════════════════════════════════════════════════════════════════════
# APP
# ══════════════════════════════════════════════════════════════════════════════

app = Dash(
    __name__,
    title="Market Pulse",
    update_title=None,
)

# ══════════════════════════════════════════════════════════════════════════════
# LAYOUT
# ══════════════════════════════════════════════════════════════════════════════


def build_index_card(index) -> html.Div:
    """One card: name, readout, sparkline."""
    chart, display = dashboard.view(index.id)
    return html.Div(id=f"{index.id}-card", className="index-card", children=[
        html.Div(className="card-header", children=[
            html.Span(index.name, className="index-name"),
            html.Span(index.symbol, className="index-symbol"),
        ]),
        build_price_block(index.id, display),
        build_chart_graph(chart),
    ])


def serve_layout() -> html.Div:
    """Rendered on every page load so a new tab starts from the latest pass."""
    return html.Div(id="app-wrapper", children=[

        # ── Header ────────────────────────────────────────────────────
        html.Div(id="header", children=[
            html.Div(id="header-left", children=[
                html.Span("MARKET PULSE", id="header-logo"),
                html.Span("Live Index Dashboard", id="header-subtitle"),
            ]),
            html.Div(id="header-right", children=[
                html.Span(className="live-dot"),
                html.Span(format_clock(tz=CLOCK_TZ), id="current-time"),
            ]),
        ]),

        # ── Cards ─────────────────────────────────────────────────────
        html.Div(id="index-grid", children=[build_index_card(index) for index in INDICES]),

        # ── Footer ────────────────────────────────────────────────────
        html.Div(id="footer", children=[
            html.Span("Yahoo Finance · 5-minute samples"),
            html.Span("Not financial advice"),
        ]),

        # ── Timers ────────────────────────────────────────────────────
        dcc.Interval(id="refresh-interval", interval=REFRESH_INTERVAL_MS, n_intervals=0),
        dcc.Interval(id="clock-interval", interval=CLOCK_INTERVAL_MS, n_intervals=0),
    ])


app.layout = serve_layout

# ══════════════════════════════════════════════════════════════════════════════
# CALLBACKS
# ══════════════════════════════════════════════════════════════════════════════

REFRESH_OUTPUTS = [
    output
    for index in INDICES
    for output in (
        Output(f"{index.id}-chart",   "figure"),
        Output(f"{index.id}-price",   "children"),
        Output(f"{index.id}-price",   "className"),
        Output(f"{index.id}-change",  "children"),
        Output(f"{index.id}-change",  "className"),
        Output(f"{index.id}-updated", "children"),
    )
]


def collect_outputs() -> list:
    """Flatten dashboard state into REFRESH_OUTPUTS order."""
    values = []
    for index in INDICES:
        chart, display = dashboard.view(index.id)
        values += [
            make_chart_figure(chart),
            display.price_text,
            f"current-price {display.price_class}".strip(),
            display.change_text,
            f"change-percent {display.change_class}".strip(),
            display.updated_text,
        ]
    return values


@callback(
    *REFRESH_OUTPUTS,
    Input("refresh-interval", "n_intervals"),
)
def refresh_indices(_n_intervals: int):
    """
    Run a sequential refresh pass and push every card's state to the page.
    Also fires on page load, so the first visitor after startup triggers the first
    pass however the server was launched.
    A skipped pass (one already running, or one just ran for another tab) still
    returns the current state, so every open page converges.
    """
    dashboard.refresh()
    return collect_outputs()


@callback(
    Output("current-time", "children"),
    Input("clock-interval", "n_intervals"),
)
def tick_clock(_n_intervals: int) -> str:
    return format_clock(tz=CLOCK_TZ)


# ══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print(f"Quotes load on first page view, then every {REFRESH_INTERVAL_MS // 1000}s.\n")
    app.run(
        debug=os.getenv("DASH_DEBUG", "").lower() in ("1", "true", "yes"),
        host=os.getenv("DASH_HOST", "127.0.0.1"),
        port=int(os.getenv("DASH_PORT", "8050")),
    )
