"""
components/price.py
Price readout per index card: current price, percent change vs previous close,
colored by sign. Green = at or above previous close, Red = below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from dash import html

UP_CLASS   = "text-up"
DOWN_CLASS = "text-down"
NA_TEXT    = "N/A"
PLACEHOLDER = "—"


@dataclass
class PriceDisplayState:
    """Text and classes currently rendered in one card's readout."""
    price_text: str = PLACEHOLDER
    change_text: str = PLACEHOLDER
    price_class: str = ""
    change_class: str = ""
    updated_text: str = ""


def is_positive(current: float, previous_close: float) -> bool:
    """Sign rule shared by the chart color and the text classes."""
    return current >= previous_close


def sign_class(positive: bool) -> str:
    return UP_CLASS if positive else DOWN_CLASS


def format_price(value: float) -> str:
    """1234.5 → '1,234.50'"""
    return f"{value:,.2f}"


def percent_change(current: float, previous_close: float) -> Optional[float]:
    """
    Percent change from previous close, or None when it is undefined
    (previous close of zero, or a non-finite result).
    """
    if previous_close == 0:
        return None
    pct = (current - previous_close) / previous_close * 100
    return pct if math.isfinite(pct) else None


def format_percent(pct: Optional[float]) -> str:
    """
    Examples:
        2.0    → "+2.00%"
        0.0    → "+0.00%"
        -1.254 → "-1.25%"
        None   → "N/A"
    """
    if pct is None:
        return NA_TEXT
    sign = "+" if pct >= 0 else ""
    return f"{sign}{pct:.2f}%"


def format_updated(last_updated: Optional[int], tz: Optional[tzinfo] = None) -> str:
    """Sample time in the clock's zone (server local time when tz is None)."""
    if last_updated is None:
        return ""
    return datetime.fromtimestamp(last_updated, tz).strftime("as of %H:%M")


def update_price_display(
    displays: dict[str, PriceDisplayState],
    index_id: str,
    current: Optional[float],
    previous_close: Optional[float],
    last_updated: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> None:
    """
    Write price, percent change and sign classes into the card state for index_id.

    No-op when the layout has no readout for index_id, or when either price is missing.
    """
    state = displays.get(index_id)
    if state is None or current is None or previous_close is None:
        return

    cls = sign_class(is_positive(current, previous_close))

    state.price_text   = format_price(current)
    state.change_text  = format_percent(percent_change(current, previous_close))
    state.price_class  = cls
    state.change_class = cls
    state.updated_text = format_updated(last_updated, tz)


def build_price_block(index_id: str, state: PriceDisplayState) -> html.Div:
    """Readout markup; ids follow '<index>-price' / '<index>-change'."""
    return html.Div(id=f"{index_id}-readout", className="price-readout", children=[
        html.Span(state.price_text,
                  id=f"{index_id}-price",
                  className=f"current-price {state.price_class}".strip()),
        html.Span(state.change_text,
                  id=f"{index_id}-change",
                  className=f"change-percent {state.change_class}".strip()),
        html.Span(state.updated_text, id=f"{index_id}-updated", className="last-updated"),
    ])
