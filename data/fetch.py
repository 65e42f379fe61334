"""
data/fetch.py
Handles all external data fetching: intraday index quotes from the Yahoo Finance
chart endpoint, relayed through a public CORS proxy.
Every failure collapses to None so one bad index never stops a refresh pass.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import pandas as pd
import requests
from dotenv import load_dotenv

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

load_dotenv()  # optional overrides from a .env file

# ── Constants ──────────────────────────────────────────────────────────────────
CHART_ENDPOINT  = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
RELAY_URL       = os.getenv("QUOTE_RELAY_URL", "https://api.allorigins.win/raw?url=")
QUOTE_INTERVAL  = os.getenv("QUOTE_INTERVAL", "5m")
QUOTE_RANGE     = os.getenv("QUOTE_RANGE", "1d")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))


@dataclass(frozen=True)
class QuoteSnapshot:
    """Normalized result of one fetch for one symbol."""
    symbol: str
    prices: tuple[float, ...]
    current_price: Optional[float]
    previous_close: Optional[float]
    last_updated: Optional[int]   # epoch seconds of the last retained sample


# ── URL helpers ────────────────────────────────────────────────────────────────

def build_quote_url(
    symbol: str,
    relay: str = RELAY_URL,
    interval: str = QUOTE_INTERVAL,
    lookback: str = QUOTE_RANGE,
) -> str:
    """
    Build the request URL for a symbol.

    The upstream chart URL is percent-encoded in full (including the '^' of index
    symbols) and appended to the relay prefix. An empty relay means the upstream
    URL is requested directly.
    """
    upstream = f"{CHART_ENDPOINT.format(symbol=symbol)}?interval={interval}&range={lookback}"
    if not relay:
        return upstream
    return relay + quote(upstream, safe="")


# ── Payload parsing ────────────────────────────────────────────────────────────

def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def parse_chart_payload(symbol: str, payload: dict) -> QuoteSnapshot:
    """
    Turn a chart API payload into a QuoteSnapshot.

    Timestamps and closes are positionally aligned; samples whose close is null
    (market closed, halts, pre-market) are dropped and the rest keep their order.
    A close series shorter than the timestamp series counts the missing tail as null.

    Raises:
        KeyError / IndexError / TypeError / ValueError on an unexpected shape.
    """
    result = payload["chart"]["result"][0]

    timestamps = list(result.get("timestamp") or [])
    closes = list(result["indicators"]["quote"][0].get("close") or [])[:len(timestamps)]
    closes += [None] * (len(timestamps) - len(closes))

    frame = pd.DataFrame({
        "time":  pd.Series(timestamps, dtype="object"),
        "price": pd.to_numeric(pd.Series(closes, dtype="object"), errors="coerce"),
    })
    frame = frame.dropna(subset=["price"])

    meta = result["meta"]
    return QuoteSnapshot(
        symbol=symbol,
        prices=tuple(float(p) for p in frame["price"]),
        current_price=_optional_float(meta.get("regularMarketPrice")),
        previous_close=_optional_float(meta.get("chartPreviousClose")),
        last_updated=int(frame["time"].iloc[-1]) if not frame.empty else None,
    )


# ── Main fetch function ────────────────────────────────────────────────────────

def fetch_quote(
    symbol: str,
    session: Optional[requests.Session] = None,
) -> Optional[QuoteSnapshot]:
    """
    Fetch today's 5-minute price series and quote metadata for one symbol.

    Args:
        symbol:  Upstream ticker symbol (e.g. "^KS11").
        session: Optional requests.Session to reuse connections; module-level
                 requests is used when omitted.

    Returns:
        QuoteSnapshot, or None if the request or the payload failed in any way.
        Failures are logged, never raised.
    """
    http = session if session is not None else requests
    url = build_quote_url(symbol)

    try:
        resp = http.get(url, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        logger.warning(f"Quote request for {symbol} failed: {e}")
        return None
    except ValueError as e:
        logger.warning(f"Quote response for {symbol} is not valid JSON: {e}")
        return None

    try:
        snapshot = parse_chart_payload(symbol, payload)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Unexpected quote payload for {symbol}: {e!r}")
        return None

    logger.info(f"Fetched {len(snapshot.prices)} samples for {symbol}.")
    return snapshot
