"""
data/indices.py
The fixed set of market indices shown on the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexDescriptor:
    """One tracked benchmark: stable id (used in component ids), display name, upstream symbol."""
    id: str
    name: str
    symbol: str


INDICES: tuple[IndexDescriptor, ...] = (
    IndexDescriptor("kospi",  "코스피",   "^KS11"),
    IndexDescriptor("kosdaq", "코스닥",   "^KQ11"),
    IndexDescriptor("nasdaq", "나스닥",   "^IXIC"),
    IndexDescriptor("sp500",  "S&P 500", "^GSPC"),
)
