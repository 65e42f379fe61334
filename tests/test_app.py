"""Dash wiring: layout ids, output ordering, callbacks."""

import pytest

import app
from components.price import UP_CLASS
from data.dashboard import Dashboard
from data.fetch import QuoteSnapshot
from data.indices import INDICES


@pytest.fixture
def board(monkeypatch):
    fresh = Dashboard(
        fetcher=lambda symbol: QuoteSnapshot(symbol, (100.0, 102.0), 102.0, 100.0, None),
        min_interval=0,
    )
    monkeypatch.setattr(app, "dashboard", fresh)
    return fresh


def _ids(component, found=None):
    found = set() if found is None else found
    cid = getattr(component, "id", None)
    if cid:
        found.add(cid)
    children = getattr(component, "children", None)
    if isinstance(children, (list, tuple)):
        for child in children:
            _ids(child, found)
    elif children is not None and not isinstance(children, str):
        _ids(children, found)
    return found


def test_layout_has_every_output_target(board):
    ids = _ids(app.serve_layout())
    for output in app.REFRESH_OUTPUTS:
        assert output.component_id in ids
    assert {"current-time", "refresh-interval", "clock-interval"} <= ids


def test_interval_settings(board):
    layout = app.serve_layout()
    intervals = {c.id: c for c in layout.children if c.__class__.__name__ == "Interval"}
    assert intervals["refresh-interval"].interval == app.REFRESH_INTERVAL_MS
    assert intervals["clock-interval"].interval == app.CLOCK_INTERVAL_MS


def test_refresh_callback_returns_outputs_in_order(board):
    values = app.refresh_indices(1)
    assert len(values) == len(app.REFRESH_OUTPUTS) == 6 * len(INDICES)

    figure, price, price_cls, change, change_cls, updated = values[:6]
    assert list(figure.data[1].y) == [100.0, 102.0]
    assert price == "102.00"
    assert price_cls == f"current-price {UP_CLASS}"
    assert change == "+2.00%"
    assert change_cls == f"change-percent {UP_CLASS}"
    assert updated == ""


def test_outputs_before_first_pass_show_placeholders(board):
    values = app.collect_outputs()
    assert values[1] == "—"
    assert values[2] == "current-price"


def test_clock_callback():
    assert len(app.tick_clock(0)) == len("00:00:00")


def test_first_page_load_runs_startup_pass(board):
    assert board.last_pass is None
    assert app.collect_outputs()[1] == "—"

    values = app.refresh_indices(0)

    assert board.last_pass is not None
    for offset in range(0, len(values), 6):
        assert values[offset + 1] == "102.00"
        assert values[offset + 3] == "+2.00%"


class CountingFetcher:
    def __init__(self, prices):
        self.prices = prices
        self.calls = []

    def __call__(self, symbol):
        self.calls.append(symbol)
        return QuoteSnapshot(symbol, self.prices, self.prices[-1], 100.0, None)


def test_tick_while_pass_running_returns_current_state(board):
    app.refresh_indices(0)
    expected = app.collect_outputs()
    fetcher = CountingFetcher((90.0, 95.0))
    board.fetcher = fetcher

    board._lock.acquire()
    try:
        values = app.refresh_indices(1)
    finally:
        board._lock.release()

    assert fetcher.calls == []
    assert len(values) == len(app.REFRESH_OUTPUTS)
    assert values[1:6] == expected[1:6]
    assert list(values[0].data[1].y) == [100.0, 102.0]


def test_tick_within_min_interval_returns_current_state(monkeypatch):
    now = [500.0]
    first = CountingFetcher((100.0, 102.0))
    fresh = Dashboard(fetcher=first, min_interval=30, clock=lambda: now[0])
    monkeypatch.setattr(app, "dashboard", fresh)

    app.refresh_indices(0)
    second = CountingFetcher((90.0, 95.0))
    fresh.fetcher = second
    now[0] += 5

    values = app.refresh_indices(1)

    assert second.calls == []
    assert values[1] == "102.00"
    assert values[2] == f"current-price {UP_CLASS}"
    assert list(values[-6].data[1].y) == [100.0, 102.0]


def test_layout_reflects_latest_pass(board):
    board.refresh()
    layout = app.serve_layout()
    grid = next(c for c in layout.children if getattr(c, "id", None) == "index-grid")
    first_card = grid.children[0]
    readout = first_card.children[1]
    assert readout.children[0].children == "102.00"
