"""Tests for stock panel figure builders."""

from dashboard.components.stocks import (
    build_price_figure,
    build_summary_figure,
    selected_days_table,
    ticker_mapping,
)
from linkedcharts.coupling.events import ChartEvent, EventKind, EventPoint
from linkedcharts.coupling.interpreter import interpret
from linkedcharts.coupling.views import build


def test_price_traces_follow_ticker_order(stock_frame):
    mapping = ticker_mapping(["MSFT", "AAPL"])
    fig = build_price_figure(stock_frame, mapping)

    assert [t.name for t in fig.data] == ["MSFT", "AAPL"]
    assert list(fig.data[0].y) == [240.0, 241.0, 242.0]


def test_clicked_price_point_decodes_to_that_day(stock_frame):
    mapping = ticker_mapping(["MSFT", "AAPL"])
    event = ChartEvent("stock_close_line", EventKind.CLICKED, [EventPoint(1, 2)])

    rows = interpret(event, stock_frame, mapping)

    assert rows.iloc[0]["Ticker"] == "AAPL"
    assert rows.iloc[0]["Close"] == 127.0


def test_summary_figure_plots_summaries(stock_frame):
    view = build(stock_frame, ["Ticker"], value_field="Close", summary="max")
    fig = build_summary_figure(view, ["AAPL", "MSFT"])

    assert list(fig.data[0].x) == ["AAPL", "MSFT"]
    assert list(fig.data[0].y) == [127.0, 242.0]
    assert list(fig.data[0].text) == ["3 day(s)", "3 day(s)"]
    assert fig.layout.yaxis.title.text == "max Close"


def test_selected_days_table_sorted_by_date(stock_frame):
    table = selected_days_table(stock_frame.iloc[[5, 0, 3]])

    assert list(table.columns) == ["Date", "Ticker", "Close"]
    assert list(table["Date"]) == ["2023-01-03", "2023-01-03", "2023-01-05"]
    assert list(table["Ticker"]) == ["AAPL", "MSFT", "MSFT"]
