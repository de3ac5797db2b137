from datetime import date, timedelta

import httpx
import pytest

from market_signal.app.errors import HistoryFetchFailed
from market_signal.tools import quotes_client
from market_signal.tools.quotes_client import fetch_history, parse_price_table
from mocks import csv_transport, failing_transport, stooq_csv


def _newest_first(n: int):
    start = date(2023, 1, 1)
    days = [(start + timedelta(days=i)).isoformat() for i in range(n)]
    return [(d, 100 + i) for i, d in reversed(list(enumerate(days)))]


def test_parse_reverses_newest_first_table():
    body = stooq_csv([("2024-01-03", "105"), ("2024-01-02", "103"), ("2024-01-01", "100")])
    points = parse_price_table(body, limit=100)
    assert [(p.date, p.price) for p in points] == [
        ("2024-01-01", 100.0),
        ("2024-01-02", 103.0),
        ("2024-01-03", 105.0),
    ]


@pytest.mark.parametrize("n", [1, 2, 37, 100])
def test_parse_keeps_every_row_up_to_limit(n):
    points = parse_price_table(stooq_csv(_newest_first(n)), limit=100)
    assert len(points) == n
    dates = [p.date for p in points]
    assert dates == sorted(dates)
    assert len(set(dates)) == n


def test_parse_truncates_to_most_recent_rows():
    rows = _newest_first(250)
    points = parse_price_table(stooq_csv(rows), limit=100)
    assert len(points) == 100
    assert points[-1].date == rows[0][0]
    assert points[0].date == rows[99][0]


def test_parse_oldest_first_table_still_covers_most_recent():
    rows = list(reversed(_newest_first(120)))
    points = parse_price_table(stooq_csv(rows), limit=100)
    assert len(points) == 100
    assert points[-1].date == rows[-1][0]
    assert [p.date for p in points] == sorted(p.date for p in points)


def test_parse_skips_blank_and_malformed_rows(caplog):
    body = (
        "Date,Open,High,Low,Close,Volume\n"
        "2024-01-04,1,1,1,n/a,1\n"
        "\n"
        "2024-01-03,1,1,1,105,1\n"
        ",,,,,\n"
        "2024-01-02,1,1,1,,1\n"
        "2024-01-01,1,1,1,100,1\n"
    )
    points = parse_price_table(body, limit=100)
    assert [p.price for p in points] == [100.0, 105.0]
    assert "Dropped 2 malformed price rows" in caplog.text


def test_parse_rejects_nan_close():
    body = stooq_csv([("2024-01-02", "nan"), ("2024-01-01", "100")])
    points = parse_price_table(body, limit=100)
    assert [p.date for p in points] == ["2024-01-01"]


def test_parse_no_data_body_fails():
    with pytest.raises(HistoryFetchFailed):
        parse_price_table("No data", limit=100)


def test_parse_header_only_is_empty_series():
    assert parse_price_table("Date,Open,High,Low,Close,Volume\n", limit=100) == []


def test_parse_all_rows_malformed_fails():
    body = stooq_csv([("2024-01-02", "n/a"), ("2024-01-01", "")])
    with pytest.raises(HistoryFetchFailed):
        parse_price_table(body, limit=100)


async def test_fetch_history_lowercases_symbol_and_requests_daily():
    seen = []
    transport = csv_transport(stooq_csv([("2024-01-01", "100")]), seen=seen)
    points = await fetch_history("AAPL.US", transport=transport)
    assert len(points) == 1
    assert seen[0].url.params["s"] == "aapl.us"
    assert seen[0].url.params["i"] == "d"


async def test_fetch_history_caller_limit():
    transport = csv_transport(stooq_csv(_newest_first(30)))
    points = await fetch_history("MSFT.US", limit=10, transport=transport)
    assert len(points) == 10


async def test_fetch_history_empty_symbol():
    with pytest.raises(HistoryFetchFailed):
        await fetch_history("  ")


async def test_fetch_history_status_error():
    with pytest.raises(HistoryFetchFailed):
        await fetch_history("AAPL.US", transport=csv_transport("oops", status_code=503))


async def test_fetch_history_network_error():
    transport = failing_transport(httpx.ConnectError("connection refused"))
    with pytest.raises(HistoryFetchFailed):
        await fetch_history("AAPL.US", transport=transport)


async def test_fetch_history_retries_transient_errors(monkeypatch):
    from market_signal.app.settings import settings

    monkeypatch.setattr(settings, "fetch_max_retries", 2)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, text=stooq_csv([("2024-01-01", "100")]))

    points = await quotes_client.fetch_history("AAPL.US", transport=httpx.MockTransport(handler))
    assert len(attempts) == 3
    assert points[0].price == 100.0
