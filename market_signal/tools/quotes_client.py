"""Daily price history from the Stooq CSV export."""
import csv
import io
import logging
import math
from typing import Dict, List, Optional

import httpx

from market_signal.app.errors import HistoryFetchFailed
from market_signal.app.schemas import PricePoint
from market_signal.app.settings import settings
from market_signal.tools.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DATE_COLUMN = "Date"
CLOSE_COLUMN = "Close"


def _to_point(row: Dict[str, Optional[str]]) -> PricePoint | None:
    date = (row.get(DATE_COLUMN) or "").strip()
    raw_close = (row.get(CLOSE_COLUMN) or "").strip()
    if not date or not raw_close:
        return None
    try:
        price = float(raw_close)
    except ValueError:
        return None
    if not math.isfinite(price):
        return None
    return PricePoint(date=date, price=price)


def parse_price_table(text: str, limit: int) -> List[PricePoint]:
    """
    Parse a header-delimited price table into a chronological series.

    The export is expected newest-first: the first ``limit`` usable rows are
    kept and reversed, so anything older than ``limit`` trading days is dropped.
    An oldest-first export is flipped before truncation so the result always
    covers the most recent rows. Rows with a missing date or a non-numeric
    close are skipped and counted; a table whose every row is malformed
    fails, while a table with no rows at all is an empty series.
    """
    reader = csv.DictReader(io.StringIO(text.strip()))
    columns = reader.fieldnames or []
    if DATE_COLUMN not in columns or CLOSE_COLUMN not in columns:
        snippet = text.strip()[:60]
        raise HistoryFetchFailed(f"price table lacks Date/Close columns: {snippet!r}")

    points: List[PricePoint] = []
    dropped = 0
    for row in reader:
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue  # blank row
        point = _to_point(row)
        if point is None:
            dropped += 1
            continue
        points.append(point)

    if dropped:
        logger.warning("Dropped %d malformed price rows", dropped)
    if dropped and not points:
        raise HistoryFetchFailed("price table has no usable rows")

    if len(points) >= 2 and points[0].date < points[-1].date:
        points.reverse()
    recent = points[:limit]
    recent.reverse()
    return recent


@retry_with_backoff()
async def _download(symbol: str, transport: httpx.AsyncBaseTransport | None = None) -> str:
    params = {"s": symbol.lower(), "i": "d"}
    async with httpx.AsyncClient(timeout=settings.request_timeout, transport=transport) as client:
        resp = await client.get(settings.quotes_base_url, params=params)
        resp.raise_for_status()
        return resp.text


async def fetch_history(
    symbol: str,
    limit: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> List[PricePoint]:
    if not symbol or not symbol.strip():
        raise HistoryFetchFailed("symbol must be a non-empty string")
    limit = settings.history_limit if limit is None else limit

    try:
        body = await _download(symbol.strip(), transport=transport)
    except httpx.HTTPError as exc:
        logger.error("Quotes provider request failed for %s: %s", symbol, exc)
        raise HistoryFetchFailed(str(exc)) from exc

    try:
        return parse_price_table(body, limit)
    except HistoryFetchFailed as exc:
        logger.error("Quotes provider returned unusable data for %s: %s", symbol, exc)
        raise
    except csv.Error as exc:
        logger.error("Could not parse price table for %s: %s", symbol, exc)
        raise HistoryFetchFailed(str(exc)) from exc
