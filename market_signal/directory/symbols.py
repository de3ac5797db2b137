import json
import pathlib
from functools import lru_cache
from typing import List, Tuple

from market_signal.app.schemas import StockEntry

FIXTURE_PATH = pathlib.Path(__file__).parent / "fixtures" / "stocks.json"
DEFAULT_LISTING_SIZE = 10


@lru_cache(maxsize=None)
def load_stocks(path: pathlib.Path = FIXTURE_PATH) -> Tuple[StockEntry, ...]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return tuple(StockEntry(**row) for row in data)


def search_stocks(query: str | None, stocks: Tuple[StockEntry, ...] | None = None) -> List[StockEntry]:
    stocks = load_stocks() if stocks is None else stocks
    needle = (query or "").strip().lower()
    if not needle:
        return list(stocks[:DEFAULT_LISTING_SIZE])
    return [s for s in stocks if needle in s.name.lower() or needle in s.symbol.lower()]
