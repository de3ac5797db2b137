"""Recent headlines from the NewsAPI ``everything`` search."""
import logging
from typing import Any, List

import httpx
from pydantic import ValidationError

from market_signal.app.errors import NewsFetchFailed
from market_signal.app.schemas import NewsApiArticle, NewsApiResponse, NewsArticle
from market_signal.app.settings import settings
from market_signal.tools.retry import retry_with_backoff

logger = logging.getLogger(__name__)


def _to_article(raw: NewsApiArticle) -> NewsArticle | None:
    if not raw.title or not raw.url:
        return None
    return NewsArticle(
        title=raw.title,
        url=raw.url,
        source_name=(raw.source.name if raw.source else None) or "Unknown",
        published_at=raw.publishedAt,
    )


@retry_with_backoff()
async def _search(company_name: str, transport: httpx.AsyncBaseTransport | None = None) -> Any:
    # httpx percent-encodes the params
    params = {"q": company_name, "sortBy": "publishedAt", "language": "en"}
    headers = {"X-Api-Key": settings.news_api_key or ""}
    async with httpx.AsyncClient(timeout=settings.request_timeout, transport=transport, headers=headers) as client:
        resp = await client.get(settings.news_base_url, params=params)
        resp.raise_for_status()
        return resp.json()


async def fetch_news(
    company_name: str,
    limit: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> List[NewsArticle]:
    """Return at most ``limit`` articles in the provider's recency order; empty is a valid answer."""
    limit = settings.news_limit if limit is None else limit
    try:
        payload = await _search(company_name, transport=transport)
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("News provider request failed for %r: %s", company_name, exc)
        raise NewsFetchFailed(str(exc)) from exc

    try:
        response = NewsApiResponse.model_validate(payload)
    except ValidationError as exc:
        logger.error("News provider returned a malformed payload for %r: %s", company_name, exc)
        raise NewsFetchFailed("malformed news payload") from exc

    if response.status == "error":
        logger.error("News provider rejected query %r: %s", company_name, response.message)
        raise NewsFetchFailed(response.message or "provider error")

    articles: List[NewsArticle] = []
    for raw in (response.articles or [])[:limit]:
        article = _to_article(raw)
        if article is not None:
            articles.append(article)
    return articles
