import logging

from market_signal.orchestration.state import AnalysisState
from market_signal.tools.news_client import fetch_news

logger = logging.getLogger(__name__)

NO_NEWS_MESSAGE = "No recent news found to analyze."


async def fetch_news_node(state: AnalysisState) -> AnalysisState:
    # NewsFetchFailed propagates and ends the run
    state["articles"] = await fetch_news(state["company_name"])
    logger.info("Fetched %d articles for %s", len(state["articles"]), state["symbol"])
    return state


def route_after_news(state: AnalysisState) -> str:
    return "build_prompt" if state.get("articles") else "no_news"


def no_news_node(state: AnalysisState) -> AnalysisState:
    state["articles"] = []
    state["analysis_text"] = NO_NEWS_MESSAGE
    state["model_called"] = False
    return state
