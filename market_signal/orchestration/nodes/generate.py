import logging
from typing import Any, Dict

from langchain_openai import ChatOpenAI
from openai import RateLimitError

from market_signal.app.errors import SynthesisFailed
from market_signal.app.settings import settings
from market_signal.orchestration.state import AnalysisState

logger = logging.getLogger(__name__)


def _llm():
    # IMPORTANT: only pass api_key if it is set, otherwise let langchain-openai
    # resolve OPENAI_API_KEY from the environment.
    kwargs: Dict[str, Any] = {
        "model": settings.model_name,
        "temperature": settings.model_temperature,
        "timeout": settings.request_timeout,
        # the model call is not idempotent; never retried
        "max_retries": 0,
    }
    if settings.openai_api_key:
        kwargs["api_key"] = settings.openai_api_key
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return ChatOpenAI(**kwargs)


def _text_of(content: Any) -> str:
    if isinstance(content, str):
        return content
    # multi-part messages: keep the text parts
    parts = [p.get("text", "") if isinstance(p, dict) else str(p) for p in content or []]
    return "".join(parts)


async def generate_node(state: AnalysisState) -> AnalysisState:
    state["model_called"] = True
    try:
        llm = _llm()
        response = await llm.ainvoke(state["prompt"])
    except RateLimitError as exc:
        logger.error("Model rate limit / quota exceeded for %s: %s", state["symbol"], exc)
        raise SynthesisFailed(f"rate_limit: {exc}") from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM generation failed for %s: %s", state["symbol"], exc, exc_info=True)
        raise SynthesisFailed(str(exc)) from exc

    text = _text_of(response.content).strip()
    if not text:
        logger.error("Model returned an empty completion for %s", state["symbol"])
        raise SynthesisFailed("empty completion")
    state["analysis_text"] = text
    return state
