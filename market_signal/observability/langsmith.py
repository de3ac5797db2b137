import os

from market_signal.app.settings import Settings, settings as default_settings


def configure_tracing(settings: Settings = default_settings) -> None:
    """
    Configure LangSmith/LangChain tracing of the analysis workflow via environment variables.

    Tracing is opt-in: with ``LANGCHAIN_TRACING_V2=true`` and a LangSmith key,
    LangChain picks the variables up and traces every model call.
    """
    if not settings.langchain_tracing_v2:
        return None
    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    if settings.langsmith_api_key:
        os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key
    if settings.langsmith_project:
        os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project
    return None
