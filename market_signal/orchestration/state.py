"""LangGraph state schema for the analysis workflow."""
from typing import Any, Dict, List, Optional, TypedDict

from market_signal.app.schemas import NewsArticle


class AnalysisState(TypedDict, total=False):
    """State schema for one FetchingNews -> BuildingPrompt -> GeneratingAnalysis run."""

    # Input
    symbol: str
    company_name: str

    # FetchingNews
    articles: List[NewsArticle]

    # BuildingPrompt
    prompt: Optional[str]

    # GeneratingAnalysis / Done
    analysis_text: Optional[str]
    model_called: bool

    # Metadata
    meta: Dict[str, Any]
