import time

from langgraph.graph import END, StateGraph

from market_signal.app.schemas import AnalysisResult
from market_signal.orchestration.state import AnalysisState
from market_signal.orchestration.nodes.fetch_news import fetch_news_node, no_news_node, route_after_news
from market_signal.orchestration.nodes.build_prompt import build_prompt_node
from market_signal.orchestration.nodes.generate import generate_node
from market_signal.orchestration.nodes.trace import trace_node


def build_workflow():
    graph = StateGraph(AnalysisState)

    graph.add_node("fetch_news", fetch_news_node)
    graph.add_node("no_news", no_news_node)
    graph.add_node("build_prompt", build_prompt_node)
    graph.add_node("generate", generate_node)
    graph.add_node("trace", trace_node)

    graph.set_entry_point("fetch_news")

    # Empty news is a terminal success: skip the model entirely
    graph.add_conditional_edges(
        "fetch_news",
        route_after_news,
        {
            "build_prompt": "build_prompt",
            "no_news": "no_news",
        },
    )

    graph.add_edge("build_prompt", "generate")
    graph.add_edge("generate", "trace")
    graph.add_edge("no_news", "trace")
    graph.add_edge("trace", END)

    return graph.compile()


async def synthesize(symbol: str, company_name: str, workflow=None) -> AnalysisResult:
    """Run the analysis workflow once; stage failures propagate as MarketSignalError subclasses."""
    wf = workflow if workflow is not None else build_workflow()
    state: AnalysisState = {
        "symbol": symbol,
        "company_name": company_name,
        "articles": [],
        "prompt": None,
        "analysis_text": None,
        "model_called": False,
        "meta": {"start_time_ms": int(time.time() * 1000)},
    }
    result = await wf.ainvoke(state)
    return AnalysisResult(analysis_text=result["analysis_text"], articles=result.get("articles", []))
