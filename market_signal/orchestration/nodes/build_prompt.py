from market_signal.orchestration.state import AnalysisState
from market_signal.prompts.analysis_prompt import build_prompt


def build_prompt_node(state: AnalysisState) -> AnalysisState:
    state["prompt"] = build_prompt(state["symbol"], state["company_name"], state["articles"])
    return state
