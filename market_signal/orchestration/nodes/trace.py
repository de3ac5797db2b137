import logging
import time

from market_signal.app.logging import event
from market_signal.orchestration.state import AnalysisState


def trace_node(state: AnalysisState) -> AnalysisState:
    start = state.get("meta", {}).get("start_time_ms")
    if start:
        latency = int(time.time() * 1000 - start)
    else:
        latency = 0
    state.setdefault("meta", {})["latency_ms"] = latency
    event(
        "analysis symbol=%s articles=%d model_called=%s latency_ms=%d"
        % (state.get("symbol"), len(state.get("articles", [])), state.get("model_called", False), latency),
        extra={"symbol": state.get("symbol"), "latency_ms": latency},
        level=logging.INFO,
    )
    return state
