import logging
from pathlib import Path
from typing import List

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from market_signal.app.aws_settings import load_missing_secrets, validate_required_keys
from market_signal.app.cancellation import ClientDisconnected, run_until_disconnect
from market_signal.app.errors import MarketSignalError
from market_signal.app.logging import configure_logging
from market_signal.app.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse, HistoryResponse, StockEntry
from market_signal.app.settings import settings
from market_signal.directory.symbols import search_stocks
from market_signal.observability.langsmith import configure_tracing
from market_signal.orchestration.graph import build_workflow, synthesize
from market_signal.tools.quotes_client import fetch_history

configure_logging()
configure_tracing()

logger = logging.getLogger(__name__)

app = FastAPI(title="Market Signal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def check_configuration():
    """Resolve provider keys (env first, then Secrets Manager) and refuse to start without them."""
    load_missing_secrets(settings)
    validate_required_keys(settings)
    logger.info("Configuration OK (model=%s)", settings.model_name)


@app.exception_handler(MarketSignalError)
async def market_signal_error_handler(request: Request, exc: MarketSignalError):
    logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=500, content=ErrorResponse(error=exc.public_message).model_dump())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


@app.exception_handler(ClientDisconnected)
async def client_disconnected_handler(request: Request, exc: ClientDisconnected):
    # nobody is listening; close the exchange without a body
    return Response(status_code=499)


workflow = build_workflow()


def get_workflow():
    return workflow


@app.get("/api/stocks", response_model=List[StockEntry])
def stocks(q: str | None = None):
    return search_stocks(q)


@app.get("/api/history/{symbol}", response_model=HistoryResponse, responses={500: {"model": ErrorResponse}})
async def history(
    symbol: str,
    request: Request,
    limit: int = Query(default=settings.history_limit, ge=1, le=settings.history_limit),
):
    data = await run_until_disconnect(request, fetch_history(symbol, limit=limit))
    return HistoryResponse(symbol=symbol, data=data)


@app.post("/api/analyze", response_model=AnalyzeResponse, responses={500: {"model": ErrorResponse}})
async def analyze(payload: AnalyzeRequest, request: Request, wf=Depends(get_workflow)):
    result = await run_until_disconnect(request, synthesize(payload.symbol, payload.name, workflow=wf))
    return AnalyzeResponse.from_result(result)


@app.get("/health")
def health():
    return {"status": "ok"}


def mount_client(target: FastAPI, directory: Path) -> bool:
    """Serve a pre-built client from ``directory`` at the root path; API routes registered earlier win."""
    if not directory.is_dir():
        return False
    target.mount("/", StaticFiles(directory=str(directory), html=True), name="public")
    return True


mount_client(app, Path(settings.static_dir))


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
