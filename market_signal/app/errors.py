"""Failure taxonomy for the history and analysis pipelines."""


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class MarketSignalError(Exception):
    """Terminal failure of a request; mapped to HTTP 500 with a short message."""

    public_message = "Request failed"

    def __init__(self, detail: str = "", public_message: str | None = None):
        super().__init__(detail or self.public_message)
        if public_message:
            self.public_message = public_message


class HistoryFetchFailed(MarketSignalError):
    public_message = "Failed to fetch stock data"


class NewsFetchFailed(MarketSignalError):
    public_message = "AI Analysis failed"


class SynthesisFailed(MarketSignalError):
    public_message = "AI Analysis failed"
