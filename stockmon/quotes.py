"""Quote client: picks a data source and turns fetch failures into None."""

import logging
from typing import Callable, Optional

import requests

from .config import Config
from .data_sources import sina, tushare
from .errors import QuoteError
from .models import Quote

logger = logging.getLogger(__name__)

SOURCES = {
    "sina": sina.fetch_quote,
    "tushare": tushare.fetch_quote,
}


def resolve_source(cfg: Config, api_key: str) -> str:
    """'auto' means Tushare when a token is configured, Sina otherwise."""
    if cfg.quote_source == "auto":
        return "tushare" if api_key else "sina"
    return cfg.quote_source


class QuoteClient:
    """Fetch one quote per call from the configured source."""

    def __init__(self, cfg: Config, api_key: str = "", fetcher: Optional[Callable] = None):
        self.cfg = cfg
        self.api_key = api_key
        self.source = resolve_source(cfg, api_key)
        self._fetch = fetcher or SOURCES[self.source]

    def fetch_quote(self, symbol: str) -> Optional[Quote]:
        """Return a Quote, or None after logging a warning if anything goes wrong."""
        try:
            return self._fetch(symbol, self.cfg, self.api_key)
        except (requests.RequestException, QuoteError) as exc:
            logger.warning("Error fetching %s: %s", symbol, exc)
            return None

    __call__ = fetch_quote
