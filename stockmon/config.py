"""Configuration helpers for stockmon (env/.env + defaults)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_DATA_DIR = Path.home() / ".stock-monitor"
CONFIG_FILENAME = "config.json"
PORTFOLIO_FILENAME = "portfolio.json"

DEFAULT_QUOTE_SOURCE = "auto"
QUOTE_SOURCES = ("auto", "sina", "tushare")
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_MONITOR_INTERVAL = 20.0
DEFAULT_MIN_RENDER_SPACING = 1.0

SINA_URL = "https://hq.sinajs.cn/list="
TUSHARE_URL = "http://api.tushare.pro"


@dataclass
class Config:
    """Runtime settings used across the app."""

    data_dir: str = str(DEFAULT_DATA_DIR)
    quote_source: str = DEFAULT_QUOTE_SOURCE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    monitor_interval: float = DEFAULT_MONITOR_INTERVAL
    min_render_spacing: float = DEFAULT_MIN_RENDER_SPACING

    @property
    def config_file(self) -> Path:
        return Path(self.data_dir) / CONFIG_FILENAME

    @property
    def portfolio_file(self) -> Path:
        return Path(self.data_dir) / PORTFOLIO_FILENAME

    @classmethod
    def from_env(cls) -> "Config":
        """Load config from .env/environment and fall back to defaults."""
        load_dotenv()

        source = os.getenv("QUOTE_SOURCE", DEFAULT_QUOTE_SOURCE).lower().strip()
        if source not in QUOTE_SOURCES:
            logging.getLogger(__name__).warning(
                "Unknown QUOTE_SOURCE %r, using %s", source, DEFAULT_QUOTE_SOURCE
            )
            source = DEFAULT_QUOTE_SOURCE

        return cls(
            data_dir=os.path.expanduser(os.getenv("STOCKMON_HOME", str(DEFAULT_DATA_DIR))),
            quote_source=source,
            request_timeout=float(
                os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
            ),
            monitor_interval=float(
                os.getenv("MONITOR_INTERVAL", str(DEFAULT_MONITOR_INTERVAL))
            ),
            min_render_spacing=float(
                os.getenv("MIN_RENDER_SPACING", str(DEFAULT_MIN_RENDER_SPACING))
            ),
        )


def setup_logging() -> None:
    """Configure standard console logging for the app."""
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
