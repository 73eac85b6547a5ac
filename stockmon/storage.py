"""Persistence for config.json (credentials) and portfolio.json (positions)."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import Config
from .models import Credentials, Position

logger = logging.getLogger(__name__)


def _read_json(path: Path, expected_type: type):
    """Return parsed JSON, or None if the file is missing, unreadable or the wrong shape."""
    if not path.exists():
        logger.info("File not found, starting fresh: %s", path)
        return None
    logger.info("Loading: %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s (%s); resetting to defaults", path, exc)
        return None
    if not isinstance(data, expected_type):
        logger.warning("Unexpected content in %s; resetting to defaults", path)
        return None
    return data


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Saving: %s", path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_credentials(cfg: Config) -> Credentials:
    """Load config.json, creating it with an empty key when missing or corrupt."""
    data = _read_json(cfg.config_file, dict)
    if data is None:
        creds = Credentials()
        save_credentials(creds, cfg)
        return creds
    return Credentials.from_dict(data)


def save_credentials(creds: Credentials, cfg: Config) -> None:
    _write_json(cfg.config_file, creds.to_dict())


def load_portfolio(cfg: Config) -> list:
    """Load portfolio.json as a list of Position, creating an empty one when needed."""
    data = _read_json(cfg.portfolio_file, list)
    if data is None:
        save_portfolio([], cfg)
        return []
    try:
        return [Position.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning(
            "Malformed position in %s (%s); resetting to defaults", cfg.portfolio_file, exc
        )
        save_portfolio([], cfg)
        return []


def save_portfolio(positions: list, cfg: Config) -> None:
    """Write the portfolio file to disk, creating the folder if needed."""
    _write_json(cfg.portfolio_file, [p.to_dict() for p in positions])


def _mtime(path: Path) -> Optional[int]:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return None


@dataclass
class AppState:
    """Credentials and positions owned by one running command."""

    cfg: Config
    credentials: Credentials = field(default_factory=Credentials)
    positions: list = field(default_factory=list)
    portfolio_mtime: Optional[int] = None

    @classmethod
    def load(cls, cfg: Config) -> "AppState":
        Path(cfg.data_dir).mkdir(parents=True, exist_ok=True)
        state = cls(cfg=cfg, credentials=load_credentials(cfg))
        state.positions = load_portfolio(cfg)
        state.portfolio_mtime = _mtime(cfg.portfolio_file)
        return state

    def save_credentials(self) -> None:
        save_credentials(self.credentials, self.cfg)

    def save_portfolio(self) -> None:
        save_portfolio(self.positions, self.cfg)
        self.portfolio_mtime = _mtime(self.cfg.portfolio_file)

    def refresh_portfolio(self) -> bool:
        """Re-read portfolio.json if it changed on disk since the last load/save."""
        current = _mtime(self.cfg.portfolio_file)
        if current is not None and current == self.portfolio_mtime:
            return False
        logger.info("Portfolio changed on disk, reloading")
        self.positions = load_portfolio(self.cfg)
        self.portfolio_mtime = _mtime(self.cfg.portfolio_file)
        return True

    def find(self, symbol: str) -> Optional[Position]:
        for position in self.positions:
            if position.symbol == symbol:
                return position
        return None
