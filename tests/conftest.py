"""Shared fixtures: an isolated data directory and canned quotes."""

import pytest
import requests

from stockmon.config import Config
from stockmon.models import Quote
from stockmon.storage import AppState


def make_quote(symbol: str, close: float, pre_close: float | None = None, name: str = "") -> Quote:
    pre_close = close if pre_close is None else pre_close
    change = close - pre_close
    return Quote(
        symbol=symbol,
        date="20260302",
        open=pre_close,
        high=max(close, pre_close),
        low=min(close, pre_close),
        close=close,
        pre_close=pre_close,
        change=change,
        pct_chg=change / pre_close * 100 if pre_close else 0.0,
        name=name,
    )


class FakeResponse:
    def __init__(self, text: str = "", payload=None, status_code: int = 200):
        self.text = text
        self.encoding = None
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def cfg(tmp_path):
    return Config(data_dir=str(tmp_path / "data"))


@pytest.fixture
def state(cfg):
    return AppState.load(cfg)
