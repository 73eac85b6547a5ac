"""Sina Finance real-time quote source (delimited text over HTTP GET)."""

import logging

import requests

from ..config import SINA_URL, Config
from ..errors import QuoteParseError
from ..models import Quote
from ..symbols import SHANGHAI, SHENZHEN, split_symbol

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko)",
    "Referer": "https://finance.sina.com.cn/",
}

# Field positions inside the quoted CSV payload for A-shares.
NAME = 0
OPEN = 1
PRE_CLOSE = 2
PRICE = 3
HIGH = 4
LOW = 5
DATE = 30
TIME = 31
MIN_FIELDS = 32


def to_sina_code(symbol: str) -> str:
    """'600000.SH' -> 'sh600000'; symbols without a known exchange pass through."""
    code, exchange = split_symbol(symbol)
    if exchange in (SHANGHAI, SHENZHEN):
        return f"{exchange.lower()}{code}"
    return code


def _field_float(fields: list, index: int, symbol: str) -> float:
    try:
        return float(fields[index])
    except ValueError:
        raise QuoteParseError(
            f"{symbol}: field {index} is not numeric: {fields[index]!r}"
        ) from None


def parse_sina_payload(text: str, symbol: str) -> Quote:
    """
    Decode a response such as
    'var hq_str_sh600000="浦发银行,10.10,10.00,10.20,...,2026-03-02,15:00:00,00";'
    into a Quote. Raises QuoteParseError for empty or short payloads.
    """
    start = text.find('"')
    end = text.rfind('"')
    if start == -1 or end <= start:
        raise QuoteParseError(f"{symbol}: unexpected response {text[:60]!r}")
    body = text[start + 1:end].strip()
    if not body:
        raise QuoteParseError(f"{symbol}: no data available")
    fields = body.split(",")
    if len(fields) < MIN_FIELDS:
        raise QuoteParseError(
            f"{symbol}: expected at least {MIN_FIELDS} fields, got {len(fields)}"
        )

    price = _field_float(fields, PRICE, symbol)
    pre_close = _field_float(fields, PRE_CLOSE, symbol)
    change = price - pre_close
    return Quote(
        symbol=symbol,
        date=fields[DATE].replace("-", ""),
        open=_field_float(fields, OPEN, symbol),
        high=_field_float(fields, HIGH, symbol),
        low=_field_float(fields, LOW, symbol),
        close=price,
        pre_close=pre_close,
        change=change,
        pct_chg=change / pre_close * 100 if pre_close else 0.0,
        name=fields[NAME].replace(" ", ""),
    )


def fetch_quote(symbol: str, cfg: Config, api_key: str = "") -> Quote:
    """Request one symbol and decode the payload; network errors propagate."""
    url = SINA_URL + to_sina_code(symbol)
    logger.info("Requesting %s", url)
    r = requests.get(url, headers=HEADERS, timeout=cfg.request_timeout)
    r.raise_for_status()
    r.encoding = "gbk"
    return parse_sina_payload(r.text, symbol)
