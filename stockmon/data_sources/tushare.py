"""Tushare Pro daily bar source (JSON over HTTP POST, token auth)."""

import datetime as dt
import logging

import requests

from ..config import TUSHARE_URL, Config
from ..errors import QuoteError, QuoteParseError
from ..models import Quote

logger = logging.getLogger(__name__)

FIELDS = "ts_code,trade_date,open,high,low,close,pre_close,change,pct_chg,vol,amount"

# Positions inside each item, in the order requested by FIELDS.
TS_CODE = 0
TRADE_DATE = 1
OPEN = 2
HIGH = 3
LOW = 4
CLOSE = 5
PRE_CLOSE = 6
CHANGE = 7
PCT_CHG = 8

# Enough calendar days to cover weekends and the longest exchange holidays.
LOOKBACK_DAYS = 10


def build_request(symbol: str, api_key: str, today: dt.date | None = None) -> dict:
    today = today or dt.date.today()
    start = today - dt.timedelta(days=LOOKBACK_DAYS)
    return {
        "api_name": "daily",
        "token": api_key,
        "params": {
            "ts_code": symbol,
            "start_date": start.strftime("%Y%m%d"),
            "end_date": today.strftime("%Y%m%d"),
        },
        "fields": FIELDS,
    }


def parse_tushare_payload(payload: dict, symbol: str) -> Quote:
    """Decode the newest item of a 'daily' response into a Quote."""
    if not isinstance(payload, dict):
        raise QuoteParseError(f"{symbol}: unexpected response type {type(payload).__name__}")
    if payload.get("code") not in (0, None):
        raise QuoteError(f"{symbol}: {payload.get('msg') or 'error ' + str(payload['code'])}")

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise QuoteParseError(f"{symbol}: unexpected 'data' type {type(data).__name__}")
    items = data.get("items") or []
    if not isinstance(items, list):
        raise QuoteParseError(f"{symbol}: unexpected 'items' type {type(items).__name__}")
    if not items:
        raise QuoteParseError(f"{symbol}: no data available")
    # Items are returned newest first.
    item = items[0]
    if not isinstance(item, (list, tuple)):
        raise QuoteParseError(f"{symbol}: unexpected item type {type(item).__name__}")
    if len(item) <= PCT_CHG:
        raise QuoteParseError(f"{symbol}: expected {PCT_CHG + 1} fields, got {len(item)}")

    try:
        return Quote(
            symbol=str(item[TS_CODE]),
            date=str(item[TRADE_DATE]),
            open=float(item[OPEN]),
            high=float(item[HIGH]),
            low=float(item[LOW]),
            close=float(item[CLOSE]),
            pre_close=float(item[PRE_CLOSE]),
            change=float(item[CHANGE]),
            pct_chg=float(item[PCT_CHG]),
        )
    except (TypeError, ValueError) as exc:
        raise QuoteParseError(f"{symbol}: malformed item ({exc})") from None


def fetch_quote(symbol: str, cfg: Config, api_key: str = "") -> Quote:
    """Request the latest daily bar for one symbol; network errors propagate."""
    if not api_key:
        raise QuoteError(f"{symbol}: Tushare API token missing (run `stockmon config --key ...`)")
    logger.info("Requesting daily bar for %s", symbol)
    r = requests.post(
        TUSHARE_URL, json=build_request(symbol, api_key), timeout=cfg.request_timeout
    )
    r.raise_for_status()
    try:
        payload = r.json()
    except ValueError:
        raise QuoteParseError(f"{symbol}: response is not JSON") from None
    return parse_tushare_payload(payload, symbol)
