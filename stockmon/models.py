"""Records persisted to disk and produced by a valuation pass."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. '2026-03-02T01:02:03.456Z'."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def safe_pct(numerator: float, denominator: float) -> float:
    """Percentage of numerator over denominator; NaN when the denominator is zero."""
    if not denominator:
        return math.nan
    return numerator / denominator * 100


def as_number(value) -> float:
    """JSON numbers pass through unchanged; numeric strings become float."""
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    return float(value)


@dataclass
class Credentials:
    """Contents of config.json."""

    api_key: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Credentials":
        return cls(api_key=str(data.get("apiKey") or ""))

    def to_dict(self) -> dict:
        return {"apiKey": self.api_key}


@dataclass
class Position:
    """One held symbol with quantity and average cost basis."""

    symbol: str
    shares: float
    purchase_price: float
    name: str = ""
    date_added: Optional[str] = None
    date_modified: Optional[str] = None

    @property
    def cost(self) -> float:
        return self.shares * self.purchase_price

    def merge(self, shares: float, price: float) -> None:
        """Fold a new buy into this position using weighted-average cost."""
        total_shares = self.shares + shares
        self.purchase_price = (self.cost + shares * price) / total_shares
        self.shares = total_shares
        self.date_modified = utc_timestamp()

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(
            symbol=data["symbol"],
            shares=as_number(data["shares"]),
            purchase_price=as_number(data["purchasePrice"]),
            name=data.get("name") or "",
            date_added=data.get("dateAdded"),
            date_modified=data.get("dateModified"),
        )

    def to_dict(self) -> dict:
        out = {
            "symbol": self.symbol,
            "name": self.name,
            "shares": self.shares,
            "purchasePrice": self.purchase_price,
        }
        if self.date_added is not None:
            out["dateAdded"] = self.date_added
        if self.date_modified is not None:
            out["dateModified"] = self.date_modified
        return out


@dataclass(frozen=True)
class Quote:
    """Point-in-time price snapshot for one symbol."""

    symbol: str
    date: str
    open: float
    high: float
    low: float
    close: float
    pre_close: float
    change: float
    pct_chg: float
    name: str = ""


@dataclass
class ValuationRow:
    symbol: str
    name: str
    shares: float
    purchase_price: float
    current_price: float
    today_pct: float
    cost: float
    value: float
    profit: float
    return_pct: float


@dataclass
class Valuation:
    """Result of one valuation cycle; totals cover successfully valued rows only."""

    rows: list = field(default_factory=list)
    missing: list = field(default_factory=list)
    total_value: float = 0.0
    total_cost: float = 0.0

    @property
    def total_profit(self) -> float:
        return self.total_value - self.total_cost

    @property
    def total_return_pct(self) -> float:
        return safe_pct(self.total_profit, self.total_cost)

    def add_row(self, row: ValuationRow) -> None:
        self.rows.append(row)
        self.total_value += row.value
        self.total_cost += row.cost

    def summary(self) -> dict:
        return {
            "totalValue": self.total_value,
            "totalCost": self.total_cost,
            "totalProfit": self.total_profit,
            "totalReturnPct": self.total_return_pct,
        }

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame with figures rounded for display."""
        columns = [
            "symbol",
            "name",
            "shares",
            "purchase_price",
            "current_price",
            "today_pct",
            "value",
            "profit",
            "return_pct",
        ]
        if not self.rows:
            return pd.DataFrame(columns=columns)
        df = pd.DataFrame([vars(r) for r in self.rows])[columns]
        return df.round(2)
