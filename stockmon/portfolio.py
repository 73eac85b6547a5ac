"""Portfolio engine: add/remove positions and value them against live quotes."""

import logging
from typing import Callable, Optional

from .models import Position, Quote, Valuation, ValuationRow, safe_pct, utc_timestamp
from .storage import AppState
from .symbols import format_symbol

logger = logging.getLogger(__name__)


def add_position(
    state: AppState, symbol: str, shares: float, price: float, name: str = ""
) -> Position:
    """
    Add shares of a symbol. An existing position is merged with weighted-average
    cost and keeps its place in the list. The portfolio is saved afterwards.
    """
    formatted = format_symbol(symbol)
    position = state.find(formatted)
    if position is not None:
        position.merge(shares, price)
        if name:
            position.name = name
        logger.info(
            "%s: merged %s @ %s, now %s @ %.4f",
            formatted, shares, price, position.shares, position.purchase_price,
        )
    else:
        position = Position(
            symbol=formatted,
            shares=shares,
            purchase_price=price,
            name=name,
            date_added=utc_timestamp(),
        )
        state.positions.append(position)
        logger.info("%s: added %s @ %s", formatted, shares, price)

    state.save_portfolio()
    return position


def remove_position(state: AppState, symbol: str) -> Optional[Position]:
    """Remove a whole position by symbol (or display name). None if nothing matched."""
    formatted = format_symbol(symbol)
    target = state.find(formatted)
    if target is None:
        wanted = symbol.strip()
        target = next((p for p in state.positions if p.name and p.name == wanted), None)
    if target is None:
        logger.info("%s: not in portfolio", formatted)
        return None

    state.positions = [p for p in state.positions if p is not target]
    state.save_portfolio()
    logger.info("%s: removed", target.symbol)
    return target


def value_position(position: Position, quote: Quote) -> ValuationRow:
    cost = position.cost
    value = position.shares * quote.close
    profit = value - cost
    return ValuationRow(
        symbol=position.symbol,
        name=position.name or quote.name,
        shares=position.shares,
        purchase_price=position.purchase_price,
        current_price=quote.close,
        today_pct=quote.pct_chg,
        cost=cost,
        value=value,
        profit=profit,
        return_pct=safe_pct(profit, cost),
    )


def valuate(positions: list, fetch: Callable[[str], Optional[Quote]]) -> Valuation:
    """
    Fetch quotes one symbol at a time and compute per-position and total P/L.
    Positions without a quote are left out of rows and totals and listed in
    Valuation.missing.
    """
    valuation = Valuation()
    for position in positions:
        quote = fetch(position.symbol)
        if quote is None:
            valuation.missing.append(position.symbol)
            continue
        valuation.add_row(value_position(position, quote))
    return valuation
