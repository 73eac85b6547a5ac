"""Stock code helpers (pure + deterministic)."""

from __future__ import annotations

SHANGHAI = "SH"
SHENZHEN = "SZ"

# Alternate exchange spellings seen in other data sources.
EXCHANGE_ALIASES = {"SS": SHANGHAI}


def format_symbol(symbol: str) -> str:
    """
    Return the canonical exchange-qualified code used as the portfolio key.
    Rules:
    - "600000.sh" / "sh.600000" / "600000.SS" -> "600000.SH"
    - bare 6xxxxx -> Shanghai, bare 0xxxxx / 3xxxxx -> Shenzhen
    - anything else is returned unchanged
    """
    symbol = symbol.strip()
    if "." in symbol:
        head, _, tail = symbol.partition(".")
        # Prefix ordering like "sh.600000".
        if head.isalpha() and not tail.isalpha():
            head, tail = tail, head
        exchange = tail.upper()
        return f"{head}.{EXCHANGE_ALIASES.get(exchange, exchange)}"
    if symbol.startswith("6"):
        return f"{symbol}.{SHANGHAI}"
    if symbol.startswith(("0", "3")):
        return f"{symbol}.{SHENZHEN}"
    return symbol


def split_symbol(symbol: str) -> tuple[str, str]:
    """Split a formatted symbol into (code, exchange); exchange may be ''."""
    code, _, exchange = format_symbol(symbol).partition(".")
    return code, exchange
