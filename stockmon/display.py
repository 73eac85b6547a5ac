"""Terminal rendering of a valuation: rich table, summary panel, plain DataFrame."""

from __future__ import annotations

import math

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Valuation

# Gains are green and losses red across every figure.
GAIN_STYLE = "green"
LOSS_STYLE = "red"
NEUTRAL_STYLE = "dim"


def fmt_number(value: float, suffix: str = "", prefix: str = "") -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{prefix}{value:,.2f}{suffix}"


def fmt_shares(shares: float) -> str:
    if float(shares).is_integer():
        return f"{shares:,.0f}"
    return f"{shares:,.2f}"


def signed_text(value: float, suffix: str = "", prefix: str = "") -> Text:
    """Number rounded to 2dp and coloured by sign."""
    label = fmt_number(value, suffix=suffix, prefix=prefix)
    if value is None or math.isnan(value):
        return Text(label, style=NEUTRAL_STYLE)
    return Text(label, style=GAIN_STYLE if value >= 0 else LOSS_STYLE)


def delta_arrow(current: float, previous: float | None) -> Text:
    """Direction of the total return since the previous refresh."""
    if previous is None or math.isnan(current) or math.isnan(previous):
        return Text("")
    delta = current - previous
    if round(delta, 2) > 0:
        return Text(f" ▲ {delta:+.2f}", style=GAIN_STYLE)
    if round(delta, 2) < 0:
        return Text(f" ▼ {delta:+.2f}", style=LOSS_STYLE)
    return Text(" =", style=NEUTRAL_STYLE)


def build_table(valuation: Valuation) -> Table:
    table = Table(box=ROUNDED, show_footer=True)
    table.add_column("Symbol", footer="Total", justify="left")
    table.add_column("Name", justify="left")
    table.add_column("Shares", justify="right")
    table.add_column("Buy Price", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Today%", justify="right")
    table.add_column("Value", footer=fmt_number(valuation.total_value), justify="right")
    table.add_column("Profit", footer=signed_text(valuation.total_profit), justify="right")
    table.add_column(
        "Total%", footer=signed_text(valuation.total_return_pct, suffix="%"), justify="right"
    )

    for row in valuation.rows:
        table.add_row(
            row.symbol,
            row.name,
            fmt_shares(row.shares),
            fmt_number(row.purchase_price),
            fmt_number(row.current_price),
            signed_text(row.today_pct, suffix="%"),
            fmt_number(row.value),
            signed_text(row.profit),
            signed_text(row.return_pct, suffix="%"),
        )
    return table


def build_summary(valuation: Valuation, previous_return: float | None = None) -> Panel:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column(justify="right")
    grid.add_row("Total Value", Text(fmt_number(valuation.total_value, prefix="¥"), style="yellow"))
    grid.add_row("Total Cost", Text(fmt_number(valuation.total_cost, prefix="¥"), style="yellow"))
    grid.add_row("Total Profit", signed_text(valuation.total_profit, prefix="¥"))
    total_return = valuation.total_return_pct
    grid.add_row(
        "Total Return",
        Text.assemble(signed_text(total_return, suffix="%"), delta_arrow(total_return, previous_return)),
    )
    parts = [grid]
    if valuation.missing:
        parts.append(
            Text(
                f"No quote for {len(valuation.missing)} position(s), excluded from totals: "
                + ", ".join(valuation.missing),
                style="yellow",
            )
        )
    return Panel(Group(*parts), title="Portfolio Summary", box=ROUNDED, expand=False)


def render_valuation(
    valuation: Valuation, console: Console, previous_return: float | None = None
) -> None:
    """Print the positions table followed by the summary panel."""
    console.print(build_table(valuation))
    console.print(build_summary(valuation, previous_return))


def print_plain(valuation: Valuation) -> None:
    """Uncoloured rendering for pipes and scripts."""
    df = valuation.to_frame()
    if df.empty:
        print("No positions with quotes.")
    else:
        print(df.to_string(index=False))
    summary = {k: round(v, 2) for k, v in valuation.summary().items()}
    print(" ".join(f"{k}={v}" for k, v in summary.items()))
