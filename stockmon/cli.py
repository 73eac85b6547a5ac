# PYTHON_ARGCOMPLETE_OK
"""Command-line interface for managing positions and watching portfolio P/L."""

import argparse

import argcomplete
from rich.console import Console

from .config import Config, setup_logging
from .display import print_plain, render_valuation
from .monitor import Monitor
from .portfolio import add_position, remove_position, valuate
from .quotes import QuoteClient
from .storage import AppState
from .symbols import format_symbol


def positive_number(raw: str):
    """argparse type: a positive number, kept as int when it has no fraction."""
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from None
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {raw!r}")
    return int(value) if value.is_integer() else value


def build_cfg_from_args(args) -> Config:
    # Start from environment/.env defaults.
    cfg = Config.from_env()

    # Override defaults with CLI flags if they were provided.
    if getattr(args, "data_dir", None):
        cfg.data_dir = args.data_dir
    if getattr(args, "interval", None):
        cfg.monitor_interval = float(args.interval)

    return cfg


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stockmon", description="Track A-share holdings and live profit/loss"
    )
    p.add_argument("--data-dir", help="Directory holding config.json and portfolio.json")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Config command: store the Tushare API token.
    config = sub.add_parser("config", help="Configure API token")
    config.add_argument("--key", "-k", required=True, help="Your Tushare API token")

    # Add command: create a position or merge into an existing one.
    add = sub.add_parser("add", help="Add a new stock position")
    add.add_argument(
        "--symbol", "-s", required=True,
        help="Stock symbol (e.g., 600000 for Shanghai, 000001 for Shenzhen)",
    )
    add.add_argument("--shares", "-n", type=positive_number, required=True, help="Number of shares")
    add.add_argument("--price", "-p", type=positive_number, required=True, help="Purchase price per share")
    add.add_argument("--name", "-t", default="", help="Stock name (optional)")

    # Remove command: drop a whole position.
    remove = sub.add_parser("remove", help="Remove a stock position")
    remove.add_argument("--symbol", "-s", required=True, help="Stock symbol (or name) to remove")

    # View command: one valuation pass.
    view = sub.add_parser("view", help="View portfolio")
    view.add_argument("--plain", action="store_true", help="Print an uncoloured table")

    # Monitor command: refresh on a timer until Ctrl+C.
    monitor = sub.add_parser("monitor", help="Start monitoring portfolio")
    monitor.add_argument(
        "--interval", "-i", type=positive_number, help="Update interval in seconds (default 20)"
    )

    # Completion command: print the shell hook for tab completion.
    completion = sub.add_parser("completion", help="Print a shell completion script")
    completion.add_argument(
        "--shell", choices=["bash", "zsh", "fish", "tcsh"], default="bash"
    )

    return p


def main(argv=None) -> int:
    # Enable console logging early.
    setup_logging()
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    if args.cmd == "completion":
        print(argcomplete.shellcode(["stockmon"], shell=args.shell))
        return 0
    cfg = build_cfg_from_args(args)
    state = AppState.load(cfg)
    console = Console()

    if args.cmd == "config":
        state.credentials.api_key = args.key
        state.save_credentials()
        print("API token saved successfully")
    elif args.cmd == "add":
        existed = state.find(format_symbol(args.symbol)) is not None
        position = add_position(state, args.symbol, args.shares, args.price, args.name)
        print("Position updated successfully" if existed else "Position added successfully")
        print(
            f"{position.symbol} {position.name}".rstrip()
            + f": {position.shares} shares @ {position.purchase_price:.2f}"
        )
    elif args.cmd == "remove":
        removed = remove_position(state, args.symbol)
        if removed is None:
            print(f"Position {args.symbol} not found")
        else:
            print("Position removed successfully")
    elif args.cmd == "view":
        client = QuoteClient(cfg, state.credentials.api_key)
        valuation = valuate(state.positions, client)
        if args.plain:
            print_plain(valuation)
        else:
            render_valuation(valuation, console)
    elif args.cmd == "monitor":
        client = QuoteClient(cfg, state.credentials.api_key)
        Monitor(
            state,
            client,
            console=console,
            interval=cfg.monitor_interval,
            min_spacing=cfg.min_render_spacing,
        ).run()

    return 0
