"""
Crypto Tracker - Main Entry Point

Usage:
    python main.py --env dev          # Development mode
    python main.py --env prod         # Production mode
    python main.py --no-dashboard     # Print one refresh and exit
"""

from __future__ import annotations
import argparse
import sys
from typing import Optional
from zoneinfo import ZoneInfoNotFoundError

from rich.console import Console
from rich.table import Table

from config.config_manager import ConfigManager
from config.models import AppConfig
from crypto_tracker.application import AppState, RefreshPipeline, SnapshotChannel
from crypto_tracker.domain.exceptions import ConfigurationError, PriceFetchError
from crypto_tracker.domain.services.portfolio_metrics import (
    compute_allocations,
    compute_totals,
    portfolio_rows,
)
from crypto_tracker.infrastructure.adapters import CoinMarketCapClient
from crypto_tracker.infrastructure.stores import PortfolioStore
from crypto_tracker.tui import CryptoTrackerApp
from crypto_tracker.tui.formatters import format_pnl, format_usd
from crypto_tracker.tui.viewmodels import (
    PORTFOLIO_COLUMNS,
    WATCHLIST_COLUMNS,
    PortfolioViewModel,
    WatchlistViewModel,
)
from crypto_tracker.utils import get_logger, set_log_timezone, setup_category_logging, shutdown_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Crypto Tracker - terminal watchlist and portfolio dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --env dev                        # Dashboard with dev config
  python main.py --portfolio ~/my_portfolio.yaml  # Use another portfolio file
  python main.py --no-dashboard                   # Print prices once and exit
        """
    )

    parser.add_argument(
        "--env",
        type=str,
        default="dev",
        choices=["dev", "prod"],
        help="Environment to run in (default: dev)"
    )

    parser.add_argument(
        "--config-dir",
        type=str,
        default="config",
        help="Directory holding base.yaml and environment overrides (default: config)"
    )

    parser.add_argument(
        "--portfolio",
        type=str,
        help="Path to the portfolio file (overrides portfolio.file from config)"
    )

    parser.add_argument(
        "--no-dashboard",
        action="store_true",
        help="Disable terminal dashboard (headless mode: print one refresh and exit)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level for all categories)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set log level (default: from config, ignored if --verbose is set)"
    )

    return parser.parse_args(argv)


def build_table(title: str, columns, rows) -> Table:
    """Render view model rows as a rich table."""
    table = Table(title=title)
    for label, _ in columns:
        table.add_column(label)
    for _, values in rows:
        table.add_row(*values)
    return table


def print_once(state: AppState, console: Console) -> int:
    """Headless mode: one synchronous refresh printed to the console."""
    state.manual_refresh()
    if state.last_error:
        console.print(f"[red]Error: {state.last_error}[/]")
        return 1

    watchlist_vm = WatchlistViewModel()
    watchlist_vm.compute_updates(state.watchlist_rows())
    console.print(build_table("Watchlist", WATCHLIST_COLUMNS, watchlist_vm.get_cached_rows()))

    portfolio_vm = PortfolioViewModel()
    portfolio_vm.compute_updates(state.portfolio_rows())
    console.print(build_table("Portfolio", PORTFOLIO_COLUMNS, portfolio_vm.get_cached_rows()))

    rows = portfolio_rows(state.config, state.snapshot)
    totals = compute_totals(rows)
    console.print(
        f"Net Worth: [bold cyan]{format_usd(totals.total_value)}[/]  "
        f"P/L: {format_pnl(totals.total_pl)} ({totals.total_pl_pct:+.2f}%)  "
        f"24h: {format_pnl(totals.change_24h)} ({totals.change_24h_pct:+.2f}%)"
    )
    for allocation in compute_allocations(rows):
        console.print(f"  {allocation.symbol:<6} {allocation.percent:5.1f}%  {format_usd(allocation.value)}")
    return 0


def run(args: argparse.Namespace, config: AppConfig) -> int:
    """Wire up components and run the dashboard (or the headless print)."""
    portfolio_file = args.portfolio or config.portfolio.file
    store = PortfolioStore(portfolio_file)
    portfolio = store.load()

    if not config.api.key:
        logger.warning("No API key configured (set api.key in secrets.yaml or CMC_API_KEY)")

    client = CoinMarketCapClient(timeout_sec=config.api.timeout_sec)
    channel = SnapshotChannel()
    pipeline = RefreshPipeline(
        provider=client,
        api_key=config.api.key,
        token_names=portfolio.names(),
        channel=channel,
        interval_sec=config.refresh_interval_sec,
    )
    state = AppState(
        config=portfolio,
        provider=client,
        api_key=config.api.key,
        store=store,
        pipeline=pipeline,
    )

    if args.no_dashboard:
        return print_once(state, Console())

    try:
        state.set_fear_greed(client.fetch_fear_greed(config.api.key, config.fear_and_greed_limit))
    except PriceFetchError as e:
        logger.error(f"Fear & Greed fetch failed: {e}")
        state.last_error = str(e)

    app = CryptoTrackerApp(
        state=state,
        channel=channel,
        env=args.env,
        poll_interval_ms=config.dashboard.poll_interval_ms,
    )
    pipeline.start()
    try:
        app.run()
    finally:
        pipeline.stop()
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = ConfigManager(config_dir=args.config_dir, env=args.env).load()
        set_log_timezone(config.logging.timezone)
    except (ConfigurationError, ZoneInfoNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_category_logging(
        env=args.env,
        log_dir=config.logging.dir,
        level=args.log_level or config.logging.level,
        console=args.no_dashboard,  # Console output when no dashboard
        verbose=args.verbose,
    )
    logger.info(f"Starting Crypto Tracker (env={args.env})")

    try:
        exit_code = run(args, config)
    except ConfigurationError as e:
        logger.error(f"Startup failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    except KeyboardInterrupt:
        print("Shutdown requested")
        exit_code = 0
    finally:
        logger.info("Crypto Tracker stopped")
        shutdown_logging()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
