"""
Command-line entry point for inspecting indicators over a candle file.

Loads OHLCV candles from CSV, attaches built-in indicators to chart panes
through an IndicatorStore, optionally overrides their calc params, and
prints the last computed rows of every indicator.

Usage:
    python -m src.cli.main candles.csv --indicator MA --indicator VOL@vol_pane
    python -m src.cli.main candles.csv --indicator MA --calc-params MA=10,20 --rows 10
"""

import argparse
import asyncio
import logging
from pathlib import Path
import sys
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.cli.logging_setup import setup_logging
from src.config.parameters import StoreSettings
from src.data_io.loader import load_kline_csv
from src.data_io.source import ListDataSource
from src.indicators.registry.builtins import register_builtins
from src.indicators.registry.store import TemplateRegistry
from src.indicators.template import Indicator
from src.models.enums import BatchPolicy
from src.models.exceptions import IndicatorStoreError
from src.store.indicator_store import IndicatorStore


logger = logging.getLogger(__name__)

DEFAULT_PANE = "candle_pane"


def parse_indicator_target(value: str) -> tuple[str, str]:
    """
    Parse ``NAME`` or ``NAME@PANE`` into (name, pane_id).

    Examples:
        >>> parse_indicator_target("VOL@vol_pane")
        ('VOL', 'vol_pane')
        >>> parse_indicator_target("MA")
        ('MA', 'candle_pane')
    """
    name, _, pane_id = value.partition("@")
    if not name:
        raise argparse.ArgumentTypeError(f"Invalid indicator target: {value!r}")
    return name, pane_id or DEFAULT_PANE


def parse_calc_params(value: str) -> tuple[str, list[float | int]]:
    """
    Parse ``NAME=P1,P2,...`` into (name, params).

    Examples:
        >>> parse_calc_params("MA=10,20")
        ('MA', [10, 20])
        >>> parse_calc_params("X=0.5")
        ('X', [0.5])
    """
    name, sep, raw = value.partition("=")
    if not name or not sep or not raw:
        raise argparse.ArgumentTypeError(f"Expected NAME=P1,P2,... got {value!r}")
    params: list[float | int] = []
    for part in raw.split(","):
        part = part.strip()
        try:
            params.append(float(part) if "." in part else int(part))
        except ValueError as exc:
            raise argparse.ArgumentTypeError(
                f"Invalid calc param {part!r} in {value!r}"
            ) from exc
    return name, params


def configure_parser(parser: argparse.ArgumentParser) -> None:
    """Add the inspect command's arguments to a parser."""
    parser.add_argument("data", type=Path, help="CSV file with OHLCV candles")
    parser.add_argument(
        "--indicator",
        dest="indicators",
        action="append",
        type=parse_indicator_target,
        default=[],
        metavar="NAME[@PANE]",
        help=f"Indicator to attach (pane defaults to {DEFAULT_PANE}); repeatable",
    )
    parser.add_argument(
        "--calc-params",
        action="append",
        type=parse_calc_params,
        default=[],
        metavar="NAME=P1,P2",
        help="Override an indicator's calc params after it is added; repeatable",
    )
    parser.add_argument(
        "--no-stack",
        action="store_true",
        help="Each added indicator replaces the others in its pane",
    )
    parser.add_argument("--rows", type=int, default=5, help="Rows to print per indicator")
    parser.add_argument("--price-precision", type=int, default=None)
    parser.add_argument("--volume-precision", type=int, default=None)
    parser.add_argument(
        "--calc-timeout", type=float, default=None, help="Deadline in seconds per calc"
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop waiting for a recompute batch at the first failure",
    )
    parser.add_argument(
        "--serialize",
        action="store_true",
        help="Serialize overlapping recomputations of the same indicator",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--json-logs", action="store_true")


def build_settings(args: argparse.Namespace) -> StoreSettings:
    """Translate parsed arguments into StoreSettings."""
    return StoreSettings.from_mapping(
        {
            "batch_policy": BatchPolicy.FAIL_FAST if args.fail_fast else None,
            "calc_timeout": args.calc_timeout,
            "serialize_recompute": args.serialize or None,
            "default_price_precision": args.price_precision,
            "default_volume_precision": args.volume_precision,
        }
    )


def render_indicator(pane_id: str, indicator: Indicator, data_list: list, rows: int) -> Table:
    """Build a Rich table with the last rows of an indicator's result."""
    table = Table(title=escape(f"{indicator.short_name} {indicator.calc_params} [{pane_id}]"))
    table.add_column("timestamp", justify="right")
    keys = [plot.key for plot in indicator.plots]
    for key in keys:
        table.add_column(key, justify="right")

    start = max(len(indicator.result) - rows, 0)
    for index in range(start, len(indicator.result)):
        entry = indicator.result[index] or {}
        timestamp = getattr(data_list[index], "timestamp", index) if index < len(data_list) else index
        cells = [str(timestamp)]
        for key in keys:
            value = entry.get(key)
            cells.append("-" if value is None else f"{value:.{indicator.precision}f}")
        table.add_row(*cells)
    return table


async def run_inspect(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    """
    Execute the inspect command.

    Returns:
        Exit code: 0 on success, 1 if any calculation failed.
    """
    console = console or Console()
    settings = build_settings(args)
    data_source = ListDataSource(load_kline_csv(args.data))
    store = IndicatorStore(register_builtins(TemplateRegistry()), data_source, settings)

    ok = True
    for name, pane_id in args.indicators:
        if store.get_instance(pane_id, name) is not None:
            logger.info("Skipping duplicate indicator pane=%s name=%s", pane_id, name)
            continue
        added = await store.add_instance(pane_id, {"name": name}, is_stack=not args.no_stack)
        ok = ok and added

    store.set_series_precision(settings.series_precision())

    for name, params in args.calc_params:
        outcomes = await store.override({"name": name, "calc_params": params})
        ok = ok and all(outcomes)
    await store.coordinator.drain()

    data_list = data_source.get_data_list()
    table = store.get_instance()
    for pane_id, pane_instances in table.items():
        for indicator in pane_instances.values():
            console.print(render_indicator(pane_id, indicator, data_list, args.rows))

    if not ok:
        logger.warning("One or more indicator calculations failed")
    return 0 if ok else 1


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the 'indicator-store' CLI.
    """
    parser = argparse.ArgumentParser(
        description="Compute chart indicators over a candle file and print the results"
    )
    configure_parser(parser)
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file, use_json=args.json_logs)

    try:
        return asyncio.run(run_inspect(args))
    except (IndicatorStoreError, ValidationError, FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
