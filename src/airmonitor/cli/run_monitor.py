"""Load, transform and export monitoring data from the command line.

This module contains the actual runner, separated from argument parsing.

Usage::

    airmonitor latest --provider wrcc --trim America/Los_Angeles
    airmonitor annual --year 2023 --select 060670010_01 --format csv
    airmonitor custom --base-name my_data --base-url ./archive --filter stateCode=CA
"""

import sys
import json
import asyncio
import logging
import argparse
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any, Sequence

from airmonitor.contracts import ContractViolation
from airmonitor.exceptions import MonitorError
from airmonitor.logging_config import configure_logging
from airmonitor.monitor import Monitor
from airmonitor.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)

DATASETS = ("latest", "daily", "annual", "custom")
FORMATS = ("geojson", "csv")


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def parse_filter(text: str) -> tuple[str, str]:
    """Split ``COLUMN=VALUE`` at the first '='."""
    column, sep, value = text.partition("=")
    if not sep or not column.strip():
        raise ValueError(f"Filter must look like COLUMN=VALUE, got {text!r}")
    return column.strip(), value.strip()


async def load_monitor(monitor: Monitor, dataset: str, options: Dict[str, Any], fetcher=None) -> Monitor:
    """Dispatch to the loader named by ``dataset``."""
    if dataset == "latest":
        return await monitor.load_latest(fetcher=fetcher)
    if dataset == "daily":
        return await monitor.load_daily(fetcher=fetcher)
    if dataset == "annual":
        if options.get("year") is None:
            raise ValueError("The annual dataset requires --year")
        return await monitor.load_annual(options["year"], fetcher=fetcher)
    if dataset == "custom":
        if not options.get("base_name") or not options.get("base_url"):
            raise ValueError("The custom dataset requires --base-name and --base-url")
        return await monitor.load_custom(
            options["base_name"],
            options["base_url"],
            use_all_columns=not options.get("core_columns", False),
            fetcher=fetcher,
        )
    raise ValueError(f"Unknown dataset '{dataset}'. Use one of {DATASETS}")


def render(monitor: Monitor, output_format: str) -> str:
    """GeoJSON FeatureCollection or current-status CSV as text."""
    if output_format == "geojson":
        return json.dumps(monitor.create_geojson(), indent=2)
    if output_format == "csv":
        return monitor.get_current_status().to_csv(
            index=False, date_format="%Y-%m-%d %H:%M:%S%z",
        )
    raise ValueError(f"Unknown output format '{output_format}'. Use one of {FORMATS}")


def run_monitor(
    dataset: str,
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    options: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
    fetcher=None,
) -> str:
    """Execute one load -> transform -> export run.

    Steps:
    1. Load and resolve configuration (Param < User < CLI)
    2. Load the dataset
    3. Apply select, filters, drop_empty and trim_date, in that order
    4. Render GeoJSON or status CSV, writing it to ``options["output"]``
       when given

    Parameters
    ----------
    dataset : str
        "latest", "daily", "annual" or "custom".
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).
    cli_args : dict, optional
        CLI overrides. Keys: provider, base_url, drop_empty_days, log_level.
    options : dict, optional
        Run options. Keys: year, base_name, core_columns, select (list),
        filters (list of ``(column, value)``), drop_empty (bool),
        trim (timezone), format ("geojson" or "csv"), output (path).
    verbose : bool, optional
        If True, enable DEBUG logging.
    fetcher : CsvFetcher, optional
        Injectable fetcher (for testing).

    Returns
    -------
    str
        The rendered output.
    """
    options = options or {}

    # Load configurations
    param_cfg = ParamConfig()  # Expert defaults

    user_cfg_dict = load_user_config_dict(user_config_path) if user_config_path else {}
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    configure_logging(config.logging.level)

    logger.info("Dataset: %s (provider=%s)", dataset, config.archive.provider)

    monitor = asyncio.run(load_monitor(Monitor(config=config), dataset, options, fetcher=fetcher))

    if options.get("select"):
        monitor = monitor.select(list(options["select"]))
    for column, value in options.get("filters") or []:
        monitor = monitor.filter_by_value(column, value)
    if options.get("drop_empty"):
        monitor = monitor.drop_empty()
    if options.get("trim"):
        monitor = monitor.trim_date(options["trim"])

    logger.info("Result: %d series x %d hours", monitor.count(), len(monitor.data))

    text = render(monitor, options.get("format", "geojson"))

    output = options.get("output")
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info("Wrote %s", output)
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airmonitor",
        description="Load hourly air-quality monitoring data and export its current status",
    )
    parser.add_argument("dataset", choices=DATASETS, help="Which archive to load")
    parser.add_argument("--config", help="Path to user config file (Python file with CONFIG dict)")
    parser.add_argument("--provider", choices=["airnow", "airsis", "wrcc"], help="Override data provider")
    parser.add_argument("--base-url", help="Override archive root URL or directory")
    parser.add_argument("--year", type=int, help="Year for the annual dataset")
    parser.add_argument("--base-name", help="File prefix for the custom dataset")
    parser.add_argument("--core-columns", action="store_true", help="Custom dataset: keep only core metadata columns")
    parser.add_argument("--select", nargs="+", metavar="ID", help="deviceDeploymentIDs to keep, in order")
    parser.add_argument("--filter", action="append", default=[], metavar="COL=VAL", help="Keep series whose metadata COL equals VAL")
    parser.add_argument("--drop-empty", action="store_true", help="Drop series without valid values")
    parser.add_argument("--trim", metavar="TZ", help="Trim to whole local days in timezone TZ")
    parser.add_argument("--drop-empty-days", action="store_true", default=None, help="With --trim, also drop all-missing edge days")
    parser.add_argument("--format", choices=FORMATS, default="geojson", help="Output format")
    parser.add_argument("-o", "--output", help="Write output to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        filters = [parse_filter(f) for f in args.filter]
    except ValueError as exc:
        parser.error(str(exc))

    cli_args = {
        "provider": args.provider,
        # custom takes its base URL as a run option, not an archive override
        "base_url": args.base_url if args.dataset != "custom" else None,
        "drop_empty_days": args.drop_empty_days,
    }
    options = {
        "year": args.year,
        "base_name": args.base_name,
        "base_url": args.base_url,
        "core_columns": args.core_columns,
        "select": args.select,
        "filters": filters,
        "drop_empty": args.drop_empty,
        "trim": args.trim,
        "format": args.format,
        "output": args.output,
    }

    try:
        text = run_monitor(args.dataset, args.config, cli_args, options, verbose=args.verbose)
    except (MonitorError, ContractViolation, ValueError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1

    if not args.output:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
