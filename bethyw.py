"""
Beth Yw? -- import and summarise StatsWales datasets by local authority.

Loads the authority list (areas.csv) and then each requested dataset from
the data directory, filtered by area, measure and year, and prints either an
aligned text report or JSON.

Usage:
    python bethyw.py                               # every dataset, text report
    python bethyw.py -d popden,trains -j           # two datasets as JSON
    python bethyw.py -a W06000011 -m pop -y 2010-2015
    python bethyw.py --list-datasets               # show the catalog
    python bethyw.py --catalog extra.yaml -d dwell # add datasets from a file
    python bethyw.py --summary-json run.json       # per-file import summary

Exit codes:
    0  success, including runs where some dataset files failed to import
    1  invalid -d/-y value or an unusable --catalog file
    2  command-line usage error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from dataset_catalog import (
    describe_catalog,
    load_catalog_file,
    merged_catalog,
    resolve_datasets,
)
from pipeline.areas import Areas
from pipeline.errors import InvalidArgumentError
from pipeline.filters import AreaFilter, Filters, MeasureFilter, YearFilter
from pipeline.loader import load_areas, load_datasets
from pipeline.logging import ImportLogger
from utils.config import AppConfig
from utils.formatting import format_areas
from utils.patterns import SINGLE_YEAR, YEAR_RANGE

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ── Argument parsing ──────────────────────────────────────────────────────────


def split_list_arg(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated, comma-separated option values.

    Returns an empty list when nothing was given or when any entry is "all"
    (case-insensitive), meaning "no restriction".

    Examples:
        ["popden,biz", "aqi"] -> ["popden", "biz", "aqi"]
        ["pop", "ALL"] -> []
    """
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    if any(item.lower() == "all" for item in items):
        return []
    return items


def parse_datasets_arg(values: Iterable[str] | None,
                       catalog: dict[str, dict[str, Any]] | None = None):
    """(code, spec) pairs for -d; every dataset when none or "all" given."""
    return resolve_datasets(split_list_arg(values), catalog)


def parse_areas_arg(values: Iterable[str] | None) -> AreaFilter:
    return AreaFilter.of(split_list_arg(values))


def parse_measures_arg(values: Iterable[str] | None) -> MeasureFilter:
    return MeasureFilter.of(split_list_arg(values))


def parse_years_arg(value: str | None) -> YearFilter:
    """Parse -y as YYYY, YYYY-ZZZZ, 0 or 0-0 (the last two mean all years).

    Raises:
        InvalidArgumentError: For any other value
    """
    if value is None:
        return YearFilter()
    text = value.strip()
    if text in ("0", "0-0"):
        return YearFilter()
    m = SINGLE_YEAR.match(text)
    if m:
        year = int(m.group(1))
        return YearFilter(year, year)
    m = YEAR_RANGE.match(text)
    if m:
        return YearFilter(int(m.group(1)), int(m.group(2)))
    raise InvalidArgumentError("Invalid input for years argument")


def _parse_args(argv: list[str] | None, config: AppConfig) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="bethyw",
        description="Import StatsWales datasets and summarise them by local authority.",
    )
    p.add_argument(
        "--dir", default=str(config.data_dir),
        help=f"Directory holding the dataset files (default: {config.data_dir})",
    )
    p.add_argument(
        "-d", "--datasets", action="append", default=None, metavar="CODES",
        help="Comma-separated dataset codes to import, or 'all' (default: all)",
    )
    p.add_argument(
        "-a", "--areas", action="append", default=None, metavar="AREAS",
        help="Comma-separated authority codes or name fragments, or 'all'",
    )
    p.add_argument(
        "-m", "--measures", action="append", default=None, metavar="MEASURES",
        help="Comma-separated measure codes, or 'all'",
    )
    p.add_argument(
        "-y", "--years", default=None, metavar="YEARS",
        help="Year (YYYY) or inclusive range (YYYY-ZZZZ); 0 for all years",
    )
    p.add_argument(
        "-j", "--json", action="store_true",
        help="Print the data as JSON instead of tables",
    )
    p.add_argument(
        "--catalog", default=str(config.catalog_path) if config.catalog_path else None,
        metavar="FILE",
        help="YAML or JSON file with extra dataset entries",
    )
    p.add_argument(
        "--list-datasets", action="store_true",
        help="List the known datasets and exit",
    )
    p.add_argument(
        "--log-level", default=config.log_level, type=str.upper, choices=LOG_LEVELS,
        help=f"Logging level for diagnostics on stderr (default: {config.log_level})",
    )
    p.add_argument(
        "--summary-json", default=None, metavar="PATH",
        help="Write a JSON summary of the per-file imports to PATH",
    )
    return p.parse_args(argv)


# ── Main ─────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    config = AppConfig.from_env()
    args = _parse_args(argv, config)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(message)s",
        force=True,
    )

    catalog = merged_catalog()
    if args.catalog:
        try:
            catalog = merged_catalog(load_catalog_file(args.catalog))
        except (InvalidArgumentError, OSError) as exc:
            logger.error("Cannot use catalog file: %s", exc)
            return 1

    if args.list_datasets:
        print(describe_catalog(catalog))
        return 0

    try:
        datasets = parse_datasets_arg(args.datasets, catalog)
        filters = Filters(
            areas=parse_areas_arg(args.areas),
            measures=parse_measures_arg(args.measures),
            years=parse_years_arg(args.years),
        )
    except InvalidArgumentError as exc:
        logger.error("%s", exc)
        return 1

    data_dir = Path(args.dir)
    import_logger = ImportLogger()
    import_logger.args_dict = {
        k: v for k, v in vars(args).items()
        if v is not None and v is not False
    }

    areas = Areas()
    load_areas(areas, data_dir, filters.areas, import_logger, catalog)
    load_datasets(areas, data_dir, datasets, filters, import_logger)

    if args.json:
        print(areas.to_json(indent=config.json_indent))
    else:
        sys.stdout.write(format_areas(areas))

    if args.summary_json:
        path = import_logger.write_summary(args.summary_json)
        logger.info("Import summary written to %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
