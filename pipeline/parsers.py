"""
Format parsers -- turn one input stream into Area/Measure writes.

Three layouts are supported, one function each:

  - parse_authority_code_csv: ``code,English name,Welsh name`` rows that
    create Areas.
  - parse_authority_by_year_csv: one fixed measure per file, one column per
    year, one row per authority. Only adds values to Areas that already exist.
  - parse_welsh_stats_json: a StatsWales-style ``{"value": [record, ...]}``
    document, one value per record.

Each parser validates the header (or the column mapping), extracts a row or
record into an AreaDelta, applies the filters and only then merges the delta
into the registry. A row is therefore either applied completely or not at
all; a fatal error part-way through a file leaves earlier rows merged.

All fatal problems raise an ImportFileError subclass; row-level drops are
counted on the returned ParseStats and logged at DEBUG.
"""

from __future__ import annotations

import csv
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, TextIO

from pipeline.area import AreaDelta
from pipeline.errors import MalformedFileError, NotEnoughColumnsError
from pipeline.filters import NO_FILTERS, Filters
from utils.config import (
    MEASURE_PER_RECORD,
    ColumnMapping,
    SourceColumn,
    SourceDataType,
)
from utils.strings import parse_optional_value, parse_value, parse_year, strip_bom
from utils.validation import missing_columns

if TYPE_CHECKING:
    from pipeline.areas import Areas

logger = logging.getLogger(__name__)


# ── Skip categories ───────────────────────────────────────────────────────────
#   year_filter     : year outside the year range
#   measure_filter  : record's measure not in the measures filter
#   area_filter     : area fails the area filter
#   unknown_area    : by-year row for an authority that was never created
#   measure_skip    : whole by-year file skipped by the measure pre-check

SKIP_CATEGORIES = (
    "year_filter",
    "measure_filter",
    "area_filter",
    "unknown_area",
    "measure_skip",
)


@dataclass
class ParseStats:
    """What one parser call merged and dropped."""

    rows_merged: int = 0
    values_merged: int = 0
    file_skipped: bool = False
    skips: Counter = field(default_factory=Counter)

    def skip(self, category: str, n: int = 1) -> None:
        self.skips[category] += n

    def merged(self, delta: AreaDelta) -> None:
        self.rows_merged += 1
        self.values_merged += delta.value_count()


def _require(source_type: SourceDataType, cols: ColumnMapping) -> None:
    missing = missing_columns(source_type, cols)
    if missing:
        raise NotEnoughColumnsError(missing)


def _rows(stream: TextIO) -> Iterable[list[str]]:
    """csv rows with blank lines removed.

    Raises:
        MalformedFileError: If the stream cannot be decoded or is not CSV
    """
    try:
        for row in csv.reader(stream):
            if not row or all(not cell.strip() for cell in row):
                continue
            yield row
    except (csv.Error, UnicodeDecodeError) as exc:
        raise MalformedFileError(f"Unreadable CSV: {exc}") from exc


def _read_header(rows) -> list[str]:
    try:
        header = next(rows)
    except StopIteration:
        raise MalformedFileError("File is empty, expected a header row") from None
    header = list(header)
    header[0] = strip_bom(header[0])
    return header


# ── Authority-Code CSV ───────────────────────────────────────────────────────


def parse_authority_code_csv(
    stream: TextIO,
    cols: ColumnMapping,
    areas: Areas,
    filters: Filters = NO_FILTERS,
) -> ParseStats:
    """Create one Area per ``code,eng,cym`` row.

    Raises:
        NotEnoughColumnsError: If the mapping lacks a code or name header
        MalformedFileError: If the header differs from the mapping, or a
            row has fewer than three fields
    """
    _require(SourceDataType.AUTHORITY_CODE_CSV, cols)
    expected = [
        cols[SourceColumn.AUTH_CODE],
        cols[SourceColumn.AUTH_NAME_ENG],
        cols[SourceColumn.AUTH_NAME_CYM],
    ]
    stats = ParseStats()
    rows = iter(_rows(stream))
    header = _read_header(rows)
    if header != expected:
        raise MalformedFileError(
            f"Header {header!r} does not match expected columns {expected!r}"
        )

    for line_no, row in enumerate(rows, start=2):
        if len(row) < 3:
            raise MalformedFileError(f"Row {line_no} has {len(row)} fields, expected 3")
        code, name_eng, name_cym = row[0], row[1], row[2]
        delta = AreaDelta(code, names={"eng": name_eng, "cym": name_cym})
        if not filters.area_matches(code, delta.names):
            logger.debug("  area %s dropped by area filter", code)
            stats.skip("area_filter")
            continue
        areas.apply(delta)
        stats.merged(delta)
    return stats


# ── Authority-by-Year CSV ────────────────────────────────────────────────────


def parse_authority_by_year_csv(
    stream: TextIO,
    cols: ColumnMapping,
    areas: Areas,
    filters: Filters = NO_FILTERS,
) -> ParseStats:
    """Add one fixed measure's yearly values to existing Areas.

    Rows for authorities not yet in the registry are skipped, as are cells
    left blank for a year.

    Raises:
        NotEnoughColumnsError: If the mapping lacks the code header or the
            single measure code/name
        MalformedFileError: If the first header cell is not the code header,
            a year header is not a year, or a value is not numeric
    """
    _require(SourceDataType.AUTHORITY_BY_YEAR_CSV, cols)
    measure_code = cols[SourceColumn.SINGLE_MEASURE_CODE].lower()
    measure_label = cols[SourceColumn.SINGLE_MEASURE_NAME]
    stats = ParseStats()

    if not filters.measures.matches(measure_code):
        logger.info("Skipping file for measure %s: not in measures filter", measure_code)
        stats.file_skipped = True
        stats.skip("measure_skip")
        return stats

    rows = iter(_rows(stream))
    header = _read_header(rows)
    if header[0] != cols[SourceColumn.AUTH_CODE]:
        raise MalformedFileError(
            f"First column {header[0]!r} is not {cols[SourceColumn.AUTH_CODE]!r}"
        )

    retained: list[tuple[int, int]] = []  # (column index, year)
    for idx, cell in enumerate(header[1:], start=1):
        try:
            year = parse_year(cell)
        except ValueError:
            raise MalformedFileError(f"Column header {cell!r} is not a year") from None
        if filters.years.matches(year):
            retained.append((idx, year))
        else:
            stats.skip("year_filter")

    for line_no, row in enumerate(rows, start=2):
        code = row[0]
        area = areas.get(code)
        if area is None:
            logger.debug("  row %d: no area %s, skipped", line_no, code)
            stats.skip("unknown_area")
            continue
        if not filters.area_matches(code, area.names):
            logger.debug("  row %d: area %s dropped by area filter", line_no, code)
            stats.skip("area_filter")
            continue

        delta = AreaDelta(code)
        for idx, year in retained:
            if idx >= len(row):
                continue
            try:
                value = parse_optional_value(row[idx])
            except ValueError:
                raise MalformedFileError(
                    f"Row {line_no}: value {row[idx]!r} for {year} is not a number"
                ) from None
            if value is None:
                continue
            delta.add_value(measure_code, measure_label, year, value)

        if delta.measures:
            areas.apply(delta)
            stats.merged(delta)
    return stats


# ── Tabular JSON ─────────────────────────────────────────────────────────────


def _field(record: dict, header: str, index: int) -> Any:
    try:
        return record[header]
    except KeyError:
        raise MalformedFileError(f"Record {index} has no field {header!r}") from None


def parse_welsh_stats_json(
    stream: TextIO,
    cols: ColumnMapping,
    areas: Areas,
    filters: Filters = NO_FILTERS,
) -> ParseStats:
    """Merge every record of a ``{"value": [...]}`` document.

    The measure comes from the MEASURE_CODE/MEASURE_NAME fields of each
    record when the mapping names them, otherwise from the mapping's
    SINGLE_MEASURE_CODE/SINGLE_MEASURE_NAME.

    Raises:
        NotEnoughColumnsError: If the mapping lacks required keys
        MalformedFileError: If the document is not JSON, has no "value"
            list, or a record is missing a field or holds a bad year/value
    """
    _require(SourceDataType.WELSH_STATS_JSON, cols)
    per_record = MEASURE_PER_RECORD <= set(cols)

    try:
        document = json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedFileError(f"Invalid JSON: {exc}") from exc
    records = document.get("value") if isinstance(document, dict) else None
    if not isinstance(records, list):
        raise MalformedFileError('JSON document has no "value" array')

    stats = ParseStats()
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise MalformedFileError(f"Record {index} is not an object")
        code = str(_field(record, cols[SourceColumn.AUTH_CODE], index))
        name_eng = str(_field(record, cols[SourceColumn.AUTH_NAME_ENG], index))
        if per_record:
            measure_code = str(_field(record, cols[SourceColumn.MEASURE_CODE], index))
            measure_label = str(_field(record, cols[SourceColumn.MEASURE_NAME], index))
        else:
            measure_code = cols[SourceColumn.SINGLE_MEASURE_CODE]
            measure_label = cols[SourceColumn.SINGLE_MEASURE_NAME]
        measure_code = measure_code.lower()

        raw_year = _field(record, cols[SourceColumn.YEAR], index)
        raw_value = _field(record, cols[SourceColumn.VALUE], index)
        try:
            year = parse_year(raw_year)
        except ValueError:
            raise MalformedFileError(f"Record {index}: invalid year {raw_year!r}") from None
        try:
            value = parse_value(raw_value)
        except ValueError:
            raise MalformedFileError(f"Record {index}: invalid value {raw_value!r}") from None

        if not filters.years.matches(year):
            stats.skip("year_filter")
            continue
        if not filters.measures.matches(measure_code):
            stats.skip("measure_filter")
            continue

        existing = areas.get(code)
        names = existing.names if existing is not None else {"eng": name_eng}
        if not filters.area_matches(code, names):
            logger.debug("  record %d: area %s dropped by area filter", index, code)
            stats.skip("area_filter")
            continue
        delta = AreaDelta(code)
        if existing is None:
            delta.names["eng"] = name_eng
        delta.add_value(measure_code, measure_label, year, value)
        areas.apply(delta)
        stats.merged(delta)
    return stats


PARSERS = {
    SourceDataType.AUTHORITY_CODE_CSV: parse_authority_code_csv,
    SourceDataType.AUTHORITY_BY_YEAR_CSV: parse_authority_by_year_csv,
    SourceDataType.WELSH_STATS_JSON: parse_welsh_stats_json,
}
