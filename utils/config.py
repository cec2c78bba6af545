"""Configuration management utilities for the Beth Yw? statistics tools.

Provides:
- The enumerations that describe an input file (SourceDataType) and the
  logical columns a parser looks for in it (SourceColumn)
- The required column keys for each source type
- AppConfig, populated from environment variables
"""

from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Any
import os as _os


# ── Source description enums ──────────────────────────────────────────────────

class SourceDataType(str, Enum):
    """Physical layout of an input file; selects the parser."""

    AUTHORITY_CODE_CSV = "authority_code_csv"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"
    WELSH_STATS_JSON = "welsh_stats_json"


class SourceColumn(str, Enum):
    """Logical fields a column mapping can name."""

    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


# A column mapping: logical field -> literal header text (or, for the
# SINGLE_MEASURE_* keys, the fixed measure code/label for the whole file).
ColumnMapping = Dict[SourceColumn, str]


# ── Required columns per source type ─────────────────────────────────────────

REQUIRED_COLUMNS: Dict[SourceDataType, FrozenSet[SourceColumn]] = {
    SourceDataType.AUTHORITY_CODE_CSV: frozenset({
        SourceColumn.AUTH_CODE,
        SourceColumn.AUTH_NAME_ENG,
        SourceColumn.AUTH_NAME_CYM,
    }),
    SourceDataType.AUTHORITY_BY_YEAR_CSV: frozenset({
        SourceColumn.AUTH_CODE,
        SourceColumn.SINGLE_MEASURE_CODE,
        SourceColumn.SINGLE_MEASURE_NAME,
    }),
    SourceDataType.WELSH_STATS_JSON: frozenset({
        SourceColumn.AUTH_CODE,
        SourceColumn.AUTH_NAME_ENG,
        SourceColumn.YEAR,
        SourceColumn.VALUE,
    }),
}

# JSON files name their measure per record, or carry one fixed measure.
MEASURE_PER_RECORD = frozenset({SourceColumn.MEASURE_CODE, SourceColumn.MEASURE_NAME})
MEASURE_PER_FILE = frozenset({SourceColumn.SINGLE_MEASURE_CODE,
                              SourceColumn.SINGLE_MEASURE_NAME})


def coerce_column_mapping(raw: Dict[Any, str]) -> ColumnMapping:
    """Convert a mapping keyed by strings (e.g. from YAML) to SourceColumn keys.

    Keys may be given as enum values ("auth_code") or names ("AUTH_CODE").

    Raises:
        ValueError: If a key does not name a SourceColumn
    """
    cols: ColumnMapping = {}
    for key, header in raw.items():
        if isinstance(key, SourceColumn):
            cols[key] = header
            continue
        text = str(key).strip()
        try:
            cols[SourceColumn(text.lower())] = header
        except ValueError:
            try:
                cols[SourceColumn[text.upper()]] = header
            except KeyError:
                raise ValueError(f"Unknown column key: {key}") from None
    return cols


# ── Application config ───────────────────────────────────────────────────────

class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have defaults so the tool works without any configuration;
    command-line flags override them.

    Environment variables:
        BETHYW_DATA_DIR: Directory holding the dataset files (default: datasets)
        BETHYW_LOG_LEVEL: Logging level name (default: WARNING)
        BETHYW_CATALOG: Optional YAML/JSON file with extra dataset entries
        BETHYW_JSON_INDENT: Indent for --json output; empty for compact
    """

    def __init__(self, data_dir: Path = Path("datasets"), log_level: str = "WARNING",
                 catalog_path: Optional[Path] = None,
                 json_indent: Optional[int] = None) -> None:
        self.data_dir = data_dir
        self.log_level = log_level.upper()
        self.catalog_path = catalog_path
        self.json_indent = json_indent

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        raw_catalog = _os.getenv("BETHYW_CATALOG", "")
        raw_indent = _os.getenv("BETHYW_JSON_INDENT", "")
        return cls(
            data_dir=Path(_os.getenv("BETHYW_DATA_DIR", "datasets")),
            log_level=_os.getenv("BETHYW_LOG_LEVEL", "WARNING"),
            catalog_path=Path(raw_catalog) if raw_catalog else None,
            json_indent=int(raw_indent) if raw_indent.strip() else None,
        )
