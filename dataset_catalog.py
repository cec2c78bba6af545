"""
Dataset Catalog

Catalog of every StatsWales dataset the tool knows how to import: which file
it lives in, which parser reads it, and which header text maps to each
logical column. This module is the single source of truth for the file
layouts; the CLI and pipeline.loader look datasets up here by code.

Extra datasets can be described in a YAML or JSON file, read with
load_catalog_file() and laid over the built-in entries with merged_catalog()::

    datasets:
      - code: dwell
        name: Dwellings
        file: hous0501.json
        type: welsh_stats_json
        cols:
          auth_code: Area_Code
          auth_name_eng: Area_ItemName_ENG
          single_measure_code: dwell
          single_measure_name: Dwellings
          year: Year_Code
          value: Data
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from pipeline.errors import InvalidArgumentError
from utils.config import (
    ColumnMapping,
    SourceColumn,
    SourceDataType,
    coerce_column_mapping,
)
from utils.validation import validate_column_mapping

logger = logging.getLogger(__name__)

AREAS_CODE = "areas"

DATASET_CATALOG: dict[str, dict[str, Any]] = {
    "areas": {
        "name": "Areas",
        "file": "areas.csv",
        "type": SourceDataType.AUTHORITY_CODE_CSV,
        "cols": {
            SourceColumn.AUTH_CODE: "Local authority code",
            SourceColumn.AUTH_NAME_ENG: "Name (eng)",
            SourceColumn.AUTH_NAME_CYM: "Name (cym)",
        },
    },

    "popden": {
        "name": "Population density",
        "file": "popu1009.json",
        "type": SourceDataType.WELSH_STATS_JSON,
        "cols": {
            SourceColumn.AUTH_CODE: "Localauthority_Code",
            SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
            SourceColumn.MEASURE_CODE: "Measure_Code",
            SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
            SourceColumn.YEAR: "Year_Code",
            SourceColumn.VALUE: "Data",
        },
    },

    "biz": {
        "name": "Active Businesses",
        "file": "econ0080.json",
        "type": SourceDataType.WELSH_STATS_JSON,
        "cols": {
            SourceColumn.AUTH_CODE: "Area_Code",
            SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
            SourceColumn.MEASURE_CODE: "Variable_Code",
            SourceColumn.MEASURE_NAME: "Variable_ItemName_ENG",
            SourceColumn.YEAR: "Year_Code",
            SourceColumn.VALUE: "Data",
        },
    },

    "aqi": {
        "name": "Air Quality Indicators",
        "file": "envi0201.json",
        "type": SourceDataType.WELSH_STATS_JSON,
        "cols": {
            SourceColumn.AUTH_CODE: "Area_Code",
            SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
            SourceColumn.MEASURE_CODE: "Pollutant_ItemName_ENG",
            SourceColumn.MEASURE_NAME: "Pollutant_ItemName_ENG",
            SourceColumn.YEAR: "Year_Code",
            SourceColumn.VALUE: "Data",
        },
    },

    "trains": {
        "name": "Rail passenger journeys",
        "file": "tran0152.json",
        "type": SourceDataType.WELSH_STATS_JSON,
        "cols": {
            SourceColumn.AUTH_CODE: "LocalAuthority_Code",
            SourceColumn.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
            SourceColumn.SINGLE_MEASURE_CODE: "rail",
            SourceColumn.SINGLE_MEASURE_NAME: "Rail passenger journeys",
            SourceColumn.YEAR: "Year_Code",
            SourceColumn.VALUE: "Data",
        },
    },

    "complete-popden": {
        "name": "Population density (complete)",
        "file": "complete-popu1009-popden.csv",
        "type": SourceDataType.AUTHORITY_BY_YEAR_CSV,
        "cols": {
            SourceColumn.AUTH_CODE: "AuthorityCode",
            SourceColumn.SINGLE_MEASURE_CODE: "dens",
            SourceColumn.SINGLE_MEASURE_NAME: "Population density",
        },
    },

    "complete-pop": {
        "name": "Population (complete)",
        "file": "complete-popu1009-pop.csv",
        "type": SourceDataType.AUTHORITY_BY_YEAR_CSV,
        "cols": {
            SourceColumn.AUTH_CODE: "AuthorityCode",
            SourceColumn.SINGLE_MEASURE_CODE: "pop",
            SourceColumn.SINGLE_MEASURE_NAME: "Population",
        },
    },

    "complete-area": {
        "name": "Land area (complete)",
        "file": "complete-popu1009-area.csv",
        "type": SourceDataType.AUTHORITY_BY_YEAR_CSV,
        "cols": {
            SourceColumn.AUTH_CODE: "AuthorityCode",
            SourceColumn.SINGLE_MEASURE_CODE: "area",
            SourceColumn.SINGLE_MEASURE_NAME: "Land area",
        },
    },
}


# ── External catalog entries ──────────────────────────────────────────────────


class DatasetSource(BaseModel):
    """One dataset entry read from an external catalog file."""
    code: str = Field(..., min_length=1, description="Dataset key used with -d", examples=["dwell"])
    name: str = Field(..., description="Human-readable dataset name", examples=["Dwellings"])
    file: str = Field(..., min_length=1, description="File name inside the data directory", examples=["hous0501.json"])
    type: SourceDataType = Field(..., description="Layout of the file, selects the parser")
    cols: dict[str, str] = Field(..., description="Logical column key -> header text")

    @field_validator("code")
    @classmethod
    def _lower_code(cls, v: str) -> str:
        return v.strip().lower()

    def column_mapping(self) -> ColumnMapping:
        return coerce_column_mapping(self.cols)

    def to_spec(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "type": self.type,
            "cols": self.column_mapping(),
        }


def _read_catalog_document(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def load_catalog_file(path: Path | str) -> dict[str, dict[str, Any]]:
    """
    Read extra dataset entries from a YAML or JSON catalog file.

    The document is either a list of entries or a mapping with a
    ``datasets`` list. Each entry is validated with DatasetSource, and its
    column mapping must name every key its source type needs.

    Args:
        path: Path to a .yaml/.yml or .json file

    Returns:
        Dict mapping dataset code -> spec, in the same shape as DATASET_CATALOG.

    Raises:
        InvalidArgumentError: If the file cannot be parsed or an entry is invalid
        OSError: If the file cannot be read
    """
    path = Path(path)
    try:
        document = _read_catalog_document(path)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise InvalidArgumentError(f"Cannot parse catalog file {path}: {exc}") from exc

    if isinstance(document, dict):
        document = document.get("datasets")
    if not isinstance(document, list):
        raise InvalidArgumentError(f"Catalog file {path} holds no list of datasets")

    entries: dict[str, dict[str, Any]] = {}
    for index, raw in enumerate(document):
        try:
            source = DatasetSource.model_validate(raw)
            cols = source.column_mapping()
        except (ValidationError, ValueError) as exc:
            raise InvalidArgumentError(f"Catalog entry {index} in {path} is invalid: {exc}") from exc
        result = validate_column_mapping(source.type, cols, check_name=source.code)
        if not result.is_valid():
            raise InvalidArgumentError(
                f"Catalog entry {source.code!r} in {path}: {result.error_text()}"
            )
        for issue in result.warnings():
            logger.warning("Catalog file %s: %s", path, issue)
        entries[source.code] = source.to_spec()
    return entries


def merged_catalog(extra: dict[str, dict[str, Any]] | None = None) -> dict[str, dict[str, Any]]:
    """Return a copy of DATASET_CATALOG with *extra* entries added or replaced."""
    catalog = dict(DATASET_CATALOG)
    if extra:
        catalog.update(extra)
    return catalog


# ── Lookup helpers ────────────────────────────────────────────────────────────


def get_dataset_spec(code: str, catalog: dict[str, dict[str, Any]] | None = None):
    """
    Retrieve the complete specification for a dataset.

    Args:
        code: Dataset key (e.g., 'popden', 'Trains'); case-insensitive
        catalog: Catalog to search (default: DATASET_CATALOG)

    Returns:
        Dict with 'name', 'file', 'type', 'cols', or None if not found.
    """
    catalog = DATASET_CATALOG if catalog is None else catalog
    return catalog.get(code.strip().lower())


def list_all_dataset_codes(catalog: dict[str, dict[str, Any]] | None = None):
    """
    Return every importable dataset code, excluding the areas file.

    Returns:
        Sorted list of dataset codes.
    """
    catalog = DATASET_CATALOG if catalog is None else catalog
    return sorted(k for k in catalog if k != AREAS_CODE)


def resolve_datasets(codes: Iterable[str] | None = None,
                     catalog: dict[str, dict[str, Any]] | None = None) -> list[tuple[str, dict[str, Any]]]:
    """
    Turn a list of requested dataset codes into (code, spec) pairs.

    An empty list, or one containing "all", selects every dataset in code
    order; otherwise the datasets come back in the order requested.

    Raises:
        InvalidArgumentError: If a code is not in the catalog
    """
    catalog = DATASET_CATALOG if catalog is None else catalog
    requested = [c.strip().lower() for c in (codes or []) if c.strip()]
    if not requested or "all" in requested:
        return [(code, catalog[code]) for code in list_all_dataset_codes(catalog)]

    resolved = []
    for code in requested:
        spec = get_dataset_spec(code, catalog)
        if spec is None or code == AREAS_CODE:
            raise InvalidArgumentError(f"No dataset matches key: {code}")
        resolved.append((code, spec))
    return resolved


def describe_catalog(catalog: dict[str, dict[str, Any]] | None = None):
    """
    Return a human-readable summary of all datasets in the catalog.

    Returns:
        Formatted string with dataset codes, names, files and column status.
    """
    catalog = DATASET_CATALOG if catalog is None else catalog
    lines = [
        "=" * 80,
        "BETH YW? DATASET CATALOG",
        "=" * 80,
        "",
    ]

    for code in [AREAS_CODE] + list_all_dataset_codes(catalog):
        spec = get_dataset_spec(code, catalog)
        if spec is None:
            continue
        result = validate_column_mapping(spec["type"], spec["cols"], check_name=code)
        status = "ok" if result.is_valid() else f"{len(result.errors())} missing columns"
        lines.append(f"{code:16s} | {spec['name']:32s} | {spec['file']}")
        lines.append(f"                   {SourceDataType(spec['type']).value} ({status})")
        lines.append("")

    return "\n".join(lines)
