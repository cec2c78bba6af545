"""
Pipeline package -- Beth Yw? statistics ingestion engine.

Re-exports key entry points so callers can do::

    from pipeline import Areas, Filters, load_areas, load_datasets
"""

from pipeline.errors import (
    BethYwError,
    ImportFileError,
    InvalidArgumentError,
    MalformedFileError,
    NotEnoughColumnsError,
    NotFoundError,
    UnexpectedDataTypeError,
)
from pipeline.measure import Measure
from pipeline.area import Area, AreaDelta
from pipeline.areas import Areas
from pipeline.filters import AreaFilter, Filters, MeasureFilter, YearFilter
from pipeline.loader import load_areas, load_datasets

__all__ = [
    "Area",
    "AreaDelta",
    "AreaFilter",
    "Areas",
    "BethYwError",
    "Filters",
    "ImportFileError",
    "InvalidArgumentError",
    "MalformedFileError",
    "Measure",
    "MeasureFilter",
    "NotEnoughColumnsError",
    "NotFoundError",
    "UnexpectedDataTypeError",
    "YearFilter",
    "load_areas",
    "load_datasets",
]
