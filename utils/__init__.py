"""Shared utilities for the Beth Yw? statistics tools."""

# Pattern definitions
from utils.patterns import (
    LANGUAGE_CODE,
    SINGLE_YEAR,
    YEAR_RANGE,
)

# String utilities
from utils.strings import (
    parse_year,
    parse_value,
    parse_optional_value,
    strip_bom,
    format_number,
)

# Validation utilities
from utils.validation import (
    ValidationIssue,
    ValidationResult,
    missing_columns,
    validate_column_mapping,
    is_valid_language_code,
)

# Output formatting
from utils.formatting import (
    TableFormatter,
    area_heading,
    format_measure,
    format_area,
    format_areas,
)

# Configuration
from utils.config import (
    AppConfig,
    ColumnMapping,
    SourceColumn,
    SourceDataType,
    REQUIRED_COLUMNS,
    coerce_column_mapping,
)

__all__ = [
    # Patterns
    "LANGUAGE_CODE",
    "SINGLE_YEAR",
    "YEAR_RANGE",
    # Strings
    "parse_year",
    "parse_value",
    "parse_optional_value",
    "strip_bom",
    "format_number",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    "missing_columns",
    "validate_column_mapping",
    "is_valid_language_code",
    # Formatting
    "TableFormatter",
    "area_heading",
    "format_measure",
    "format_area",
    "format_areas",
    # Config
    "AppConfig",
    "ColumnMapping",
    "SourceColumn",
    "SourceDataType",
    "REQUIRED_COLUMNS",
    "coerce_column_mapping",
]
