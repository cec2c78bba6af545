"""String processing utilities for the Beth Yw? statistics tools.

These coercions are called once per cell/record during ingestion. Unlike a
lenient "return a default" conversion, they raise ValueError on bad input so
the calling parser can report the file as malformed.
"""

import math
from typing import Optional

from utils.patterns import BOM, YEAR_VALUE


def parse_year(val) -> int:
    """Convert a year as found in a header cell or JSON field to an int.

    Accepts ints and digit-only strings (surrounding whitespace allowed).
    JSON sources store years as strings, CSV headers are always strings.

    Examples:
        "2010" -> 2010
        " 1991 " -> 1991
        2010 -> 2010

    Raises:
        ValueError: If the value is not a non-negative whole number
    """
    if isinstance(val, bool):
        raise ValueError(f"Invalid year: {val!r}")
    if isinstance(val, int):
        if val < 0:
            raise ValueError(f"Invalid year: {val!r}")
        return val
    m = YEAR_VALUE.match(str(val))
    if not m:
        raise ValueError(f"Invalid year: {val!r}")
    return int(m.group(1))


def parse_value(val) -> float:
    """Convert a data value encoded as a JSON number or a string to float.

    Some StatsWales tables (air quality for one) carry their values as
    strings, others as numbers; both end up as float.

    Examples:
        "5.5" -> 5.5
        12 -> 12.0
        " -3 " -> -3.0

    Raises:
        ValueError: If the value is empty or not numeric
    """
    if isinstance(val, bool) or val is None:
        raise ValueError(f"Invalid value: {val!r}")
    if isinstance(val, (int, float)):
        return float(val)
    s = str(val).strip()
    if not s:
        raise ValueError("Invalid value: empty string")
    return float(s)


def parse_optional_value(val) -> Optional[float]:
    """Like parse_value() but treats an empty cell as "no reading".

    Authority-by-year CSV files leave a cell blank when a year has no data.

    Returns:
        float, or None for an empty/blank cell
    """
    if val is None or (isinstance(val, str) and not val.strip()):
        return None
    return parse_value(val)


def strip_bom(s: str) -> str:
    """Remove a leading UTF-8 byte-order mark from a header cell."""
    return s[1:] if s.startswith(BOM) else s


def format_number(value: float, precision: int = 6) -> str:
    """Format a float with fixed decimals; inf/nan render as inf/-inf/nan.

    Examples:
        format_number(711.6801) -> "711.680100"
        format_number(float("inf")) -> "inf"
    """
    if math.isnan(value):
        return "nan"
    return f"{value:.{precision}f}"
