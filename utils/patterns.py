"""Pre-compiled regex patterns for the Beth Yw? statistics tools.

All patterns are compiled once at module import so the parsers and the
command-line front end share the same definitions.

Usage:
    from utils.patterns import LANGUAGE_CODE, YEAR_RANGE

    if LANGUAGE_CODE.fullmatch(lang):
        ...
"""

import re

# ISO 639-3 style language tag: exactly three lowercase letters ("eng", "cym")
LANGUAGE_CODE = re.compile(r'^[a-z]{3}$')

# Year filter arguments
# Matches: "2010"
SINGLE_YEAR = re.compile(r'^([0-9]{4})$')
# Matches: "2010-2015" (captures start and end)
YEAR_RANGE = re.compile(r'^([0-9]{4})-([0-9]{4})$')

# A year as it appears in a CSV header or a JSON "Year_Code" field
YEAR_VALUE = re.compile(r'^\s*(\d+)\s*$')

# Byte-order mark that some exported CSV files carry on the first header cell
BOM = '\ufeff'
