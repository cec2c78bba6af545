"""Column-mapping validation for the Beth Yw? statistics tools.

Checks a column mapping against the keys its source type requires and
collects the problems as issues, so the catalog can both reject an
unusable entry and describe a usable one.
"""

from typing import List, Set

from utils.config import (
    ColumnMapping,
    MEASURE_PER_FILE,
    MEASURE_PER_RECORD,
    REQUIRED_COLUMNS,
    SourceColumn,
    SourceDataType,
)
from utils.patterns import LANGUAGE_CODE


class ValidationIssue:
    """One problem found in a column mapping."""

    def __init__(self, check_name: str, severity: str, detail: str):
        self.check_name = check_name
        self.severity = severity      # 'error' | 'warning'
        self.detail = detail

    def __str__(self) -> str:
        return f"[{self.severity}] {self.check_name}: {self.detail}"

    def __repr__(self) -> str:
        return (f"ValidationIssue(check={self.check_name}, severity={self.severity}, "
                f"detail={self.detail!r})")


class ValidationResult:
    """Issues collected while checking one column mapping."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def add_issue(self, check_name: str, severity: str, detail: str) -> None:
        self.issues.append(ValidationIssue(check_name, severity, detail))

    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def is_valid(self) -> bool:
        """True when no error-level issue was found."""
        return not self.errors()

    def error_text(self) -> str:
        return "; ".join(i.detail for i in self.errors())


# ── Column mapping checks ────────────────────────────────────────────────────

def missing_columns(source_type: SourceDataType, cols: ColumnMapping) -> Set[SourceColumn]:
    """Return the required keys absent from *cols* for *source_type*.

    JSON sources additionally need a complete measure pair: either
    MEASURE_CODE + MEASURE_NAME (measure per record) or SINGLE_MEASURE_CODE +
    SINGLE_MEASURE_NAME (one measure for the file). When neither pair is
    complete, the per-record pair is reported as missing.

    Args:
        source_type: Layout of the file the mapping belongs to
        cols: Column mapping to check

    Returns:
        Set of missing SourceColumn keys (empty when the mapping is usable)
    """
    missing = set(REQUIRED_COLUMNS.get(source_type, frozenset())) - set(cols)
    if source_type is SourceDataType.WELSH_STATS_JSON:
        if not (MEASURE_PER_RECORD <= set(cols) or MEASURE_PER_FILE <= set(cols)):
            missing |= MEASURE_PER_RECORD - set(cols)
    return missing


def validate_column_mapping(source_type: SourceDataType, cols: ColumnMapping,
                            check_name: str = "column_mapping") -> ValidationResult:
    """Validate a column mapping and collect any problems as issues.

    Args:
        source_type: Layout of the file the mapping belongs to
        cols: Column mapping to check
        check_name: Label used for the check in the result

    Returns:
        ValidationResult with one error issue per missing key, plus a
        warning for any blank header text
    """
    result = ValidationResult()
    for key in sorted(missing_columns(source_type, cols), key=lambda c: c.value):
        result.add_issue(check_name, "error", f"Missing required column key '{key.value}'")
    for key, header in cols.items():
        if not str(header).strip():
            result.add_issue(check_name, "warning",
                             f"Column key '{key.value}' maps to an empty header")
    return result


def is_valid_language_code(lang: str) -> bool:
    """Check if *lang* is a three-letter language tag (case-insensitive).

    Examples:
        is_valid_language_code("eng") -> True
        is_valid_language_code("CYM") -> True
        is_valid_language_code("en") -> False
    """
    if not isinstance(lang, str):
        return False
    return LANGUAGE_CODE.fullmatch(lang.lower()) is not None
