"""Output formatting utilities for the Beth Yw? statistics tools.

Provides reusable functions for:
- Aligned tabular output (TableFormatter)
- The text report for a Measure, an Area and a whole registry
"""

from typing import Any, List, Optional

from utils.strings import format_number


class TableFormatter:
    """Formats data as aligned tabular output."""

    def __init__(self, columns: List[str], column_widths: Optional[List[int]] = None,
                 separator: str = "  ", align: str = "left"):
        """Initialize table formatter.

        Args:
            columns: List of column headers
            column_widths: Optional list of column widths (auto-calculated if None)
            separator: Text placed between cells (default: two spaces)
            align: 'left' aligns text cells left and numbers right;
                'right' right-aligns every cell, headers included
        """
        self.columns = [str(c) for c in columns]
        self.column_widths = column_widths or [len(col) for col in self.columns]
        self.separator = separator
        self.align = align
        self.rows: List[List[str]] = []

    def add_row(self, values: List[Any]) -> None:
        """Add a row to the table.

        Args:
            values: List of values matching column count

        Raises:
            ValueError: If value count doesn't match column count
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        str_values = []
        for i, val in enumerate(values):
            str_val = str(val) if val is not None else "-"
            str_values.append(str_val)
            if len(str_val) > self.column_widths[i]:
                self.column_widths[i] = len(str_val)

        self.rows.append(str_values)

    def _format_row(self, values: List[str], is_header: bool = False) -> str:
        """Format a single row as aligned text."""
        cells = []
        for i, val in enumerate(values):
            width = self.column_widths[i]
            if self.align == "right":
                cells.append(val.rjust(width))
            elif is_header:
                cells.append(val.ljust(width))
            else:
                try:
                    float(val)
                    cells.append(val.rjust(width))
                except ValueError:
                    cells.append(val.ljust(width))

        return self.separator.join(cells)

    def to_string(self, show_header: bool = True, show_separator: bool = True) -> str:
        """Format table as multi-line string.

        Args:
            show_header: Include header row (default: True)
            show_separator: Add separator line after header (default: True)

        Returns:
            Formatted table as string
        """
        lines = []

        if show_header:
            lines.append(self._format_row(self.columns, is_header=True))
            if show_separator:
                sep = self.separator.join("-" * w for w in self.column_widths)
                lines.append(sep)

        for row in self.rows:
            lines.append(self._format_row(row))

        return "\n".join(lines)


# ── Text report ──────────────────────────────────────────────────────────────

def area_heading(area) -> str:
    """Heading line for an Area.

    Examples:
        "Swansea / Abertawe (W06000011)"
        "Swansea (W06000011)"      (no Welsh name)
        "Unnamed (W06000011)"      (no names at all)
    """
    names = area.names
    eng, cym = names.get("eng"), names.get("cym")
    if eng is not None and cym is not None:
        title = f"{eng} / {cym}"
    elif eng is not None:
        title = eng
    elif cym is not None:
        title = cym
    else:
        title = "Unnamed"
    return f"{title} ({area.code})"


def format_measure(measure) -> str:
    """Render a Measure as a label line, a header line and a value line.

    Every number is printed with six decimals, each column right-aligned to
    the wider of its header and its value. A Measure with no values renders
    as its label line followed by ``<no data>``.

    Examples:
        Population density (dens)
              2000       2001    Average     Diff.   % Diff.
        100.000000 110.000000 105.000000 10.000000 10.000000
    """
    title = f"{measure.label} ({measure.codename})"
    if len(measure) == 0:
        return f"{title}\n<no data>"

    headers: List[str] = []
    values: List[str] = []
    for year, value in measure.items():
        headers.append(str(year))
        values.append(format_number(value))
    headers += ["Average", "Diff.", "% Diff."]
    values += [
        format_number(measure.get_average()),
        format_number(measure.get_difference()),
        format_number(measure.get_difference_percentage()),
    ]

    table = TableFormatter(headers, separator=" ", align="right")
    table.add_row(values)
    return f"{title}\n{table.to_string(show_separator=False)}"


def format_area(area) -> str:
    """Render an Area heading followed by each of its Measures.

    A blank line follows every Measure block; an Area without Measures
    shows ``<no measures>``.
    """
    lines = [area_heading(area)]
    measures = list(area.measures())
    if not measures:
        lines.append("<no measures>")
    for measure in measures:
        lines.append(format_measure(measure))
        lines.append("")
    return "\n".join(lines)


def format_areas(areas) -> str:
    """Render every Area in code order, each followed by a blank line."""
    return "".join(format_area(area) + "\n\n" for area in areas)
