"""
Year-indexed numeric series (population density, rail journeys, ...).

A Measure has a lowercase codename, a human-readable label and a map of
year -> value. Iteration is always in ascending year order regardless of
the order values were written in.
"""

from __future__ import annotations

import math
from typing import Iterator

from pipeline.errors import NotFoundError


class Measure:
    """Ordered year -> value series with a codename and label."""

    __slots__ = ("_codename", "label", "_values")

    def __init__(self, codename: str, label: str) -> None:
        self._codename = codename.lower()
        self.label = label
        self._values: dict[int, float] = {}

    @property
    def codename(self) -> str:
        return self._codename

    # ── values ────────────────────────────────────────────────────────────

    def set_value(self, year: int, value: float) -> None:
        """Insert or overwrite the value for *year*. No range checks."""
        self._values[int(year)] = float(value)

    def get_value(self, year: int) -> float:
        try:
            return self._values[int(year)]
        except KeyError:
            raise NotFoundError(
                f"No value found for year {year} in measure {self._codename}"
            ) from None

    def has_year(self, year: int) -> bool:
        return int(year) in self._values

    def years(self) -> list[int]:
        return sorted(self._values)

    def items(self) -> Iterator[tuple[int, float]]:
        """Yield ``(year, value)`` pairs in ascending year order."""
        for year in sorted(self._values):
            yield year, self._values[year]

    def __len__(self) -> int:
        return len(self._values)

    # ── aggregates ────────────────────────────────────────────────────────

    def get_average(self) -> float:
        """Mean of all stored values, 0.0 for an empty series."""
        if not self._values:
            return 0.0
        return sum(self._values.values()) / len(self._values)

    def _first_last(self) -> tuple[float, float] | None:
        if len(self._values) < 2:
            return None
        years = sorted(self._values)
        return self._values[years[0]], self._values[years[-1]]

    def get_difference(self) -> float:
        """Value at the latest year minus value at the earliest year.

        0.0 when fewer than two years are stored.
        """
        ends = self._first_last()
        if ends is None:
            return 0.0
        first, last = ends
        return last - first

    def get_difference_percentage(self) -> float:
        """``(last - first) / abs(first) * 100``; 0.0 with fewer than two years.

        A first value of zero yields inf or nan, exactly as IEEE-754 division
        does; callers rendering the number must cope with that.
        """
        ends = self._first_last()
        if ends is None:
            return 0.0
        first, last = ends
        diff = last - first
        denom = abs(first)
        if denom == 0.0:
            if diff == 0.0 or diff != diff:
                return float("nan")
            return float("inf") if diff > 0 else float("-inf")
        return diff / denom * 100.0

    # ── merging ───────────────────────────────────────────────────────────

    def merge(self, other: Measure) -> Measure:
        """Take *other*'s codename and label and upsert all of its values.

        The result is the union of both series; *other* wins on shared years.
        Returns self so calls can be chained.
        """
        self._codename = other.codename
        self.label = other.label
        for year, value in other.items():
            self._values[year] = value
        return self

    def copy(self) -> Measure:
        clone = Measure(self._codename, self.label)
        clone._values = dict(self._values)
        return clone

    # ── comparison / serialization ───────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Measure):
            return NotImplemented
        return (
            self._codename == other._codename
            and self.label == other.label
            and self._values == other._values
        )

    __hash__ = None  # mutable

    def to_dict(self) -> dict[str, float | None]:
        """Year (as string) -> value, in ascending year order.

        NaN and infinite values become None, which JSON writes as null.
        """
        return {
            str(year): value if math.isfinite(value) else None
            for year, value in self.items()
        }

    def __repr__(self) -> str:
        return f"Measure({self._codename!r}, {self.label!r}, {len(self._values)} values)"
