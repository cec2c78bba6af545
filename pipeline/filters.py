"""
Filters applied while ingesting: area tokens, measure codes and a year range.

All three are plain immutable values passed explicitly into every parser
call. An empty filter (or the 0-0 year range) lets everything through.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping


def _tokens(values: Iterable[str] | None) -> frozenset[str]:
    if not values:
        return frozenset()
    return frozenset(v.strip() for v in values if v and v.strip())


def _token_matches(token: str, text: str) -> bool:
    """Case-insensitive regex search, falling back to a literal substring."""
    try:
        return re.search(token, text, re.IGNORECASE) is not None
    except re.error:
        return re.search(re.escape(token), text, re.IGNORECASE) is not None


@dataclass(frozen=True)
class AreaFilter:
    """Set of tokens matched against an Area's code and its names."""

    tokens: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, values: Iterable[str] | None = None) -> AreaFilter:
        return cls(_tokens(values))

    def __bool__(self) -> bool:
        return bool(self.tokens)

    def matches(self, code: str, names: Iterable[str] = ()) -> bool:
        """True when any token matches *code* or any of *names*."""
        if not self.tokens:
            return True
        candidates = [code, *names]
        return any(
            _token_matches(token, text)
            for token in self.tokens
            for text in candidates
        )


@dataclass(frozen=True)
class MeasureFilter:
    """Set of measure codenames, compared case-insensitively."""

    codes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, values: Iterable[str] | None = None) -> MeasureFilter:
        return cls(frozenset(t.lower() for t in _tokens(values)))

    def __bool__(self) -> bool:
        return bool(self.codes)

    def matches(self, codename: str) -> bool:
        if not self.codes:
            return True
        return codename.lower() in self.codes


@dataclass(frozen=True)
class YearFilter:
    """Inclusive year range; ``end == 0`` means no bound at all."""

    start: int = 0
    end: int = 0

    @property
    def is_unbounded(self) -> bool:
        return self.end == 0

    def __bool__(self) -> bool:
        return not self.is_unbounded

    def matches(self, year: int) -> bool:
        if self.is_unbounded:
            return True
        return self.start <= year <= self.end


@dataclass(frozen=True)
class Filters:
    """The three filters bundled for a parser call."""

    areas: AreaFilter = field(default_factory=AreaFilter)
    measures: MeasureFilter = field(default_factory=MeasureFilter)
    years: YearFilter = field(default_factory=YearFilter)

    @classmethod
    def build(
        cls,
        areas: Iterable[str] | None = None,
        measures: Iterable[str] | None = None,
        years: tuple[int, int] | None = None,
    ) -> Filters:
        """Convenience constructor from plain sets and a (start, end) tuple."""
        start, end = years if years else (0, 0)
        return cls(AreaFilter.of(areas), MeasureFilter.of(measures), YearFilter(start, end))

    def area_matches(self, code: str, names: Mapping[str, str] | Iterable[str] = ()) -> bool:
        if isinstance(names, Mapping):
            names = names.values()
        return self.areas.matches(code, names)


NO_FILTERS = Filters()
