"""
Area: one local authority with its names (per language) and Measures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from pipeline.errors import InvalidArgumentError, NotFoundError
from pipeline.measure import Measure
from utils.validation import is_valid_language_code


class Area:
    """A local authority, identified by an opaque code (case preserved)."""

    def __init__(self, local_authority_code: str) -> None:
        self.code = local_authority_code
        self._names: dict[str, str] = {}
        self._measures: dict[str, Measure] = {}

    # ── names ─────────────────────────────────────────────────────────────

    def set_name(self, lang: str, name: str) -> None:
        """Store *name* under a three-letter language code ("eng", "CYM", ...).

        Raises:
            InvalidArgumentError: If *lang* is not three letters
        """
        if not is_valid_language_code(lang):
            raise InvalidArgumentError(f"Language code must be three alphabetical letters only: {lang!r}")
        self._names[lang.lower()] = name

    def get_name(self, lang: str) -> str:
        try:
            return self._names[lang.lower()]
        except KeyError:
            raise NotFoundError(f"No name for language {lang!r} in area {self.code}") from None

    @property
    def names(self) -> dict[str, str]:
        """Copy of the lang -> name map, ordered by language code."""
        return {lang: self._names[lang] for lang in sorted(self._names)}

    # ── measures ──────────────────────────────────────────────────────────

    def set_measure(self, codename: str, measure: Measure) -> None:
        """Insert *measure* under *codename*, merging into any existing one.

        A stored Measure keeps its earlier years; the incoming label,
        codename and values overwrite.
        """
        key = codename.lower()
        existing = self._measures.get(key)
        if existing is None:
            self._measures[key] = measure.copy()
        else:
            existing.merge(measure)

    def get_measure(self, codename: str) -> Measure:
        try:
            return self._measures[codename.lower()]
        except KeyError:
            raise NotFoundError(f"No measure found matching {codename}") from None

    def has_measure(self, codename: str) -> bool:
        return codename.lower() in self._measures

    def measures(self) -> Iterator[Measure]:
        """Yield Measures in ascending codename order."""
        for key in sorted(self._measures):
            yield self._measures[key]

    def size(self) -> int:
        """Number of Measures held."""
        return len(self._measures)

    # ── merging ───────────────────────────────────────────────────────────

    def merge(self, other: Area) -> Area:
        """Union *other* into this Area; *other* wins on conflicts."""
        self.code = other.code
        self._names.update(other._names)
        for key, measure in other._measures.items():
            self.set_measure(key, measure)
        return self

    def copy(self) -> Area:
        clone = Area(self.code)
        clone._names = dict(self._names)
        clone._measures = {k: m.copy() for k, m in self._measures.items()}
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Area):
            return NotImplemented
        return (
            self.code == other.code
            and self._names == other._names
            and self._measures == other._measures
        )

    __hash__ = None  # mutable

    def to_dict(self) -> dict:
        """``{"names": {...}}`` plus ``"measures"`` when any Measure exists."""
        out: dict = {"names": self.names}
        if self._measures:
            out["measures"] = {m.codename: m.to_dict() for m in self.measures()}
        return out

    def __repr__(self) -> str:
        return f"Area({self.code!r}, names={self.names!r}, measures={len(self._measures)})"


@dataclass
class AreaDelta:
    """Writes extracted from one row or record, applied to the registry as a unit.

    ``measures`` maps codename -> (label, {year: value}).
    """

    code: str
    names: dict[str, str] = field(default_factory=dict)
    measures: dict[str, tuple[str, dict[int, float]]] = field(default_factory=dict)

    def add_value(self, codename: str, label: str, year: int, value: float) -> None:
        key = codename.lower()
        _, values = self.measures.setdefault(key, (label, {}))
        values[year] = value

    def value_count(self) -> int:
        return sum(len(values) for _, values in self.measures.values())

    def to_area(self) -> Area:
        """Build a standalone Area holding exactly these writes."""
        area = Area(self.code)
        for lang, name in self.names.items():
            area.set_name(lang, name)
        for codename, (label, values) in self.measures.items():
            measure = Measure(codename, label)
            for year, value in values.items():
                measure.set_value(year, value)
            area.set_measure(codename, measure)
        return area
