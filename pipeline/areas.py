"""
Areas registry -- every Area loaded during one run, keyed by authority code.

The registry only ever grows: ``set_area`` merges into an existing entry,
and the parsers feed it through ``populate``/``apply``.

Usage::

    areas = Areas()
    with open("datasets/areas.csv", encoding="utf-8") as f:
        areas.populate(f, SourceDataType.AUTHORITY_CODE_CSV, cols)
    print(areas.to_json())
"""

from __future__ import annotations

import json
import logging
from typing import Iterator, TextIO

from pipeline.area import Area, AreaDelta
from pipeline.errors import NotFoundError, UnexpectedDataTypeError
from pipeline.filters import NO_FILTERS, Filters
from pipeline.parsers import PARSERS, ParseStats
from utils.config import ColumnMapping, SourceDataType

logger = logging.getLogger(__name__)


class Areas:
    """Registry of Areas, iterated in ascending code order."""

    def __init__(self) -> None:
        self._areas: dict[str, Area] = {}

    # ── access ────────────────────────────────────────────────────────────

    def set_area(self, code: str, area: Area) -> None:
        """Insert a copy of *area* under *code*, or merge it into the Area already there.

        The registry never keeps a reference to the caller's Area.
        """
        existing = self._areas.get(code)
        if existing is None:
            self._areas[code] = area.copy()
        else:
            existing.merge(area)

    def get_area(self, code: str) -> Area:
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError(f"No area found matching {code}") from None

    def get(self, code: str) -> Area | None:
        return self._areas.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._areas

    def __len__(self) -> int:
        return len(self._areas)

    def __iter__(self) -> Iterator[Area]:
        for code in sorted(self._areas):
            yield self._areas[code]

    def codes(self) -> list[str]:
        return sorted(self._areas)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Areas):
            return NotImplemented
        return self._areas == other._areas

    __hash__ = None  # mutable

    # ── ingestion ─────────────────────────────────────────────────────────

    def apply(self, delta: AreaDelta) -> None:
        """Merge the writes of one parsed row/record.

        The Area is built in full before it touches the registry, so a bad
        write leaves the registry unchanged.
        """
        self.set_area(delta.code, delta.to_area())

    def populate(
        self,
        stream: TextIO,
        source_type: SourceDataType | str,
        cols: ColumnMapping,
        filters: Filters | None = None,
    ) -> ParseStats:
        """Parse *stream* with the parser for *source_type* and merge the result.

        Parser errors propagate unchanged.

        Raises:
            UnexpectedDataTypeError: If *source_type* names no known layout
        """
        try:
            source_type = SourceDataType(source_type)
        except ValueError:
            raise UnexpectedDataTypeError(source_type) from None
        parser = PARSERS.get(source_type)
        if parser is None:
            raise UnexpectedDataTypeError(source_type)
        return parser(stream, cols, self, filters if filters is not None else NO_FILTERS)

    # ── output ────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {area.code: area.to_dict() for area in self}

    def to_json(self, indent: int | None = None) -> str:
        """Serialize as ``{code: {"names": ..., "measures": ...}}``.

        Compact unless *indent* is given; an empty registry gives ``{}``.
        Values that are not finite are written as null.
        """
        if indent is None:
            return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False,
                              allow_nan=False)
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, allow_nan=False)

    def __repr__(self) -> str:
        return f"Areas({len(self._areas)} areas)"
