"""
Exception types raised by the ingestion engine.

Per-file fatal errors derive from ImportFileError so the file loop in
pipeline.loader can catch exactly those and carry on with the next dataset.
Lookup misses and bad arguments subclass the matching builtin so callers
that only know about LookupError / ValueError still handle them.
"""

from __future__ import annotations


class BethYwError(Exception):
    """Base class for all errors raised by the statistics tools."""


class ImportFileError(BethYwError):
    """A problem that makes one input file unusable.

    ``source`` is the file name (or other identifier) when the caller knows
    it; the loader fills it in before logging.
    """

    def __init__(self, message: str, source: str | None = None):
        self.message = message
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class MalformedFileError(ImportFileError):
    """Header/schema mismatch or unparseable content."""


class NotEnoughColumnsError(ImportFileError):
    """The supplied column mapping is missing keys the parser needs."""

    def __init__(self, missing, source: str | None = None):
        self.missing = sorted(getattr(m, "value", str(m)) for m in missing)
        super().__init__(
            "Not enough entries in column mapping, missing: "
            + ", ".join(self.missing),
            source,
        )


class UnexpectedDataTypeError(ImportFileError):
    """The dispatcher was handed a source type it has no parser for."""

    def __init__(self, source_type, source: str | None = None):
        self.source_type = source_type
        super().__init__(f"Unexpected data type: {source_type!r}", source)


class NotFoundError(BethYwError, LookupError):
    """Lookup miss on an Area, Measure, name or year."""


class InvalidArgumentError(BethYwError, ValueError):
    """A value was rejected before it could be stored or used."""
