"""
Import logging: per-file import reports and a JSON run summary.

Provides:
  - ImportReport: what one dataset file contributed, what it dropped and why,
    and the error that stopped it (if any).
  - ImportLogger: collects the ImportReports for one run, mirrors per-file
    outcomes to the module logger and writes an optional summary file.

Usage inside pipeline/loader.py::

    il = ImportLogger()
    report = il.start_file("popden", "popu1009.json")
    ...                                      # parse, then report.absorb(stats)
    il.finish_file(report)
    il.write_summary(Path("summary.json"))

Skip categories (see pipeline.parsers.SKIP_CATEGORIES):
    year_filter, measure_filter, area_filter, unknown_area, measure_skip
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pipeline.parsers import ParseStats

logger = logging.getLogger(__name__)


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass
class ImportReport:
    """Structured summary of one dataset file's import."""

    dataset: str
    file: str = ""
    status: str = "not_started"               # started | completed | failed | skipped
    elapsed_seconds: float = 0.0
    rows_merged: int = 0
    values_merged: int = 0
    skips: dict[str, int] = field(default_factory=dict)
    error: str = ""

    # ── helpers ───────────────────────────────────────────────────────────

    @property
    def items_skipped(self) -> int:
        return sum(self.skips.values())

    def absorb(self, stats: ParseStats) -> None:
        """Copy a parser's counters onto this report."""
        self.rows_merged += stats.rows_merged
        self.values_merged += stats.values_merged
        for category, count in stats.skips.items():
            self.skips[category] = self.skips.get(category, 0) + count
        if stats.file_skipped:
            self.status = "skipped"

    def fail(self, message: str) -> None:
        self.status = "failed"
        self.error = message

    def console_summary(self) -> str:
        """One-line summary suitable for the terminal."""
        parts: list[str] = []
        if self.values_merged:
            parts.append(f"{self.values_merged:,} values")
        elif self.rows_merged:
            parts.append(f"{self.rows_merged:,} rows")
        if self.skips:
            skip_parts = [f"{v} {k.replace('_', ' ')}" for k, v in sorted(self.skips.items())]
            parts.append(f"{self.items_skipped:,} skipped ({', '.join(skip_parts)})")
        if self.error:
            parts.append(f"error: {self.error}")
        return " | ".join(parts) if parts else "no activity"

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "dataset": self.dataset,
            "file": self.file,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "rows_merged": self.rows_merged,
            "values_merged": self.values_merged,
        }
        if self.skips:
            d["skips"] = dict(sorted(self.skips.items()))
        if self.error:
            d["error"] = self.error
        return d


# ── ImportLogger ──────────────────────────────────────────────────────────────


class ImportLogger:
    """Keeps the ImportReports of one run, in the order files were loaded."""

    def __init__(self) -> None:
        self.run_id = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        self.run_start = time.monotonic()
        self._start_times: dict[str, float] = {}
        self._reports: list[ImportReport] = []
        self.args_dict: dict[str, Any] = {}

    # ── file lifecycle ────────────────────────────────────────────────────

    def start_file(self, dataset: str, file: str = "") -> ImportReport:
        self._start_times[dataset] = time.monotonic()
        report = ImportReport(dataset=dataset, file=file, status="started")
        self._reports.append(report)
        return report

    def finish_file(self, report: ImportReport) -> None:
        """Stamp timing and final status on *report* and log the outcome."""
        t0 = self._start_times.pop(report.dataset, self.run_start)
        report.elapsed_seconds = time.monotonic() - t0
        if report.status == "started":
            report.status = "completed"
        if report.status == "failed":
            logger.debug("  [%s] %s", report.dataset, report.console_summary())
        else:
            logger.info("  [%s] %s: %s", report.dataset, report.status,
                        report.console_summary())

    # ── summary output ────────────────────────────────────────────────────

    def summary(self) -> dict[str, Any]:
        failed = [r.dataset for r in self._reports if r.status == "failed"]
        return {
            "run_id": self.run_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "total_elapsed_seconds": round(time.monotonic() - self.run_start, 2),
            "args": self.args_dict,
            "files": [r.to_dict() for r in self._reports],
            "failed": failed,
        }

    def write_summary(self, path: Path | str) -> Path:
        """Write the JSON run summary to *path* and return it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.summary(), f, indent=2)
        return path

    def get_reports(self) -> list[ImportReport]:
        return list(self._reports)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self._reports if r.status == "failed")
