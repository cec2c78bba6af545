"""
Dataset loader -- the per-file import loop.

Opens each catalog file under the data directory and feeds it to
Areas.populate(). A file that fails (unreadable, malformed header, bad
column mapping, unknown source type) is logged and recorded on its
ImportReport; the loop then moves on, so one bad file never blocks the
others. Only ImportFileError and OSError are caught here.

Usage::

    areas = Areas()
    load_areas(areas, Path("datasets"), AreaFilter.of(["swansea"]))
    load_datasets(areas, Path("datasets"), resolve_datasets(["popden"]), filters)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from pipeline.areas import Areas
from pipeline.errors import ImportFileError
from pipeline.filters import AreaFilter, Filters
from pipeline.logging import ImportLogger, ImportReport

logger = logging.getLogger(__name__)


def _import_file(
    areas: Areas,
    data_dir: Path,
    code: str,
    spec: dict[str, Any],
    filters: Filters,
    import_logger: ImportLogger,
) -> ImportReport:
    path = Path(data_dir) / spec["file"]
    report = import_logger.start_file(code, str(path))
    logger.info("Importing %s from %s", code, path)
    try:
        with open(path, encoding="utf-8-sig", newline="") as stream:
            stats = areas.populate(stream, spec["type"], spec["cols"], filters)
    except ImportFileError as exc:
        if exc.source is None:
            exc.source = str(path)
        logger.error("Error importing dataset: %s", exc)
        report.fail(exc.message)
    except OSError as exc:
        logger.error("Error importing dataset: %s: %s", path, exc.strerror or exc)
        report.fail(str(exc))
    else:
        report.absorb(stats)
    import_logger.finish_file(report)
    return report


def load_areas(
    areas: Areas,
    data_dir: Path | str,
    areas_filter: AreaFilter | None = None,
    import_logger: ImportLogger | None = None,
    catalog: dict[str, dict[str, Any]] | None = None,
) -> ImportReport:
    """Import the authority code/name file that creates the Areas.

    Only the area filter applies; measure and year filters have nothing to
    act on in this file.
    """
    from dataset_catalog import AREAS_CODE, get_dataset_spec

    spec = get_dataset_spec(AREAS_CODE, catalog)
    filters = Filters(areas=areas_filter or AreaFilter())
    return _import_file(areas, Path(data_dir), AREAS_CODE, spec, filters,
                        import_logger or ImportLogger())


def load_datasets(
    areas: Areas,
    data_dir: Path | str,
    sources: Iterable[tuple[str, dict[str, Any]]],
    filters: Filters | None = None,
    import_logger: ImportLogger | None = None,
) -> list[ImportReport]:
    """Import each (code, spec) pair in order, isolating failures per file.

    Returns:
        One ImportReport per source, in the order processed.
    """
    import_logger = import_logger or ImportLogger()
    filters = filters or Filters()
    reports = []
    for code, spec in sources:
        reports.append(_import_file(areas, Path(data_dir), code, spec, filters, import_logger))
    failed = sum(1 for r in reports if r.status == "failed")
    if failed:
        logger.warning("%d of %d datasets failed to import", failed, len(reports))
    return reports
