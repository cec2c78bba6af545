"""
Tests for pipeline/loader.py -- the per-file import loop and its reports.
"""
import json
import logging

from dataset_catalog import resolve_datasets
from pipeline.areas import Areas
from pipeline.filters import AreaFilter, Filters
from pipeline.loader import load_areas, load_datasets
from pipeline.logging import ImportLogger


def test_load_areas(data_dir):
    areas = Areas()
    report = load_areas(areas, data_dir)
    assert areas.codes() == ["W06000001", "W06000011", "W06000015"]
    assert areas.get_area("W06000001").get_name("cym") == "Ynys Môn"
    assert report.status == "completed"
    assert report.rows_merged == 3


def test_load_areas_with_filter(data_dir):
    areas = Areas()
    report = load_areas(areas, data_dir, AreaFilter.of(["swan"]))
    assert areas.codes() == ["W06000011"]
    assert report.skips == {"area_filter": 2}


def test_missing_areas_file_is_reported(tmp_path, caplog):
    areas = Areas()
    with caplog.at_level(logging.ERROR):
        report = load_areas(areas, tmp_path)
    assert report.status == "failed"
    assert len(areas) == 0
    assert "Error importing dataset" in caplog.text


def test_failing_file_does_not_block_others(data_dir, caplog):
    areas = Areas()
    load_areas(areas, data_dir)
    sources = resolve_datasets(["biz", "complete-pop", "trains"])
    with caplog.at_level(logging.ERROR):
        reports = load_datasets(areas, data_dir, sources)

    assert [r.dataset for r in reports] == ["biz", "complete-pop", "trains"]
    assert [r.status for r in reports] == ["failed", "completed", "completed"]
    assert "Error importing dataset" in caplog.text
    assert "econ0080.json" in caplog.text
    assert reports[0].error.startswith("Invalid JSON")

    cardiff = areas.get_area("W06000015")
    assert cardiff.get_measure("pop").to_dict() == {"2009": 2000.0, "2011": 2200.0}
    assert cardiff.get_measure("rail").to_dict() == {"2015": 12.5, "2016": 13.0}


def test_missing_dataset_file(data_dir):
    areas = Areas()
    load_areas(areas, data_dir)
    reports = load_datasets(areas, data_dir, resolve_datasets(["aqi", "trains"]))
    assert reports[0].status == "failed"
    assert reports[1].status == "completed"


def test_unknown_area_counted(data_dir):
    areas = Areas()
    load_areas(areas, data_dir)
    [report] = load_datasets(areas, data_dir, resolve_datasets(["complete-pop"]))
    assert report.skips["unknown_area"] == 1
    assert report.values_merged == 5
    assert "W99999999" not in areas


def test_measure_filter_marks_file_skipped(data_dir):
    areas = Areas()
    load_areas(areas, data_dir)
    filters = Filters.build(measures=["rail"])
    reports = load_datasets(areas, data_dir, resolve_datasets(["complete-pop", "trains"]), filters)
    assert reports[0].status == "skipped"
    assert reports[0].skips == {"measure_skip": 1}
    assert reports[1].values_merged == 2


def test_summary_written(data_dir, tmp_path):
    areas = Areas()
    il = ImportLogger()
    load_areas(areas, data_dir, import_logger=il)
    load_datasets(areas, data_dir, resolve_datasets(["biz", "trains"]), import_logger=il)

    path = il.write_summary(tmp_path / "out" / "summary.json")
    summary = json.loads(path.read_text(encoding="utf-8"))
    assert [f["dataset"] for f in summary["files"]] == ["areas", "biz", "trains"]
    assert summary["failed"] == ["biz"]
    assert il.failed_count == 1


def test_undecodable_file_does_not_block_others(data_dir, caplog):
    (data_dir / "complete-popu1009-pop.csv").write_bytes(
        b"AuthorityCode,2009\nW06000011,\xff\xfe1\n"
    )
    areas = Areas()
    load_areas(areas, data_dir)
    with caplog.at_level(logging.ERROR):
        reports = load_datasets(areas, data_dir, resolve_datasets(["complete-pop", "trains"]))

    assert [r.status for r in reports] == ["failed", "completed"]
    assert reports[0].error.startswith("Unreadable CSV")
    assert "complete-popu1009-pop.csv" in caplog.text
    assert areas.get_area("W06000015").has_measure("rail")
    assert not areas.get_area("W06000011").has_measure("pop")


def test_undecodable_json_is_reported(data_dir):
    (data_dir / "tran0152.json").write_bytes(b'{"value": ["\xff"]}')
    areas = Areas()
    load_areas(areas, data_dir)
    [report] = load_datasets(areas, data_dir, resolve_datasets(["trains"]))
    assert report.status == "failed"
    assert report.error.startswith("Invalid JSON")
