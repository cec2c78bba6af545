"""
Pytest fixtures for the Beth Yw? statistics tests.

Provides small dataset files written into tmp_path (an areas file, a
by-year CSV and StatsWales-style JSON documents), their column mappings,
and a registry pre-loaded with two authorities.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pipeline.area import Area  # noqa: E402
from pipeline.areas import Areas  # noqa: E402
from utils.config import SourceColumn  # noqa: E402


# ── Sample content ────────────────────────────────────────────────────────────

AREAS_CSV = (
    "Local authority code,Name (eng),Name (cym)\n"
    "W06000011,Swansea,Abertawe\n"
    "W06000015,Cardiff,Caerdydd\n"
    "W06000001,Isle of Anglesey,Ynys Môn\n"
)

BY_YEAR_CSV = (
    "AuthorityCode,2009,2010,2011\n"
    "W06000011,1000,1100,1210\n"
    "W06000015,2000,,2200\n"
    "W99999999,5,6,7\n"
)

POPDEN_RECORDS = [
    {"Localauthority_Code": "W06000011", "Localauthority_ItemName_ENG": "Swansea",
     "Measure_Code": "Pop", "Measure_ItemName_ENG": "Population",
     "Year_Code": "2010", "Data": 238700.0},
    {"Localauthority_Code": "W06000011", "Localauthority_ItemName_ENG": "Swansea",
     "Measure_Code": "Pop", "Measure_ItemName_ENG": "Population",
     "Year_Code": "2011", "Data": "239023"},
    {"Localauthority_Code": "W06000011", "Localauthority_ItemName_ENG": "Swansea",
     "Measure_Code": "Area", "Measure_ItemName_ENG": "Land area",
     "Year_Code": "2011", "Data": 377.6},
    {"Localauthority_Code": "W06000024", "Localauthority_ItemName_ENG": "Merthyr Tydfil",
     "Measure_Code": "Pop", "Measure_ItemName_ENG": "Population",
     "Year_Code": "2011", "Data": 58851},
]

TRAINS_RECORDS = [
    {"LocalAuthority_Code": "W06000015", "LocalAuthority_ItemName_ENG": "Cardiff",
     "Year_Code": "2015", "Data": "12.5"},
    {"LocalAuthority_Code": "W06000015", "LocalAuthority_ItemName_ENG": "Cardiff",
     "Year_Code": "2016", "Data": 13},
]


# ── Column mappings ───────────────────────────────────────────────────────────

@pytest.fixture
def areas_cols():
    return {
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.AUTH_NAME_ENG: "Name (eng)",
        SourceColumn.AUTH_NAME_CYM: "Name (cym)",
    }


@pytest.fixture
def by_year_cols():
    return {
        SourceColumn.AUTH_CODE: "AuthorityCode",
        SourceColumn.SINGLE_MEASURE_CODE: "pop",
        SourceColumn.SINGLE_MEASURE_NAME: "Population",
    }


@pytest.fixture
def popden_cols():
    return {
        SourceColumn.AUTH_CODE: "Localauthority_Code",
        SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Measure_Code",
        SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    }


@pytest.fixture
def trains_cols():
    return {
        SourceColumn.AUTH_CODE: "LocalAuthority_Code",
        SourceColumn.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        SourceColumn.SINGLE_MEASURE_CODE: "rail",
        SourceColumn.SINGLE_MEASURE_NAME: "Rail passenger journeys",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    }


# ── Registries ────────────────────────────────────────────────────────────────

@pytest.fixture
def two_areas():
    """Registry holding Swansea and Cardiff with English and Welsh names."""
    areas = Areas()
    for code, eng, cym in (("W06000011", "Swansea", "Abertawe"),
                           ("W06000015", "Cardiff", "Caerdydd")):
        area = Area(code)
        area.set_name("eng", eng)
        area.set_name("cym", cym)
        areas.set_area(code, area)
    return areas


# ── Files on disk ─────────────────────────────────────────────────────────────

def write_json_dataset(path: Path, records) -> Path:
    path.write_text(json.dumps({"value": records}), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with the files the built-in catalog names.

    areas.csv, complete-popu1009-pop.csv, popu1009.json and tran0152.json
    hold real-looking rows; econ0080.json is malformed so loaders have a
    failing file to isolate.
    """
    (tmp_path / "areas.csv").write_text(AREAS_CSV, encoding="utf-8")
    (tmp_path / "complete-popu1009-pop.csv").write_text(BY_YEAR_CSV, encoding="utf-8")
    write_json_dataset(tmp_path / "popu1009.json", POPDEN_RECORDS)
    write_json_dataset(tmp_path / "tran0152.json", TRAINS_RECORDS)
    (tmp_path / "econ0080.json").write_text("{not json", encoding="utf-8")
    return tmp_path
