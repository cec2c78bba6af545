"""
Tests for pipeline/filters.py.
"""
from pipeline.filters import AreaFilter, Filters, MeasureFilter, YearFilter


class TestAreaFilter:
    def test_empty_matches_everything(self):
        assert AreaFilter.of([]).matches("W1", ["Test"])
        assert AreaFilter.of(None).matches("W1")

    def test_matches_code_case_insensitive(self):
        assert AreaFilter.of(["w06000011"]).matches("W06000011", ["Swansea"])

    def test_matches_name_substring(self):
        assert AreaFilter.of(["test"]).matches("W1", ["Test", "Prawf"])
        assert AreaFilter.of(["rawf"]).matches("W1", ["Test", "Prawf"])

    def test_any_token_is_enough(self):
        assert AreaFilter.of(["zzz", "prawf"]).matches("W1", ["Test", "Prawf"])

    def test_no_match(self):
        assert not AreaFilter.of(["zzz"]).matches("W1", ["Test", "Prawf"])

    def test_regex_tokens(self):
        assert AreaFilter.of(["^W06"]).matches("W06000011")
        assert not AreaFilter.of(["^06"]).matches("W06000011")

    def test_invalid_regex_falls_back_to_literal(self):
        assert AreaFilter.of(["(x"]).matches("W1", ["Box (x"])
        assert not AreaFilter.of(["(x"]).matches("W1", ["Box"])

    def test_blank_tokens_ignored(self):
        assert not AreaFilter.of(["", "  "])


class TestMeasureFilter:
    def test_empty(self):
        assert MeasureFilter.of([]).matches("anything")

    def test_case_insensitive(self):
        f = MeasureFilter.of(["POP"])
        assert f.matches("pop")
        assert f.matches("Pop")
        assert not f.matches("dens")

    def test_exact_not_substring(self):
        assert not MeasureFilter.of(["po"]).matches("pop")


class TestYearFilter:
    def test_unbounded(self):
        f = YearFilter(0, 0)
        assert f.is_unbounded
        assert f.matches(1)
        assert f.matches(2999)

    def test_inclusive_bounds(self):
        f = YearFilter(2000, 2002)
        assert f.matches(2000)
        assert f.matches(2002)
        assert not f.matches(1999)
        assert not f.matches(2003)

    def test_zero_end_is_unbounded_even_with_start(self):
        assert YearFilter(2000, 0).matches(1990)

    def test_reversed_range_matches_nothing(self):
        f = YearFilter(2010, 2000)
        assert not any(f.matches(y) for y in range(1990, 2020))


class TestFilters:
    def test_build(self):
        f = Filters.build(areas=["W1"], measures=["Pop"], years=(2000, 2001))
        assert f.areas.tokens == {"W1"}
        assert f.measures.codes == {"pop"}
        assert f.years == YearFilter(2000, 2001)

    def test_default_passes_everything(self):
        f = Filters()
        assert f.area_matches("W1", {"eng": "Test"})
        assert f.measures.matches("pop")
        assert f.years.matches(1850)

    def test_area_matches_accepts_name_mapping(self):
        f = Filters.build(areas=["prawf"])
        assert f.area_matches("W1", {"eng": "Test", "cym": "Prawf"})
