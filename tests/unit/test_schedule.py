"""Unit tests for guideline schedule lookup.

Covers the five lookup paths (exact, interpolated, below schedule,
extrapolated, top band fallback), unsupported child counts, and the
schedule invariant checks.
"""

import logging
import math

import pytest

from supportcalc.sdk import (
    GuidelineError,
    GuidelineSchedule,
    basic_obligation,
    load_guideline,
)


@pytest.fixture
def florida():
    return load_guideline("florida-61.30")


@pytest.fixture
def small_schedule():
    """Three bands, excess rate only for one child."""
    return GuidelineSchedule.from_table(
        name="small",
        table={
            2000: [200, 300, 400, 500, 600, 700],
            1000: [100, 150, 200, 250, 300, 350],
            3000: [260, 390, 520, 650, 780, 910],
        },
        excess_percentages={1: 0.10},
    )


class TestBundledSchedule:
    """The Florida schedule as loaded from YAML."""

    def test_band_range(self, florida):
        assert florida.min_band == 800
        assert florida.max_band == 10000
        assert len(florida.bands) == 185

    def test_bands_step_by_50(self, florida):
        steps = {b - a for a, b in zip(florida.bands, florida.bands[1:])}
        assert steps == {50}

    def test_invariants_hold(self, florida):
        assert florida.check_invariants() == []

    def test_excess_percentages(self, florida):
        assert dict(florida.excess_percentages) == {
            1: 0.05, 2: 0.075, 3: 0.095, 4: 0.11, 5: 0.125, 6: 0.135,
        }

    def test_shared_parenting_threshold(self, florida):
        assert florida.shared_parenting.threshold_overnights == 73


class TestExactMatch:
    """Tabulated bands return the table value with no interpolation drift."""

    @pytest.mark.parametrize("income,children,expected", [
        (800, 1, 190),
        (800, 6, 220),
        (3000, 3, 1252),
        (5000, 1, 1000),
        (10000, 2, 2228),
        (10000, 6, 3672),
    ])
    def test_tabulated_values(self, florida, income, children, expected):
        lookup = florida.lookup(income, children)
        assert lookup.amount == expected
        assert lookup.method == "exact"
        assert lookup.lower_band == income

    def test_every_band_and_child_count(self, florida):
        for band, row in zip(florida.bands, florida.rows):
            for children in range(1, 7):
                assert florida.lookup(band, children).amount == row[children - 1]

    def test_float_income_on_band(self, florida):
        assert florida.lookup(6000.0, 1).amount == 1121


class TestInterpolation:
    """Incomes between bands interpolate linearly."""

    def test_midpoint(self, florida):
        # 800 -> 211, 850 -> 257 for two children
        lookup = florida.lookup(825, 2)
        assert lookup.amount == pytest.approx(234.0)
        assert lookup.method == "interpolated"
        assert (lookup.lower_band, lookup.upper_band) == (800, 850)

    def test_fraction(self, florida):
        # 1000 -> 235, 1050 -> 246 for one child; 10/50 of the way
        assert florida.lookup(1010, 1).amount == pytest.approx(237.2)

    def test_uses_tightest_bracket(self, florida):
        lookup = florida.lookup(9999.99, 1)
        assert (lookup.lower_band, lookup.upper_band) == (9950, 10000)

    @pytest.mark.parametrize("income", [801, 1234.56, 3025, 5049.99, 7777, 9975])
    def test_stays_between_band_values(self, florida, income):
        for children in range(1, 7):
            lookup = florida.lookup(income, children)
            low = florida.amount(lookup.lower_band, children)
            high = florida.amount(lookup.upper_band, children)
            assert low <= lookup.amount <= high


class TestBelowSchedule:
    """Incomes under the lowest band reuse the lowest band."""

    @pytest.mark.parametrize("income", [0, 1, 500, 799.99])
    def test_clamps_to_lowest_band(self, florida, income):
        for children in range(1, 7):
            lookup = florida.lookup(income, children)
            assert lookup.amount == florida.rows[0][children - 1]
            assert lookup.method == "below_schedule"
            assert lookup.upper_band == 800


class TestAboveSchedule:
    """Incomes over the top band add the excess percentage."""

    def test_worksheet_example(self, florida):
        lookup = florida.lookup(13540.91, 2)
        assert lookup.amount == pytest.approx(2228 + 3540.91 * 0.075)
        assert lookup.amount == pytest.approx(2493.56825)
        assert lookup.method == "extrapolated"
        assert lookup.excess_rate == 0.075

    @pytest.mark.parametrize("children,rate", [(1, 0.05), (3, 0.095), (6, 0.135)])
    def test_formula(self, florida, children, rate):
        top = florida.amount(10000, children)
        assert florida.lookup(12000, children).amount == pytest.approx(top + 2000 * rate)

    def test_strictly_increasing(self, florida):
        amounts = [florida.lookup(income, 4).amount for income in (10000.01, 10500, 15000, 50000)]
        assert amounts == sorted(amounts)
        assert len(set(amounts)) == len(amounts)

    def test_missing_excess_rate_falls_back_to_top_band(self, small_schedule, caplog):
        with caplog.at_level(logging.WARNING, logger="supportcalc.sdk.schedule"):
            lookup = small_schedule.lookup(5000, 2)
        assert lookup.amount == 390
        assert lookup.method == "top_band"
        assert lookup.warnings == ["No excess percentage defined for 2 children."]
        assert "No excess percentage" in caplog.text

    def test_defined_rate_on_small_schedule(self, small_schedule):
        assert small_schedule.lookup(3500, 1).amount == pytest.approx(310)


class TestNonFiniteIncome:
    """NaN or infinite income yields 0 with a warning instead of raising."""

    @pytest.mark.parametrize("income", [math.nan, math.inf, -math.inf])
    def test_returns_zero(self, florida, income, caplog):
        with caplog.at_level(logging.WARNING, logger="supportcalc.sdk.schedule"):
            lookup = florida.lookup(income, 2)
        assert lookup.amount == 0
        assert lookup.method == "invalid_income"
        assert len(lookup.warnings) == 1
        assert "finite number" in lookup.warnings[0]
        assert "finite number" in caplog.text

    def test_basic_obligation(self, florida):
        assert basic_obligation(math.nan, 2, schedule=florida) == 0


class TestChildCount:
    """Unsupported child counts yield 0 with a warning."""

    @pytest.mark.parametrize("children", [0, -1, 7, 12])
    def test_out_of_range(self, florida, children, caplog):
        with caplog.at_level(logging.WARNING, logger="supportcalc.sdk.schedule"):
            lookup = florida.lookup(5000, children)
        assert lookup.amount == 0
        assert lookup.method == "invalid_child_count"
        assert len(lookup.warnings) == 1
        assert "between 1 and 6" in lookup.warnings[0]
        assert "between 1 and 6" in caplog.text

    def test_more_children_never_cheaper(self, florida):
        for income in (900, 4321, 10000, 20000):
            amounts = [florida.lookup(income, c).amount for c in range(1, 7)]
            assert amounts == sorted(amounts)


class TestBasicObligationFunction:

    def test_default_schedule(self):
        assert basic_obligation(10000, 2) == 2228

    def test_explicit_schedule(self, small_schedule):
        assert basic_obligation(1500, 1, schedule=small_schedule) == pytest.approx(150)

    def test_invalid_count(self):
        assert basic_obligation(5000, 0) == 0


class TestFromTable:
    """Schedule construction and invariant checking."""

    def test_sorts_bands(self, small_schedule):
        assert small_schedule.bands == (1000, 2000, 3000)
        assert small_schedule.rows[0] == (100, 150, 200, 250, 300, 350)

    def test_empty_table(self):
        with pytest.raises(GuidelineError, match="empty schedule"):
            GuidelineSchedule.from_table("empty", {}, {})

    def test_decreasing_across_bands(self):
        table = {
            1000: [100, 150, 200, 250, 300, 350],
            1050: [90, 150, 200, 250, 300, 350],
        }
        with pytest.raises(GuidelineError, match="1 children: band 1050"):
            GuidelineSchedule.from_table("bad", table, {})

    def test_decreasing_across_children(self):
        table = {1000: [100, 150, 140, 250, 300, 350]}
        with pytest.raises(GuidelineError, match="3 children"):
            GuidelineSchedule.from_table("bad", table, {})

    def test_wrong_row_width(self):
        with pytest.raises(GuidelineError, match="expected 6"):
            GuidelineSchedule.from_table("bad", {1000: [1, 2, 3]}, {})

    def test_unchecked_schedule_reports_problems(self):
        schedule = GuidelineSchedule.from_table(
            "bad",
            {1000: [100, 150, 200, 250, 300, 350], 1050: [-1, 150, 200, 250, 300, 350]},
            {9: 0.1},
            validate=False,
        )
        problems = schedule.check_invariants()
        assert any("negative amount" in p for p in problems)
        assert any("unsupported child count 9" in p for p in problems)

    def test_excess_percentages_are_read_only(self, small_schedule):
        with pytest.raises(TypeError):
            small_schedule.excess_percentages[2] = 0.2
