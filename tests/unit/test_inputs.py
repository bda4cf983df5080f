"""Tests for worksheet input parsing and scenario files."""

import logging
import math
from pathlib import Path

import pytest

from supportcalc.sdk import (
    EXAMPLE_INPUT,
    ScenarioError,
    WorksheetInput,
    build_inputs,
    coerce_amount,
    coerce_count,
    load_scenario,
    read_scenario,
)
from supportcalc.sdk.inputs import flatten_scenario, parse_number

FIXTURES = Path(__file__).parent.parent / "fixtures"


class TestParseNumber:

    @pytest.mark.parametrize("text,expected", [
        ("200.00", 200.0),
        ("  12.5", 12.5),
        ("200.00 per month", 200.0),
        (".5", 0.5),
        ("7.", 7.0),
        ("1e3x", 1000.0),
        ("-40", -40.0),
        (15, 15.0),
        (2.5, 2.5),
    ])
    def test_leading_prefix(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["abc", "$200", "", ".", True])
    def test_nothing_parses(self, text):
        assert math.isnan(parse_number(text))


class TestCoerceAmount:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_zero_without_warning(self, value):
        warnings = []
        assert coerce_amount(value, "childcare_costs", warnings) == 0
        assert warnings == []

    def test_unparseable(self, caplog):
        warnings = []
        with caplog.at_level(logging.WARNING, logger="supportcalc.sdk.inputs"):
            assert coerce_amount("abc", "childcare_costs", warnings) == 0
        assert warnings == ["childcare_costs: 'abc' is not a number; using 0"]
        assert "childcare_costs" in caplog.text

    def test_negative(self):
        warnings = []
        assert coerce_amount("-50", "petitioner_other_paid", warnings) == 0
        assert warnings == ["petitioner_other_paid: negative amount -50 not allowed; using 0"]

    @pytest.mark.parametrize("value", ["1e400", float("inf"), float("nan")])
    def test_non_finite(self, value):
        warnings = []
        assert coerce_amount(value, "x", warnings) == 0
        assert len(warnings) == 1

    def test_trailing_text_is_silent(self):
        warnings = []
        assert coerce_amount("282.00 monthly", "x", warnings) == 282.0
        assert warnings == []

    def test_warnings_list_optional(self):
        assert coerce_amount("oops") == 0


class TestCoerceCount:

    @pytest.mark.parametrize("value,expected", [
        ("2", 2),
        ("2.7", 2),
        (" 3 kids", 3),
        (3.9, 3),
        (4, 4),
        ("-1", -1),
        ("", 0),
        (None, 0),
    ])
    def test_values(self, value, expected):
        assert coerce_count(value) == expected

    @pytest.mark.parametrize("value", ["two", True, float("nan")])
    def test_not_a_whole_number(self, value):
        warnings = []
        assert coerce_count(value, "child_count", warnings) == 0
        assert len(warnings) == 1
        assert "not a whole number" in warnings[0]


class TestBuildInputs:

    def test_example_values(self):
        inputs, warnings = build_inputs(EXAMPLE_INPUT)
        assert warnings == []
        assert inputs.petitioner_net_income == 7740.91
        assert inputs.child_count == 2
        assert inputs.petitioner_overnights == 182.5

    def test_missing_fields_default_to_zero(self):
        inputs, warnings = build_inputs({})
        assert inputs == WorksheetInput()
        assert warnings == []

    def test_unknown_field(self):
        inputs, warnings = build_inputs({"petitioner_net_income": "4000", "bogus": "1"})
        assert inputs.petitioner_net_income == 4000
        assert warnings == ["Unknown input field 'bogus' ignored"]

    def test_collects_every_warning(self):
        _, warnings = build_inputs({
            "petitioner_net_income": "lots",
            "respondent_net_income": "-10",
            "child_count": "many",
        })
        assert len(warnings) == 3


class TestScenarioFiles:

    def test_grouped_fixture_matches_example(self):
        inputs, warnings = load_scenario(FIXTURES / "example_scenario.yaml")
        assert warnings == []
        assert inputs == build_inputs(EXAMPLE_INPUT)[0]

    def test_flat_layout(self, tmp_path):
        path = tmp_path / "flat.yaml"
        path.write_text("petitioner_net_income: 4000\nchild_count: 1\nrespondent_overnights: 100\n")
        inputs, _ = load_scenario(path)
        assert inputs.petitioner_net_income == 4000
        assert inputs.child_count == 1
        assert inputs.respondent_overnights == 100

    def test_unknown_group_keys_reported(self):
        flat = flatten_scenario({
            "petitioner": {"income": 5000},
            "costs": {"dental": 20},
        })
        assert flat == {"petitioner_income": 5000, "costs_dental": 20}
        _, warnings = build_inputs(flat)
        assert len(warnings) == 2

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert read_scenario(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScenarioError, match="not found"):
            read_scenario(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("children: [1, 2\n")
        with pytest.raises(ScenarioError, match="Invalid YAML"):
            read_scenario(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ScenarioError, match="must contain a mapping"):
            read_scenario(path)
