"""Worksheet input parsing.

Form values arrive as text. Parsing is lenient: a value is read from its
leading numeric prefix ("200.00 per month" -> 200.0), and anything blank
or unparseable becomes 0 rather than failing the calculation. Negative
amounts are also replaced by 0. Every substitution other than a blank
value is reported as a warning.

Scenario files are YAML, either flat (WorksheetInput field names) or
grouped by party:

    children: 2
    costs:
      childcare: 200
      health_insurance: 282
      noncovered_medical: 0
    petitioner:
      net_income: 7740.91
      childcare_paid: 200
      health_insurance_paid: 282
      overnights: 182.5
    respondent:
      net_income: 5800
      overnights: 182.5
"""

import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from .schemas import WorksheetInput

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

COUNT_FIELDS = {"child_count"}
AMOUNT_FIELDS = set(WorksheetInput.model_fields) - COUNT_FIELDS

PARTY_KEYS = {
    "net_income": "net_income",
    "childcare_paid": "childcare_paid",
    "health_insurance_paid": "health_insurance_paid",
    "other_paid": "other_paid",
    "overnights": "overnights",
}

COST_KEYS = {
    "childcare": "childcare_costs",
    "health_insurance": "health_insurance_costs",
    "noncovered_medical": "noncovered_medical_costs",
}

# Values pre-filled on the worksheet form
EXAMPLE_INPUT: Dict[str, str] = {
    "petitioner_net_income": "7740.91",
    "respondent_net_income": "5800.00",
    "child_count": "2",
    "childcare_costs": "200.00",
    "health_insurance_costs": "282.00",
    "noncovered_medical_costs": "0.00",
    "petitioner_childcare_paid": "200.00",
    "respondent_childcare_paid": "0.00",
    "petitioner_health_insurance_paid": "282.00",
    "respondent_health_insurance_paid": "0.00",
    "petitioner_other_paid": "0.00",
    "respondent_other_paid": "0.00",
    "petitioner_overnights": "182.5",
    "respondent_overnights": "182.5",
}


class ScenarioError(Exception):
    """Raised when a scenario file cannot be read."""
    pass


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_number(value: Any) -> float:
    """Leading-prefix float parse. Returns NaN when nothing parses."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return math.nan
    return float(match.group(1))


def coerce_amount(value: Any, name: str = "value", warnings: List[str] = None) -> float:
    """Parse a money/overnight amount, substituting 0 when unusable.

    Args:
        value: Raw value (text, number or None)
        name: Field name used in warnings
        warnings: List to append substitution warnings to
    """
    if _is_blank(value):
        return 0.0

    number = parse_number(value)
    problem = None
    if math.isnan(number) or math.isinf(number):
        problem = f"{name}: {value!r} is not a number; using 0"
        number = 0.0
    elif number < 0:
        problem = f"{name}: negative amount {number:g} not allowed; using 0"
        number = 0.0

    if problem:
        logger.warning(problem)
        if warnings is not None:
            warnings.append(problem)
    return number


def coerce_count(value: Any, name: str = "child_count", warnings: List[str] = None) -> int:
    """Parse a whole-number count from its leading digits ("2.5" -> 2)."""
    if _is_blank(value):
        return 0

    count = None
    if isinstance(value, bool):
        count = None
    elif isinstance(value, (int, float)):
        if math.isfinite(value):
            count = int(value)
    else:
        match = _INT_PREFIX.match(str(value))
        if match:
            count = int(match.group(1))

    if count is None:
        problem = f"{name}: {value!r} is not a whole number; using 0"
        logger.warning(problem)
        if warnings is not None:
            warnings.append(problem)
        return 0
    return count


def build_inputs(raw: Mapping[str, Any]) -> Tuple[WorksheetInput, List[str]]:
    """Coerce raw form values into a WorksheetInput.

    Args:
        raw: Mapping of WorksheetInput field names to raw values. Missing
             fields default to 0; unknown keys are ignored with a warning.

    Returns:
        Tuple of (inputs, warnings)
    """
    warnings: List[str] = []
    values: Dict[str, Any] = {}

    for key, value in raw.items():
        if key in COUNT_FIELDS:
            values[key] = coerce_count(value, key, warnings)
        elif key in AMOUNT_FIELDS:
            values[key] = coerce_amount(value, key, warnings)
        else:
            message = f"Unknown input field '{key}' ignored"
            logger.warning(message)
            warnings.append(message)

    return WorksheetInput(**values), warnings


def flatten_scenario(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a party-grouped scenario into WorksheetInput field names.

    Flat keys pass through unchanged, so both layouts (or a mix) work.
    Unknown keys inside the petitioner/respondent/costs groups are kept
    with a prefix so build_inputs() reports them.
    """
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ("petitioner", "respondent") and isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                flat[f"{key}_{PARTY_KEYS.get(sub_key, sub_key)}"] = sub_value
        elif key == "costs" and isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                flat[COST_KEYS.get(sub_key, f"costs_{sub_key}")] = sub_value
        elif key == "children":
            flat["child_count"] = value
        else:
            flat[key] = value
    return flat


def load_scenario(path: Path) -> Tuple[WorksheetInput, List[str]]:
    """Load worksheet inputs from a YAML scenario file.

    Returns:
        Tuple of (inputs, warnings)

    Raises:
        ScenarioError: If the file is missing or not a YAML mapping
    """
    return build_inputs(read_scenario(path))


def read_scenario(path: Path) -> Dict[str, Any]:
    """Read a YAML scenario file into raw WorksheetInput field values.

    Raises:
        ScenarioError: If the file is missing or not a YAML mapping
    """
    path = Path(path)
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ScenarioError(f"Invalid YAML in {path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ScenarioError(f"Scenario file {path} must contain a mapping")

    return flatten_scenario(data)
