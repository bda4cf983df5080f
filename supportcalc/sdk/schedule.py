"""Guideline schedule lookup.

Maps combined monthly net income and number of children to the basic
monthly obligation:

- income on a tabulated band returns that band's amount
- income between two bands is linearly interpolated
- income below the lowest band reuses the lowest band
- income above the highest band adds the child count's excess percentage
  of the amount over the top band

The lowest-band clamp is a stand-in: the statute does not say how to treat
incomes below the schedule's floor.

Usage:
    from supportcalc.sdk.schedule import basic_obligation

    amount = basic_obligation(13540.91, 2)  # 2493.57
"""

import bisect
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .schemas import CHILD_COUNT_RANGE, ObligationLookup, SharedParentingRules

logger = logging.getLogger(__name__)


class GuidelineError(Exception):
    """Raised when guideline data is malformed or breaks schedule invariants."""
    pass


@dataclass(frozen=True, eq=False)
class GuidelineSchedule:
    """Immutable income schedule with its excess percentages.

    Bands are sorted once at construction; lookups bisect the band tuple.
    Build instances with from_table() rather than the constructor.
    """

    name: str
    bands: Tuple[int, ...]
    rows: Tuple[Tuple[float, ...], ...]
    excess_percentages: Mapping[int, float]
    shared_parenting: SharedParentingRules = field(default_factory=SharedParentingRules)
    title: str = ""
    statute: str = ""

    @classmethod
    def from_table(
        cls,
        name: str,
        table: Mapping[int, Sequence[float]],
        excess_percentages: Mapping[int, float],
        shared_parenting: Optional[SharedParentingRules] = None,
        title: str = "",
        statute: str = "",
        validate: bool = True,
    ) -> "GuidelineSchedule":
        """Build a schedule from a band -> amounts mapping.

        Args:
            name: Guideline identifier (e.g., "florida-61.30")
            table: Income band -> six amounts (1..6 children)
            excess_percentages: Child count -> rate above the top band
            shared_parenting: Gross-up constants (defaults: 20%, 365, 1.5)
            validate: Raise GuidelineError if check_invariants() finds problems

        Raises:
            GuidelineError: If the table is empty or, with validate=True,
                any schedule invariant is broken
        """
        if not table:
            raise GuidelineError(f"Guideline '{name}' has an empty schedule")

        bands = tuple(sorted(table))
        schedule = cls(
            name=name,
            bands=bands,
            rows=tuple(tuple(float(v) for v in table[band]) for band in bands),
            excess_percentages=MappingProxyType(
                {int(k): float(v) for k, v in excess_percentages.items()}
            ),
            shared_parenting=shared_parenting or SharedParentingRules(),
            title=title,
            statute=statute,
        )

        if validate:
            problems = schedule.check_invariants()
            if problems:
                raise GuidelineError(
                    f"Guideline '{name}' failed validation:\n  " + "\n  ".join(problems)
                )
        return schedule

    @property
    def min_band(self) -> int:
        return self.bands[0]

    @property
    def max_band(self) -> int:
        return self.bands[-1]

    def amount(self, band: int, child_count: int) -> float:
        """Tabulated amount for an exact band."""
        return self.rows[self.bands.index(band)][child_count - 1]

    def check_invariants(self) -> List[str]:
        """Verify the schedule's structural and ordering invariants.

        Returns:
            List of problem descriptions (empty if the schedule is sound)
        """
        problems = []
        width = len(CHILD_COUNT_RANGE)

        for prev, band in zip(self.bands, self.bands[1:]):
            if band <= prev:
                problems.append(f"bands not strictly increasing: {prev} then {band}")

        for band, row in zip(self.bands, self.rows):
            if len(row) != width:
                problems.append(f"band {band}: {len(row)} amounts, expected {width}")
                continue
            if any(v < 0 for v in row):
                problems.append(f"band {band}: negative amount")
            for children in range(1, width):
                if row[children] < row[children - 1]:
                    problems.append(
                        f"band {band}: {children + 1} children ({row[children]}) "
                        f"below {children} ({row[children - 1]})"
                    )

        for (prev_band, prev_row), (band, row) in zip(
            zip(self.bands, self.rows), zip(self.bands[1:], self.rows[1:])
        ):
            for col, (before, after) in enumerate(zip(prev_row, row)):
                if after < before:
                    problems.append(
                        f"{col + 1} children: band {band} ({after}) "
                        f"below band {prev_band} ({before})"
                    )

        for children, rate in self.excess_percentages.items():
            if children not in CHILD_COUNT_RANGE:
                problems.append(f"excess percentage for unsupported child count {children}")
            elif rate < 0:
                problems.append(f"excess percentage for {children} children is negative")

        return problems

    def lookup(self, combined_income: float, child_count: int) -> ObligationLookup:
        """Resolve the basic monthly obligation.

        Never raises. An unsupported child count or a non-finite income
        yields 0 and a missing excess percentage yields the unextrapolated
        top band; each adds a warning to the result.

        Args:
            combined_income: Combined monthly net income of both parents
            child_count: Number of children (1-6)

        Returns:
            ObligationLookup with amount, method and bracketing bands
        """
        if child_count not in CHILD_COUNT_RANGE:
            message = (
                "Number of children must be between 1 and 6 for guideline "
                f"calculation (got {child_count})."
            )
            logger.warning(message)
            return ObligationLookup(amount=0.0, method="invalid_child_count", warnings=[message])

        if not math.isfinite(combined_income):
            message = f"Combined income must be a finite number (got {combined_income})."
            logger.warning(message)
            return ObligationLookup(amount=0.0, method="invalid_income", warnings=[message])

        col = child_count - 1

        if combined_income < self.min_band:
            return ObligationLookup(
                amount=self.rows[0][col],
                method="below_schedule",
                upper_band=self.min_band,
            )

        if combined_income <= self.max_band:
            idx = bisect.bisect_left(self.bands, combined_income)
            if self.bands[idx] == combined_income:
                return ObligationLookup(
                    amount=self.rows[idx][col],
                    method="exact",
                    lower_band=self.bands[idx],
                )

            lower, upper = self.bands[idx - 1], self.bands[idx]
            lower_value, upper_value = self.rows[idx - 1][col], self.rows[idx][col]
            fraction = (combined_income - lower) / (upper - lower)
            return ObligationLookup(
                amount=lower_value + fraction * (upper_value - lower_value),
                method="interpolated",
                lower_band=lower,
                upper_band=upper,
            )

        top_value = self.rows[-1][col]
        rate = self.excess_percentages.get(child_count)
        if rate is None:
            message = f"No excess percentage defined for {child_count} children."
            logger.warning(message)
            return ObligationLookup(
                amount=top_value,
                method="top_band",
                lower_band=self.max_band,
                warnings=[message],
            )

        return ObligationLookup(
            amount=top_value + (combined_income - self.max_band) * rate,
            method="extrapolated",
            lower_band=self.max_band,
            excess_rate=rate,
        )


def basic_obligation(
    combined_income: float,
    child_count: int,
    schedule: Optional[GuidelineSchedule] = None,
) -> float:
    """Basic monthly obligation from the guideline schedule.

    Args:
        combined_income: Combined monthly net income
        child_count: Number of children (1-6; anything else returns 0)
        schedule: Schedule to use (default: configured guideline)

    Raises:
        GuidelineError: If no schedule is given and the configured
            guideline cannot be loaded
    """
    if schedule is None:
        from .guidelines import load_guideline
        schedule = load_guideline()
    return schedule.lookup(combined_income, child_count).amount
