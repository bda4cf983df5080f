"""Child support guidelines worksheet.

Derives every worksheet line from the parties' inputs, in form order:

    1   combined net income
    2   basic monthly obligation (guideline schedule)
    3   percent of financial responsibility
    4   share of the basic obligation
    5d  child care and health costs
    6   additional support
    8   payments actually made
    9   minimum obligation (may be negative)

When either parent has at least 20% of the year's overnights, the
substantial shared parenting (gross-up) lines 10-21 follow and the
result is a SharedParentingWorksheet; otherwise a StandardWorksheet.

Pure calculation: no I/O beyond the (cached) default schedule load,
and no state carried between calls.
"""

from typing import Optional, Tuple

from .schedule import GuidelineSchedule
from .schemas import (
    SharedParentingWorksheet,
    StandardWorksheet,
    Transfer,
    WorksheetInput,
    WorksheetResult,
)


def responsibility_split(petitioner_income: float, respondent_income: float) -> Tuple[float, float]:
    """Line 3: each parent's fraction of combined income.

    Both are 0 when combined income is 0.
    """
    total = petitioner_income + respondent_income
    if total <= 0:
        return 0.0, 0.0
    petitioner = petitioner_income / total
    return petitioner, 1 - petitioner


def is_shared_parenting(inputs: WorksheetInput, schedule: GuidelineSchedule) -> bool:
    """True if either parent meets the overnight threshold (73 of 365)."""
    threshold = schedule.shared_parenting.threshold_overnights
    return inputs.petitioner_overnights >= threshold or inputs.respondent_overnights >= threshold


def evaluate(inputs: WorksheetInput, schedule: Optional[GuidelineSchedule] = None) -> WorksheetResult:
    """Compute the full worksheet for one set of inputs.

    Args:
        inputs: Parsed numeric inputs
        schedule: Guideline schedule (default: configured guideline)

    Returns:
        StandardWorksheet, or SharedParentingWorksheet when the overnight
        threshold is met. Lookup warnings are carried on result.warnings.

    Raises:
        GuidelineError: Only when no schedule is given and the configured
            guideline cannot be loaded
    """
    if schedule is None:
        from .guidelines import load_guideline
        schedule = load_guideline()

    # Line 1
    total_net_income = inputs.petitioner_net_income + inputs.respondent_net_income

    # Line 2
    obligation = schedule.lookup(total_net_income, inputs.child_count)
    basic = obligation.amount

    # Line 3
    petitioner_pct, respondent_pct = responsibility_split(
        inputs.petitioner_net_income, inputs.respondent_net_income
    )

    # Line 5d
    total_costs = _total_costs(inputs)

    # Line 8
    petitioner_paid, respondent_paid = _payments_made(inputs)

    petitioner_additional = total_costs * petitioner_pct
    respondent_additional = total_costs * respondent_pct

    fields = dict(
        guideline=schedule.name,
        child_count=inputs.child_count,
        obligation=obligation,
        warnings=list(obligation.warnings),
        petitioner_net_income=inputs.petitioner_net_income,
        respondent_net_income=inputs.respondent_net_income,
        total_net_income=total_net_income,
        basic_obligation=basic,
        petitioner_percent=petitioner_pct,
        respondent_percent=respondent_pct,
        petitioner_share_basic=basic * petitioner_pct,
        respondent_share_basic=basic * respondent_pct,
        total_additional_costs=total_costs,
        petitioner_additional_support=petitioner_additional,
        respondent_additional_support=respondent_additional,
        petitioner_total_paid=petitioner_paid,
        respondent_total_paid=respondent_paid,
        petitioner_minimum_obligation=basic * petitioner_pct + petitioner_additional - petitioner_paid,
        respondent_minimum_obligation=basic * respondent_pct + respondent_additional - respondent_paid,
    )

    if not is_shared_parenting(inputs, schedule):
        return StandardWorksheet(**fields)

    rules = schedule.shared_parenting

    # Line 10-11
    increased = basic * rules.gross_up_factor
    petitioner_increased = increased * petitioner_pct
    respondent_increased = increased * respondent_pct

    # Line 12: fraction of the whole year, not of the two counts' sum
    total_overnights = inputs.petitioner_overnights + inputs.respondent_overnights
    if total_overnights > 0:
        petitioner_nights = inputs.petitioner_overnights / rules.days_per_year
        respondent_nights = inputs.respondent_overnights / rules.days_per_year
    else:
        petitioner_nights = respondent_nights = 0.0

    # Line 13
    petitioner_cross = petitioner_increased * respondent_nights
    respondent_cross = respondent_increased * petitioner_nights

    # Lines 14d, 15, 17 are computed again for the shared parenting section
    shared_costs = _total_costs(inputs)
    petitioner_shared_additional = shared_costs * petitioner_pct
    respondent_shared_additional = shared_costs * respondent_pct
    petitioner_shared_paid, respondent_shared_paid = _payments_made(inputs)

    # Line 18
    petitioner_transfer = max(0.0, petitioner_shared_additional - petitioner_shared_paid)
    respondent_transfer = max(0.0, respondent_shared_additional - respondent_shared_paid)

    # Lines 19-20
    owed_to_respondent = petitioner_cross + petitioner_transfer
    owed_to_petitioner = respondent_cross + respondent_transfer

    return SharedParentingWorksheet(
        **fields,
        increased_obligation=increased,
        petitioner_increased_share=petitioner_increased,
        respondent_increased_share=respondent_increased,
        petitioner_overnight_percent=petitioner_nights,
        respondent_overnight_percent=respondent_nights,
        petitioner_cross_obligation=petitioner_cross,
        respondent_cross_obligation=respondent_cross,
        shared_total_additional_costs=shared_costs,
        petitioner_shared_additional_support=petitioner_shared_additional,
        respondent_shared_additional_support=respondent_shared_additional,
        petitioner_shared_total_paid=petitioner_shared_paid,
        respondent_shared_total_paid=respondent_shared_paid,
        petitioner_transfer_amount=petitioner_transfer,
        respondent_transfer_amount=respondent_transfer,
        owed_petitioner_to_respondent=owed_to_respondent,
        owed_respondent_to_petitioner=owed_to_petitioner,
        # Line 21
        transfer=Transfer.settle(owed_to_respondent, owed_to_petitioner),
    )


def _total_costs(inputs: WorksheetInput) -> float:
    return inputs.childcare_costs + inputs.health_insurance_costs + inputs.noncovered_medical_costs


def _payments_made(inputs: WorksheetInput) -> Tuple[float, float]:
    petitioner = (
        inputs.petitioner_childcare_paid
        + inputs.petitioner_health_insurance_paid
        + inputs.petitioner_other_paid
    )
    respondent = (
        inputs.respondent_childcare_paid
        + inputs.respondent_health_insurance_paid
        + inputs.respondent_other_paid
    )
    return petitioner, respondent
