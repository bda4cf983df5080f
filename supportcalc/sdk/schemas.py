"""Pydantic schemas for support-calc data validation.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in guideline files and scenarios cause clear errors rather than
silent ignoring. Worksheet inputs and results are frozen: a result is
built once per calculation and never updated in place.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


CHILD_COUNT_RANGE = range(1, 7)


# =============================================================================
# Guideline files (supportcalc/guidelines/*.yaml)
# =============================================================================


class SharedParentingRules(BaseModel):
    """Substantial shared parenting (gross-up method) constants."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    threshold_fraction: float = Field(
        default=0.20, gt=0, le=1,
        description="Share of the year's overnights either parent must reach",
    )
    days_per_year: float = Field(default=365, gt=0, description="Overnights in a year")
    gross_up_factor: float = Field(
        default=1.5, ge=1, description="Multiplier applied to the basic obligation"
    )

    @property
    def threshold_overnights(self) -> float:
        """Minimum annual overnights that qualify (73 for the defaults)."""
        return self.days_per_year * self.threshold_fraction


class GuidelineFile(BaseModel):
    """Schema for a guideline YAML file."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    title: str = ""
    statute: str = ""
    excess_percentages: Dict[int, float] = Field(
        default_factory=dict,
        description="Child count -> rate applied to income above the top band",
    )
    shared_parenting: SharedParentingRules = Field(default_factory=SharedParentingRules)
    schedule: Dict[int, List[float]] = Field(
        ..., description="Income band -> obligation for 1..6 children"
    )

    @field_validator("schedule")
    @classmethod
    def check_schedule(cls, value: Dict[int, List[float]]) -> Dict[int, List[float]]:
        if not value:
            raise ValueError("schedule must contain at least one income band")
        for band, row in value.items():
            if band <= 0:
                raise ValueError(f"income band {band} must be positive")
            if len(row) != len(CHILD_COUNT_RANGE):
                raise ValueError(
                    f"income band {band} has {len(row)} amounts, expected {len(CHILD_COUNT_RANGE)}"
                )
            if any(amount < 0 for amount in row):
                raise ValueError(f"income band {band} has a negative amount")
        return value

    @field_validator("excess_percentages")
    @classmethod
    def check_excess_percentages(cls, value: Dict[int, float]) -> Dict[int, float]:
        for children, rate in value.items():
            if children not in CHILD_COUNT_RANGE:
                raise ValueError(f"excess percentage defined for unsupported child count {children}")
            if not 0 <= rate <= 1:
                raise ValueError(f"excess percentage for {children} children must be between 0 and 1")
        return value


# =============================================================================
# Schedule lookup
# =============================================================================


LookupMethod = Literal[
    "exact",
    "interpolated",
    "below_schedule",
    "extrapolated",
    "top_band",
    "invalid_child_count",
    "invalid_income",
]


class ObligationLookup(BaseModel):
    """Basic monthly obligation plus how it was derived from the schedule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: float = Field(..., ge=0)
    method: LookupMethod
    lower_band: Optional[int] = Field(None, description="Band at or below the income")
    upper_band: Optional[int] = Field(None, description="Band above the income")
    excess_rate: Optional[float] = Field(None, description="Rate used above the top band")
    warnings: List[str] = Field(default_factory=list)


# =============================================================================
# Worksheet
# =============================================================================


class WorksheetInput(BaseModel):
    """Numeric inputs for one worksheet calculation.

    Raw text is coerced by supportcalc.sdk.inputs before reaching here.
    NaN and infinite amounts are rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    petitioner_net_income: float = Field(default=0, ge=0, description="Present net monthly income")
    respondent_net_income: float = Field(default=0, ge=0, description="Present net monthly income")
    child_count: int = Field(default=0, description="Number of minor children (1-6 supported)")

    childcare_costs: float = Field(default=0, ge=0, description="100% of monthly child care costs")
    health_insurance_costs: float = Field(
        default=0, ge=0, description="Total monthly children's health insurance cost"
    )
    noncovered_medical_costs: float = Field(
        default=0, ge=0,
        description="Monthly noncovered medical, dental and prescription costs",
    )

    petitioner_childcare_paid: float = Field(default=0, ge=0)
    respondent_childcare_paid: float = Field(default=0, ge=0)
    petitioner_health_insurance_paid: float = Field(default=0, ge=0)
    respondent_health_insurance_paid: float = Field(default=0, ge=0)
    petitioner_other_paid: float = Field(default=0, ge=0, description="Other payments/credits")
    respondent_other_paid: float = Field(default=0, ge=0, description="Other payments/credits")

    petitioner_overnights: float = Field(default=0, ge=0, description="Annual overnights")
    respondent_overnights: float = Field(default=0, ge=0, description="Annual overnights")


class TransferDirection(str, Enum):
    PETITIONER_TO_RESPONDENT = "petitioner_to_respondent"
    RESPONDENT_TO_PETITIONER = "respondent_to_petitioner"
    NONE = "none"


TRANSFER_LABELS = {
    TransferDirection.PETITIONER_TO_RESPONDENT: "Petitioner to Respondent",
    TransferDirection.RESPONDENT_TO_PETITIONER: "Respondent to Petitioner",
    TransferDirection.NONE: "No transfer",
}


class Transfer(BaseModel):
    """Line 21: the net child support to be paid and who pays it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: float = Field(..., ge=0)
    direction: TransferDirection
    label: str

    @classmethod
    def settle(cls, owed_petitioner_to_respondent: float,
               owed_respondent_to_petitioner: float) -> "Transfer":
        """Net the two amounts owed into a single labelled payment."""
        if owed_petitioner_to_respondent > owed_respondent_to_petitioner:
            direction = TransferDirection.PETITIONER_TO_RESPONDENT
            amount = owed_petitioner_to_respondent - owed_respondent_to_petitioner
        elif owed_respondent_to_petitioner > owed_petitioner_to_respondent:
            direction = TransferDirection.RESPONDENT_TO_PETITIONER
            amount = owed_respondent_to_petitioner - owed_petitioner_to_respondent
        else:
            direction = TransferDirection.NONE
            amount = 0.0
        return cls(amount=amount, direction=direction, label=TRANSFER_LABELS[direction])


class WorksheetLine(NamedTuple):
    """One displayable worksheet row. Unused columns are None."""

    number: str
    label: str
    petitioner: Optional[float] = None
    respondent: Optional[float] = None
    total: Optional[float] = None
    percent: bool = False


class WorksheetBase(BaseModel):
    """Lines 1-9, shared by both worksheet variants."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    guideline: str = Field(..., description="Guideline schedule name")
    child_count: int
    obligation: ObligationLookup = Field(..., description="Line 2 lookup detail")
    warnings: List[str] = Field(default_factory=list)

    # Line 1
    petitioner_net_income: float
    respondent_net_income: float
    total_net_income: float
    # Line 2
    basic_obligation: float
    # Line 3
    petitioner_percent: float
    respondent_percent: float
    # Line 4
    petitioner_share_basic: float
    respondent_share_basic: float
    # Line 5d
    total_additional_costs: float
    # Line 6
    petitioner_additional_support: float
    respondent_additional_support: float
    # Line 8
    petitioner_total_paid: float
    respondent_total_paid: float
    # Line 9 (negative means payments exceed the obligation)
    petitioner_minimum_obligation: float
    respondent_minimum_obligation: float

    @property
    def is_shared_parenting(self) -> bool:
        return False

    def lines(self) -> List[WorksheetLine]:
        """Worksheet rows in form order."""
        return [
            WorksheetLine("1", "Present Net Monthly Income",
                          self.petitioner_net_income, self.respondent_net_income,
                          self.total_net_income),
            WorksheetLine("2", "Basic Monthly Obligation", total=self.basic_obligation),
            WorksheetLine("3", "Percent of Financial Responsibility",
                          self.petitioner_percent, self.respondent_percent, percent=True),
            WorksheetLine("4", "Share of Basic Monthly Obligations",
                          self.petitioner_share_basic, self.respondent_share_basic),
            WorksheetLine("5d", "Total Monthly Child Care & Health Costs",
                          total=self.total_additional_costs),
            WorksheetLine("6", "Additional Support Payments",
                          self.petitioner_additional_support, self.respondent_additional_support),
            WorksheetLine("8", "Total Support Payments Actually Made",
                          self.petitioner_total_paid, self.respondent_total_paid),
            WorksheetLine("9", "Minimum Child Support Obligation for Each Parent",
                          self.petitioner_minimum_obligation, self.respondent_minimum_obligation),
        ]


class StandardWorksheet(WorksheetBase):
    """Worksheet where neither parent reaches the shared-parenting threshold."""

    kind: Literal["standard"] = "standard"


class SharedParentingWorksheet(WorksheetBase):
    """Worksheet including the substantial shared parenting (gross-up) lines."""

    kind: Literal["shared_parenting"] = "shared_parenting"

    # Line 10
    increased_obligation: float
    # Line 11
    petitioner_increased_share: float
    respondent_increased_share: float
    # Line 12
    petitioner_overnight_percent: float
    respondent_overnight_percent: float
    # Line 13: each parent's share weighted by the other parent's overnights
    petitioner_cross_obligation: float
    respondent_cross_obligation: float
    # Line 14d
    shared_total_additional_costs: float
    # Line 15
    petitioner_shared_additional_support: float
    respondent_shared_additional_support: float
    # Line 17
    petitioner_shared_total_paid: float
    respondent_shared_total_paid: float
    # Line 18 (never negative)
    petitioner_transfer_amount: float = Field(..., ge=0)
    respondent_transfer_amount: float = Field(..., ge=0)
    # Lines 19 and 20
    owed_petitioner_to_respondent: float
    owed_respondent_to_petitioner: float
    # Line 21
    transfer: Transfer

    @property
    def is_shared_parenting(self) -> bool:
        return True

    def lines(self) -> List[WorksheetLine]:
        return super().lines() + [
            WorksheetLine("10", "Basic Monthly Obligation x 150%", total=self.increased_obligation),
            WorksheetLine("11", "Increased Basic Obligation for each parent",
                          self.petitioner_increased_share, self.respondent_increased_share),
            WorksheetLine("12", "Percentage of overnight stays with each parent",
                          self.petitioner_overnight_percent, self.respondent_overnight_percent,
                          percent=True),
            WorksheetLine("13", "Parent's support multiplied by other Parent's percentage of overnights",
                          self.petitioner_cross_obligation, self.respondent_cross_obligation),
            WorksheetLine("14d", "Total Monthly Child Care & Health Costs (Shared Parenting)",
                          total=self.shared_total_additional_costs),
            WorksheetLine("15", "Additional Support Payments (Shared Parenting)",
                          self.petitioner_shared_additional_support,
                          self.respondent_shared_additional_support),
            WorksheetLine("17", "Total Support Payments Actually Made (Shared Parenting)",
                          self.petitioner_shared_total_paid, self.respondent_shared_total_paid),
            WorksheetLine("18", "Total Additional Support Transfer Amount",
                          self.petitioner_transfer_amount, self.respondent_transfer_amount),
            WorksheetLine("19", "Total Child Support Owed from Petitioner to Respondent",
                          total=self.owed_petitioner_to_respondent),
            WorksheetLine("20", "Total Child Support Owed from Respondent to Petitioner",
                          total=self.owed_respondent_to_petitioner),
            WorksheetLine("21", f"Actual Child Support to Be Paid ({self.transfer.label})",
                          total=self.transfer.amount),
        ]


WorksheetResult = Annotated[
    Union[StandardWorksheet, SharedParentingWorksheet],
    Field(discriminator="kind"),
]
