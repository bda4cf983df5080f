"""Support Calc MCP Server - FastMCP implementation for worksheet tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from supportcalc.sdk import (
    GuidelineError,
    build_inputs,
    evaluate,
    find_guideline_path,
    list_guidelines,
    load_guideline,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("support-calc")


# --- Tools ---

@mcp.tool()
async def calculate_worksheet(
    petitioner_net_income: str = Field(default="0", description="Petitioner present net monthly income"),
    respondent_net_income: str = Field(default="0", description="Respondent present net monthly income"),
    child_count: str = Field(default="1", description="Number of minor children (1-6)"),
    childcare_costs: str = Field(default="0", description="100% of monthly child care costs"),
    health_insurance_costs: str = Field(default="0", description="Total monthly children's health insurance cost"),
    noncovered_medical_costs: str = Field(default="0", description="Monthly noncovered medical/dental/prescription costs"),
    petitioner_childcare_paid: str = Field(default="0", description="Childcare payments actually made by petitioner"),
    respondent_childcare_paid: str = Field(default="0", description="Childcare payments actually made by respondent"),
    petitioner_health_insurance_paid: str = Field(default="0", description="Health insurance paid by petitioner"),
    respondent_health_insurance_paid: str = Field(default="0", description="Health insurance paid by respondent"),
    petitioner_other_paid: str = Field(default="0", description="Other payments/credits made by petitioner"),
    respondent_other_paid: str = Field(default="0", description="Other payments/credits made by respondent"),
    petitioner_overnights: str = Field(default="0", description="Annual overnights with petitioner"),
    respondent_overnights: str = Field(default="0", description="Annual overnights with respondent"),
    guideline: str | None = Field(default=None, description="Guideline name (default: configured guideline)"),
) -> dict[str, Any]:
    """Calculate the child support guidelines worksheet. Returns every worksheet line, the final transfer amount and who pays it."""
    raw = {
        "petitioner_net_income": petitioner_net_income,
        "respondent_net_income": respondent_net_income,
        "child_count": child_count,
        "childcare_costs": childcare_costs,
        "health_insurance_costs": health_insurance_costs,
        "noncovered_medical_costs": noncovered_medical_costs,
        "petitioner_childcare_paid": petitioner_childcare_paid,
        "respondent_childcare_paid": respondent_childcare_paid,
        "petitioner_health_insurance_paid": petitioner_health_insurance_paid,
        "respondent_health_insurance_paid": respondent_health_insurance_paid,
        "petitioner_other_paid": petitioner_other_paid,
        "respondent_other_paid": respondent_other_paid,
        "petitioner_overnights": petitioner_overnights,
        "respondent_overnights": respondent_overnights,
    }
    try:
        inputs, warnings = build_inputs(raw)
        result = evaluate(inputs, load_guideline(guideline))

        payload = result.model_dump(mode="json")
        payload["warnings"] = warnings + payload["warnings"]
        payload["lines"] = [line._asdict() for line in result.lines()]
        return payload

    except GuidelineError as e:
        return {"error": str(e), "worksheet": None}
    except Exception as e:
        logger.error(f"Error calculating worksheet: {e}")
        return {"error": str(e), "worksheet": None}


@mcp.tool()
async def lookup_basic_obligation(
    combined_income: float = Field(description="Combined monthly net income of both parents"),
    child_count: int = Field(description="Number of children (1-6)"),
    guideline: str | None = Field(default=None, description="Guideline name (default: configured guideline)"),
) -> dict[str, Any]:
    """Look up the basic monthly obligation from the guideline schedule, with the interpolation/extrapolation method used."""
    try:
        schedule = load_guideline(guideline)
        lookup = schedule.lookup(combined_income, child_count)
        return {
            "guideline": schedule.name,
            "combined_income": combined_income,
            "child_count": child_count,
            **lookup.model_dump(),
        }
    except GuidelineError as e:
        return {"error": str(e), "amount": None}


# --- Resources ---

@mcp.resource("supportcalc://guidelines")
async def list_guidelines_resource() -> str:
    """List available guideline schedules with their band range."""
    try:
        guidelines = {}
        for name in list_guidelines():
            schedule = load_guideline(name)
            guidelines[name] = {
                "title": schedule.title,
                "statute": schedule.statute,
                "path": str(find_guideline_path(name)),
                "min_band": schedule.min_band,
                "max_band": schedule.max_band,
                "excess_percentages": dict(schedule.excess_percentages),
            }
        return json.dumps({"guidelines": guidelines}, indent=2)
    except GuidelineError as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
