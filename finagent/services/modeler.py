from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError
from loguru import logger
from finagent.config import settings
from finagent.errors import ArtifactSchemaError
from finagent.services import llm_client

class RevenueProjection(BaseModel):
    month: int
    revenue: float
    costs: float
    grossProfit: float

class CashFlowEntry(BaseModel):
    month: int
    inflow: float
    outflow: float
    netCashFlow: float
    cumulativeCash: float

class AnnualProjection(BaseModel):
    year: int
    revenue: float
    expenses: float
    grossProfit: float
    netProfit: float

class KeyMetrics(BaseModel):
    breakEvenMonth: float
    year1TotalRevenue: float
    year1NetProfit: float
    roi: float
    paybackPeriod: float
    projectedYear5Revenue: Optional[float] = None
    projectedYear5NetProfit: Optional[float] = None

class RiskEntry(BaseModel):
    risk: str
    impact: str
    mitigation: str

class GeneratedArtifact(BaseModel):
    executiveSummary: str
    revenueProjections: List[RevenueProjection] = Field(min_length=1)
    cashFlow: List[CashFlowEntry] = Field(min_length=1)
    annualProjections: Optional[List[AnnualProjection]] = None
    keyMetrics: KeyMetrics
    riskAnalysis: List[RiskEntry]
    recommendations: List[str]

SYSTEM = """You are a Financial Modeler Agent. Create detailed financial projections based on the provided business data.

Generate a comprehensive financial model with:
1. Executive Summary (2-3 paragraphs)
2. Monthly revenue projections for 12 months
3. Monthly cash flow projections for 12 months
4. Annual projections for years 1-5
5. Key financial metrics (break-even month, total revenue, net profit, ROI, payback period, year 5 revenue and net profit)
6. Risk analysis (3-5 key risks with impact and mitigation)
7. Strategic recommendations (5-7 actionable items)

Respond ONLY with valid JSON matching the provided schema."""

def build_prompt(inputs, analysis: str) -> str:
    return f"""Business Idea: {inputs.business_idea}
Startup Cost: ${inputs.startup_cost:,.0f}
Monthly Revenue Target: ${inputs.monthly_revenue:,.0f}
Gross Margin: {inputs.gross_margin}%
Operating Expenses: ${inputs.operating_expenses:,.0f}/month

Data Analyst Insights:
{analysis}

Generate the complete financial model."""

def _offline_model(inputs) -> Dict[str, Any]:
    margin = inputs.gross_margin / 100.0
    opex = inputs.operating_expenses
    revenue_rows, cash_rows = [], []
    cumulative = -inputs.startup_cost
    break_even = None
    for m in range(1, 13):
        revenue = round(inputs.monthly_revenue * min(1.0, 0.5 + 0.05 * (m - 1)), 2)
        gross = round(revenue * margin, 2)
        costs = round(revenue - gross, 2)
        outflow = round(costs + opex, 2)
        net = round(revenue - outflow, 2)
        cumulative = round(cumulative + net, 2)
        if break_even is None and cumulative >= 0:
            break_even = m
        revenue_rows.append({"month": m, "revenue": revenue, "costs": costs, "grossProfit": gross})
        cash_rows.append({"month": m, "inflow": revenue, "outflow": outflow,
                          "netCashFlow": net, "cumulativeCash": cumulative})
    year1_revenue = round(sum(r["revenue"] for r in revenue_rows), 2)
    year1_net = round(sum(c["netCashFlow"] for c in cash_rows), 2)
    avg_profit = year1_net / 12.0
    payback = round(inputs.startup_cost / avg_profit, 1) if avg_profit > 0 else 24
    roi = round(year1_net / inputs.startup_cost * 100.0, 1) if inputs.startup_cost else 0.0
    return {
        "executiveSummary": (f"{inputs.business_idea}\n"
                             f"Year 1 revenue is projected at ${year1_revenue:,.0f} with a "
                             f"{inputs.gross_margin}% gross margin."),
        "revenueProjections": revenue_rows,
        "cashFlow": cash_rows,
        "keyMetrics": {"breakEvenMonth": break_even or 24, "year1TotalRevenue": year1_revenue,
                       "year1NetProfit": year1_net, "roi": roi, "paybackPeriod": payback},
        "riskAnalysis": [
            {"risk": "Slower customer acquisition", "impact": "High",
             "mitigation": "Stage marketing spend against monthly sign-up targets."},
            {"risk": "Cost overruns at launch", "impact": "Medium",
             "mitigation": "Hold a 15% contingency on the startup budget."},
            {"risk": "Margin pressure from competitors", "impact": "Medium",
             "mitigation": "Differentiate on service and renegotiate supplier terms quarterly."},
        ],
        "recommendations": [
            "Validate pricing with a pilot group before full launch.",
            "Track monthly cash burn against the projection.",
            "Secure a working-capital line before month 3.",
            "Review gross margin by product line every quarter.",
            "Revisit operating expenses once revenue stabilises.",
        ],
    }

async def _call_llm(inputs, analysis: str) -> Any:
    if llm_client.is_offline():
        return _offline_model(inputs)
    return await llm_client.complete_json(
        build_prompt(inputs, analysis), model=settings.OPENAI_MODEL, system=SYSTEM,
        schema=GeneratedArtifact.model_json_schema(), schema_name="financial_model",
    )

def parse_artifact(raw: Any) -> Dict[str, Any]:
    """Post-parse validation: reject payloads that are JSON but not an artifact."""
    try:
        artifact = GeneratedArtifact.model_validate(raw)
    except ValidationError as e:
        raise ArtifactSchemaError(f"financial model does not match schema: {e.error_count()} error(s): "
                                  f"{e.errors()[0]['loc']} {e.errors()[0]['msg']}") from e
    return artifact.model_dump()

async def build_model(inputs, analysis: str) -> Dict[str, Any]:
    """Model-construction stage."""
    raw = await _call_llm(inputs, analysis)
    artifact = parse_artifact(raw)
    logger.info(f"model construction returned {len(artifact['revenueProjections'])} revenue months, "
                f"{len(artifact['cashFlow'])} cash-flow months")
    return artifact
