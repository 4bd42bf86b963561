from typing import Optional
from loguru import logger
from finagent.config import settings
from finagent.models import BusinessSector
from finagent.services import llm_client

SYSTEM = "You are a Data Analyst Agent specialized in business and financial analysis."

def _benchmark_block(sector: Optional[BusinessSector]) -> str:
    if sector is None:
        return ""
    return (
        "\nSector Benchmark Data:\n"
        f"- Average Startup Cost: ${sector.total_startup_cost:,.0f}\n"
        f"- Expected Year 1 Revenue: ${sector.year1_revenue:,.0f}\n"
        f"- Gross Margin: {sector.gross_margin_target}%\n"
        f"- Year 1 ROI: ~{sector.year1_roi}%\n"
        f"- Index Score: {sector.index_score}/100\n"
        f"- Top Risk: {sector.top_risk}\n"
    )

def build_prompt(inputs, sector: Optional[BusinessSector]) -> str:
    return f"""Analyze the following business idea and provide insights:

Business Idea: {inputs.business_idea}
Selected Sector: {inputs.selected_sector or "Not specified"}
{_benchmark_block(sector)}
User's Assumptions:
- Startup Cost: ${inputs.startup_cost:,.0f}
- Monthly Revenue Target: ${inputs.monthly_revenue:,.0f}
- Gross Margin: {inputs.gross_margin}%
- Operating Expenses: ${inputs.operating_expenses:,.0f}/month

Provide a comprehensive analysis covering:
1. Market opportunity assessment
2. Competitive positioning
3. How the user's assumptions compare to sector benchmarks
4. Key success factors for this business

Keep your response concise and actionable (500-800 words)."""

def _offline_analysis(inputs, sector: Optional[BusinessSector]) -> str:
    lines = [f"Market analysis for: {inputs.business_idea}"]
    if sector is not None:
        gap = inputs.gross_margin - sector.gross_margin_target
        lines.append(f"Sector '{sector.sector_name}' targets a {sector.gross_margin_target}% gross margin; "
                     f"the plan is {abs(gap):.1f} points {'above' if gap >= 0 else 'below'} that benchmark.")
        lines.append(f"Typical startup cost in this sector is ${sector.total_startup_cost:,.0f} "
                     f"against a planned ${inputs.startup_cost:,.0f}.")
    monthly_profit = inputs.monthly_revenue * inputs.gross_margin / 100.0 - inputs.operating_expenses
    lines.append(f"At target volume the business contributes ${monthly_profit:,.0f} per month after operating expenses.")
    lines.append("Key success factors: disciplined cost control, early customer acquisition, cash runway.")
    return "\n".join(lines)

async def _call_llm(inputs, sector: Optional[BusinessSector]) -> str:
    if llm_client.is_offline():
        return _offline_analysis(inputs, sector)
    return await llm_client.complete_text(build_prompt(inputs, sector),
                                          model=settings.OPENAI_ANALYST_MODEL, system=SYSTEM)

async def analyze(inputs, sector: Optional[BusinessSector] = None) -> str:
    """Market-analysis stage: free-form prose consumed by the modeler."""
    text = await _call_llm(inputs, sector)
    logger.info(f"market analysis produced {len(text)} chars")
    return text
