"""Validation stage: local, deterministic repair of a generated financial model.

Never raises and never calls out. The artifact dict is mutated in place and
returned so the caller can chain it.
"""
import math
from typing import Any, Dict, List
from loguru import logger

MONTHS = 12
YEARS = 5
MIN_BREAK_EVEN, MAX_BREAK_EVEN = 1, 24

# month-over-month growth applied when padding short monthly arrays
REVENUE_GROWTH = 1.05
COST_GROWTH = 1.03
PROFIT_GROWTH = 1.07

# year 2..5 multipliers on year-1 figures
ANNUAL_REVENUE_MULTIPLIERS = (1.4, 1.9, 2.5, 3.2)
ANNUAL_EXPENSE_MULTIPLIERS = (1.3, 1.6, 2.0, 2.5)

def _finite(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)

def pad_revenue(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if rows and len(rows) < MONTHS:
        logger.warning(f"revenue projections have {len(rows)} months, padding to {MONTHS}")
    while rows and len(rows) < MONTHS:
        last = rows[-1]
        rows.append({
            "month": len(rows) + 1,
            "revenue": last["revenue"] * REVENUE_GROWTH,
            "costs": last["costs"] * COST_GROWTH,
            "grossProfit": last["grossProfit"] * PROFIT_GROWTH,
        })
    return rows

def pad_cash_flow(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if rows and len(rows) < MONTHS:
        logger.warning(f"cash flow has {len(rows)} months, padding to {MONTHS}")
    while rows and len(rows) < MONTHS:
        last = rows[-1]
        net = last["netCashFlow"] * PROFIT_GROWTH
        rows.append({
            "month": len(rows) + 1,
            "inflow": last["inflow"] * REVENUE_GROWTH,
            "outflow": last["outflow"] * COST_GROWTH,
            "netCashFlow": net,
            "cumulativeCash": last["cumulativeCash"] + net,
        })
    return rows

def reconstruct_annual(year1_revenue: Any, year1_net_profit: Any) -> List[Dict[str, Any]]:
    """Five-year table from year-1 figures, or [] when they can't support one."""
    if not (_finite(year1_revenue) and _finite(year1_net_profit)):
        return []
    if year1_revenue < year1_net_profit:
        return []
    year1_expenses = year1_revenue - year1_net_profit
    out = [{"year": 1, "revenue": year1_revenue, "expenses": year1_expenses,
            "grossProfit": year1_net_profit, "netProfit": year1_net_profit}]
    for i, (rm, em) in enumerate(zip(ANNUAL_REVENUE_MULTIPLIERS, ANNUAL_EXPENSE_MULTIPLIERS), start=2):
        revenue = year1_revenue * rm
        expenses = year1_expenses * em
        profit = revenue - expenses
        out.append({"year": i, "revenue": revenue, "expenses": expenses,
                    "grossProfit": profit, "netProfit": profit})
    return out

def clamp_break_even(value: Any) -> float:
    if not _finite(value):
        return MAX_BREAK_EVEN
    return min(max(value, MIN_BREAK_EVEN), MAX_BREAK_EVEN)

def _trim(rows: List[Dict[str, Any]], name: str) -> List[Dict[str, Any]]:
    if len(rows) > MONTHS:
        logger.warning(f"{name} has {len(rows)} months, trimming to {MONTHS}")
    return rows[:MONTHS]

def validate(artifact: Dict[str, Any]) -> Dict[str, Any]:
    artifact["revenueProjections"] = pad_revenue(_trim(artifact.get("revenueProjections") or [],
                                                       "revenue projections"))
    artifact["cashFlow"] = pad_cash_flow(_trim(artifact.get("cashFlow") or [], "cash flow"))

    metrics = artifact.setdefault("keyMetrics", {})
    annual = artifact.get("annualProjections")
    if not isinstance(annual, list) or len(annual) != YEARS:
        logger.warning(f"annual projections missing or incomplete "
                       f"({len(annual) if isinstance(annual, list) else 'absent'}), rebuilding from year 1")
        annual = reconstruct_annual(metrics.get("year1TotalRevenue"), metrics.get("year1NetProfit"))
        artifact["annualProjections"] = annual

    if len(annual) == YEARS:
        last = annual[-1]
        if not _finite(metrics.get("projectedYear5Revenue")):
            metrics["projectedYear5Revenue"] = last["revenue"]
        if not _finite(metrics.get("projectedYear5NetProfit")):
            metrics["projectedYear5NetProfit"] = last["netProfit"]

    metrics["breakEvenMonth"] = clamp_break_even(metrics.get("breakEvenMonth"))
    return artifact
