from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from finagent.config import settings
import os
from typing import Any, Dict, List, Sequence, Tuple

CURRENCY = '"$"#,##0.00'
WHITE_BOLD = Font(bold=True, color="FFFFFF")

def _fill(rgb: str) -> PatternFill:
    return PatternFill(start_color=rgb, end_color=rgb, fill_type="solid")

def _table_sheet(wb, title: str, columns: Sequence[Tuple[str, int]], rows: List[Sequence[Any]],
                 header_rgb: str, currency_cols: Sequence[int] = (), auto_filter: bool = True):
    ws = wb.create_sheet(title)
    for j, (header, width) in enumerate(columns, start=1):
        c = ws.cell(row=1, column=j, value=header)
        c.font = WHITE_BOLD
        c.fill = _fill(header_rgb)
        ws.column_dimensions[get_column_letter(j)].width = width
    for i, row in enumerate(rows, start=2):
        for j, value in enumerate(row, start=1):
            cell = ws.cell(row=i, column=j, value=value)
            if j in currency_cols:
                cell.number_format = CURRENCY
    ws.freeze_panes = "A2"
    if auto_filter:
        ws.auto_filter.ref = f"A1:{get_column_letter(len(columns))}{max(1, len(rows) + 1)}"
    return ws

def _pct(num: float, den: float) -> str:
    return f"{num / den * 100:.1f}%" if den else "n/a"

def build_workbook(model_id: str, run_id: str, artifact: Dict[str, Any], business_idea: str) -> str:
    os.makedirs(settings.EXPORT_DIR, exist_ok=True)
    wb = Workbook()
    wb.remove(wb.active)
    wb.properties.creator = "finagent"

    summary = wb.create_sheet("Executive Summary")
    summary.column_dimensions["A"].width = 30
    summary.column_dimensions["B"].width = 90
    summary.append(["Business Idea", business_idea])
    summary.append([])
    summary.append(["EXECUTIVE SUMMARY"])
    summary["A3"].font = Font(bold=True, size=14)
    summary.append([])
    for line in artifact.get("executiveSummary", "").split("\n"):
        summary.append(["", line])
        summary.cell(row=summary.max_row, column=2).alignment = Alignment(wrap_text=True, vertical="top")

    _table_sheet(wb, "Revenue Projections",
                 [("Month", 12), ("Revenue", 18), ("COGS", 18), ("Gross Profit", 18), ("Margin %", 15)],
                 [(r["month"], r["revenue"], r["costs"], r["grossProfit"], _pct(r["grossProfit"], r["revenue"]))
                  for r in artifact["revenueProjections"]],
                 header_rgb="4472C4", currency_cols=(2, 3, 4))

    _table_sheet(wb, "Cash Flow",
                 [("Month", 12), ("Cash Inflow", 18), ("Cash Outflow", 18), ("Net Cash Flow", 18),
                  ("Cumulative Cash", 20)],
                 [(c["month"], c["inflow"], c["outflow"], c["netCashFlow"], c["cumulativeCash"])
                  for c in artifact["cashFlow"]],
                 header_rgb="70AD47", currency_cols=(2, 3, 4, 5))

    annual = artifact.get("annualProjections") or []
    if annual:
        ws = _table_sheet(wb, "Annual Projections",
                          [("Year", 16), ("Revenue", 18), ("Total Expenses", 18), ("Gross Profit", 18),
                           ("Net Profit", 18), ("Profit Margin %", 15)],
                          [(f"Year {a['year']}", a["revenue"], a["expenses"], a["grossProfit"], a["netProfit"],
                            _pct(a["netProfit"], a["revenue"])) for a in annual],
                          header_rgb="9966FF", currency_cols=(2, 3, 4, 5))
        last = len(annual) + 1
        total = last + 2
        ws.cell(row=total, column=1, value="TOTAL (5 Years)")
        for j, col in enumerate("BCDE", start=2):
            c = ws.cell(row=total, column=j, value=f"=SUM({col}2:{col}{last})")
            c.number_format = CURRENCY
        for j in range(1, 7):
            ws.cell(row=total, column=j).font = Font(bold=True)
            ws.cell(row=total, column=j).fill = _fill("E0E0E0")

    km = artifact["keyMetrics"]
    metrics = wb.create_sheet("Key Metrics")
    metrics.column_dimensions["A"].width = 30
    metrics.column_dimensions["B"].width = 20
    metrics.append(["KEY FINANCIAL METRICS"])
    metrics["A1"].font = Font(bold=True, size=14)
    metrics.append([])
    metrics.append(["Break-Even Month", f"Month {km['breakEvenMonth']:g}"])
    money_rows = [("Year 1 Total Revenue", km["year1TotalRevenue"]), ("Year 1 Net Profit", km["year1NetProfit"])]
    for label, value in money_rows:
        metrics.append([label, value])
        metrics.cell(row=metrics.max_row, column=2).number_format = CURRENCY
    metrics.append(["ROI %", f"{km['roi']:.1f}%"])
    metrics.append(["Payback Period (months)", km["paybackPeriod"]])
    if km.get("projectedYear5Revenue") is not None and km.get("projectedYear5NetProfit") is not None:
        metrics.append([])
        metrics.append(["5-YEAR PROJECTIONS"])
        metrics.cell(row=metrics.max_row, column=1).font = Font(bold=True)
        for label, value in (("Year 5 Revenue", km["projectedYear5Revenue"]),
                             ("Year 5 Net Profit", km["projectedYear5NetProfit"])):
            metrics.append([label, value])
            metrics.cell(row=metrics.max_row, column=2).number_format = CURRENCY

    _table_sheet(wb, "Risk Analysis", [("Risk", 35), ("Impact", 15), ("Mitigation Strategy", 60)],
                 [(r["risk"], r["impact"], r["mitigation"]) for r in artifact.get("riskAnalysis") or []],
                 header_rgb="FFC000")

    recs = _table_sheet(wb, "Recommendations", [("#", 6), ("Strategic Recommendation", 90)],
                        [(i, rec) for i, rec in enumerate(artifact.get("recommendations") or [], start=1)],
                        header_rgb="5B9BD5", auto_filter=False)
    for row in recs.iter_rows(min_row=2, min_col=2, max_col=2):
        row[0].alignment = Alignment(wrap_text=True, vertical="top")

    outpath = os.path.join(settings.EXPORT_DIR, f"financial-model-{model_id}-{run_id}.xlsx")
    wb.save(outpath)
    return outpath
