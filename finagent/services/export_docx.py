from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from finagent.config import settings
from finagent.models import BusinessSector
from datetime import date
import os
from typing import Dict, Any, List, Optional, Sequence

def _h(doc, text, lvl=1): doc.add_heading(text, level=lvl)
def _p(doc, text): doc.add_paragraph(text)
def _money(v) -> str: return f"${v:,.2f}"

def _table(doc, header: Sequence[str], rows: List[Sequence[str]]):
    ncols = len(header)
    table = doc.add_table(rows=0, cols=ncols)
    table.style = "Table Grid"
    cells = table.add_row().cells
    for i, label in enumerate(header):
        cells[i].paragraphs[0].add_run(label).bold = True
    for row in rows:
        cells = table.add_row().cells
        for i, value in enumerate(row):
            cells[i].text = str(value)
    return table

def _label_table(doc, rows: List[Sequence[str]]):
    table = doc.add_table(rows=0, cols=2)
    table.style = "Table Grid"
    for label, value in rows:
        cells = table.add_row().cells
        cells[0].paragraphs[0].add_run(label).bold = True
        cells[1].text = value
    return table

def _key_metrics_rows(km: Dict[str, Any]) -> List[Sequence[str]]:
    rows = [
        ("Break-Even Month", f"Month {km['breakEvenMonth']:g}"),
        ("Year 1 Total Revenue", _money(km["year1TotalRevenue"])),
        ("Year 1 Net Profit", _money(km["year1NetProfit"])),
        ("Return on Investment (ROI)", f"{km['roi']:.1f}%"),
        ("Payback Period", f"{km['paybackPeriod']:g} months"),
    ]
    if km.get("projectedYear5Revenue") is not None and km.get("projectedYear5NetProfit") is not None:
        rows.append(("Year 5 Revenue (Projected)", _money(km["projectedYear5Revenue"])))
        rows.append(("Year 5 Net Profit (Projected)", _money(km["projectedYear5NetProfit"])))
    return rows

def _sector_rows(sector: BusinessSector) -> List[Sequence[str]]:
    return [
        ("Index Score", f"{sector.index_score}/100"),
        ("Average Startup Cost", _money(sector.total_startup_cost)),
        ("Expected Year 1 Revenue", _money(sector.year1_revenue)),
        ("Target Gross Margin", f"{sector.gross_margin_target:.1f}%"),
        ("Expected Year 1 ROI", f"{sector.year1_roi:.1f}%"),
        ("ROI Potential", f"{sector.roi_potential}/10"),
        ("Scalability", f"{sector.scalability}/10"),
        ("Market Resilience", f"{sector.market_resilience}/10"),
        ("Execution Simplicity", f"{sector.execution_simplicity}/10"),
        ("Compliance Simplicity", f"{sector.compliance_simplicity}/10"),
    ]

def build_doc(model_id: str, run_id: str, artifact: Dict[str, Any], business_idea: str,
              sector: Optional[BusinessSector] = None) -> str:
    os.makedirs(settings.EXPORT_DIR, exist_ok=True)
    doc = Document()
    _h(doc, "Business Research Report", 0)
    idea = doc.add_paragraph(business_idea)
    idea.alignment = WD_ALIGN_PARAGRAPH.CENTER
    stamp = doc.add_paragraph(f"Generated: {date.today().isoformat()}")
    stamp.alignment = WD_ALIGN_PARAGRAPH.CENTER

    _h(doc, "Executive Summary", 1)
    for line in artifact.get("executiveSummary", "").split("\n"):
        _p(doc, line)

    doc.add_page_break()
    _h(doc, "Financial Overview", 1)
    _h(doc, "Key Financial Metrics", 2)
    _label_table(doc, _key_metrics_rows(artifact["keyMetrics"]))

    annual = artifact.get("annualProjections") or []
    if annual:
        _h(doc, "5-Year Financial Projections", 2)
        _table(doc, ["Year", "Revenue", "Expenses", "Gross Profit", "Net Profit"],
               [(f"Year {a['year']}", _money(a["revenue"]), _money(a["expenses"]),
                 _money(a["grossProfit"]), _money(a["netProfit"])) for a in annual])

    risks = artifact.get("riskAnalysis") or []
    doc.add_page_break()
    _h(doc, "Risk Analysis", 1)
    if risks:
        _table(doc, ["Risk", "Impact", "Mitigation Strategy"],
               [(r["risk"], r["impact"], r["mitigation"]) for r in risks])
    else:
        _p(doc, "No material risks identified.")

    doc.add_page_break()
    _h(doc, "Strategic Recommendations", 1)
    for i, rec in enumerate(artifact.get("recommendations") or [], start=1):
        para = doc.add_paragraph()
        para.add_run(f"{i}. ").bold = True
        para.add_run(rec)

    if sector is not None:
        doc.add_page_break()
        _h(doc, "Market Analysis", 1)
        _h(doc, f"Sector: {sector.sector_name}", 2)
        para = doc.add_paragraph()
        para.add_run("Investor Persona Fit: ").bold = True
        para.add_run(sector.investor_persona_fit)
        _label_table(doc, _sector_rows(sector))

    outpath = os.path.join(settings.EXPORT_DIR, f"business-report-{model_id}-{run_id}.docx")
    doc.save(outpath)
    return outpath
