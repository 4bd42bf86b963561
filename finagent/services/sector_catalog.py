import json, math, os
from typing import Any, Dict, List, Optional, Tuple
from loguru import logger
from sqlmodel import Session, select
from finagent.config import settings
from finagent.models import BusinessSector
from finagent.services import llm_client

# dataset keys -> BusinessSector fields
_DATASET_FIELDS = {
    "Sector Name": "sector_name",
    "Investor Persona Fit": "investor_persona_fit",
    "Year 1 Annual Revenue (Est.)": "year1_revenue",
    "Gross Margin Target (%)": "gross_margin_target",
    "Total Startup Cost (Est. Min)": "total_startup_cost",
    "Year 1 ROI % (Est.)": "year1_roi",
    "Index Score": "index_score",
    "Dimension: ROI Potential (1-10)": "roi_potential",
    "Dimension: Scalability (1-10)": "scalability",
    "Dimension: Compliance Simplicity (1-10)": "compliance_simplicity",
    "Dimension: Market Resilience (1-10)": "market_resilience",
    "Dimension: Execution Simplicity (1-10)": "execution_simplicity",
    "Cost: Equipment/Assets": "equipment_cost",
    "Cost: Legal/Licenses/Permits": "legal_cost",
    "Cost: Initial Stock/Inventory": "inventory_cost",
    "Top Risk Scenario": "top_risk",
    "Mitigating Control": "mitigating_control",
}
_NUMERIC = {"year1_revenue", "gross_margin_target", "total_startup_cost", "year1_roi"}
_SCORES = {"index_score", "roi_potential", "scalability", "compliance_simplicity",
           "market_resilience", "execution_simplicity"}

def _num(v: Any) -> float:
    if isinstance(v, (int, float)):
        return float(v)
    cleaned = str(v or "0").replace("~", "").replace("$", "").replace(",", "").replace("%", "").strip()
    try:
        return float(cleaned or 0)
    except ValueError:
        return 0.0

def _record_to_sector(record: Dict[str, Any]) -> BusinessSector:
    data = {}
    for key, value in record.items():
        field = _DATASET_FIELDS.get(key, key)
        if field in _NUMERIC:
            value = _num(value)
        elif field in _SCORES:
            value = int(_num(value))
        data[field] = value
    return BusinessSector.model_validate(data)

def load_sectors(session: Session, path: Optional[str] = None) -> int:
    """Seed pre-loaded sectors from the JSON dataset. Existing names are kept."""
    path = path or settings.SECTORS_PATH
    if not os.path.exists(path):
        logger.error(f"sector dataset not found: {path}")
        return 0
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f).get("sectors", [])
    existing = set(session.exec(select(BusinessSector.sector_name)).all())
    added = 0
    for record in records:
        sector = _record_to_sector(record)
        if sector.sector_name in existing:
            continue
        sector.is_custom = False
        session.add(sector)
        existing.add(sector.sector_name)
        added += 1
    session.commit()
    logger.info(f"loaded {added} business sectors from {path} ({len(records)} in dataset)")
    return added

def list_sectors(session: Session) -> List[BusinessSector]:
    return list(session.exec(select(BusinessSector).order_by(BusinessSector.sector_name)).all())

def get_sector(session: Session, name: str) -> Optional[BusinessSector]:
    return session.exec(select(BusinessSector).where(BusinessSector.sector_name == name)).first()

def add_custom_sector(session: Session, data: Dict[str, Any]) -> BusinessSector:
    sector = BusinessSector.model_validate({**data, "is_custom": True})
    session.add(sector); session.commit(); session.refresh(sector)
    logger.info(f"custom sector added: {sector.sector_name}")
    return sector

# offline ranking: bag-of-words cosine between idea and sector text

def _bofe(text: str) -> Dict[str, float]:
    vec = {}
    for w in text.lower().split():
        w = w.strip(".,;:!?()\"'")
        if w:
            vec[w] = vec.get(w, 0) + 1.0
    return vec

def _cos(a: Dict[str, float], b: Dict[str, float]) -> float:
    dot = sum(a.get(k, 0.0) * b.get(k, 0.0) for k in set(a) | set(b))
    na = math.sqrt(sum(v * v for v in a.values())) or 1.0
    nb = math.sqrt(sum(v * v for v in b.values())) or 1.0
    return dot / (na * nb)

def _rank(idea: str, sectors: List[BusinessSector], k: int) -> List[Tuple[BusinessSector, float]]:
    qv = _bofe(idea)
    scored = [(s, _cos(qv, _bofe(f"{s.sector_name} {s.investor_persona_fit}"))) for s in sectors]
    return sorted([x for x in scored if x[1] > 0], key=lambda x: x[1], reverse=True)[:k]

async def recommend(session: Session, business_idea: str, k: int = 3) -> Dict[str, Any]:
    sectors = list_sectors(session)
    if not sectors:
        return {"recommended_sectors": [], "reasoning": "No sectors are loaded."}
    if llm_client.is_offline():
        ranked = _rank(business_idea, sectors, k)
        names = [s.sector_name for s, _ in ranked]
        reasoning = ("Closest matches by wording overlap with the sector descriptions."
                     if names else "No sector description overlaps with the business idea.")
        return {"recommended_sectors": names, "reasoning": reasoning}

    catalog = [{"name": s.sector_name, "persona": s.investor_persona_fit} for s in sectors]
    prompt = (f"Business idea: {business_idea}\n\nSectors:\n{json.dumps(catalog)}\n\n"
              f'Pick up to {k} sectors that best fit the idea. Return JSON: '
              '{"recommendedSectors": [sector names], "reasoning": "..."}')
    raw = await llm_client.complete_json(prompt, model=settings.OPENAI_ANALYST_MODEL,
                                         system="You match business ideas to industry sectors. Return JSON only.",
                                         schema_name="sector_recommendation")
    if not isinstance(raw, dict):
        raw = {}
    known = {s.sector_name for s in sectors}
    names = [n for n in raw.get("recommendedSectors", []) if n in known][:k]
    return {"recommended_sectors": names, "reasoning": str(raw.get("reasoning", ""))}
