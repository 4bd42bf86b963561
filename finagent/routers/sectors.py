from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from typing import List
from finagent.deps import get_session
from finagent.schemas import SectorRead, SectorCreate, RecommendRequest, RecommendResponse
from finagent.services import sector_catalog

router = APIRouter()

@router.get("/sectors", response_model=List[SectorRead])
def list_sectors(session: Session = Depends(get_session)):
    return sector_catalog.list_sectors(session)

@router.post("/sectors", response_model=SectorRead, status_code=201)
def create_custom_sector(payload: SectorCreate, session: Session = Depends(get_session)):
    if sector_catalog.get_sector(session, payload.sector_name):
        raise HTTPException(status_code=409, detail="sector already exists")
    return sector_catalog.add_custom_sector(session, payload.model_dump())

@router.post("/sectors/recommend", response_model=RecommendResponse)
async def recommend_sectors(payload: RecommendRequest, session: Session = Depends(get_session)):
    return await sector_catalog.recommend(session, payload.business_idea)

@router.get("/sectors/{name}", response_model=SectorRead)
def get_sector(name: str, session: Session = Depends(get_session)):
    sector = sector_catalog.get_sector(session, name)
    if not sector:
        raise HTTPException(status_code=404, detail="sector not found")
    return sector
