from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from typing import List
from finagent.deps import get_session
from finagent.schemas import ScenarioCreate, ScenarioUpdate, ScenarioRead
from finagent.services import model_store, scenarios

router = APIRouter()

@router.get("/models/{model_id}/scenarios", response_model=List[ScenarioRead])
def list_scenarios(model_id: str, session: Session = Depends(get_session)):
    if not model_store.get_model(session, model_id):
        raise HTTPException(status_code=404, detail="model not found")
    return scenarios.list_scenarios(session, model_id)

@router.post("/models/{model_id}/scenarios", response_model=ScenarioRead, status_code=201)
def create_scenario(model_id: str, payload: ScenarioCreate, session: Session = Depends(get_session)):
    if not model_store.get_model(session, model_id):
        raise HTTPException(status_code=404, detail="model not found")
    return scenarios.create_scenario(session, model_id, payload.model_dump())

@router.put("/scenarios/{scenario_id}", response_model=ScenarioRead)
def update_scenario(scenario_id: str, payload: ScenarioUpdate, session: Session = Depends(get_session)):
    scenario = scenarios.get_scenario(session, scenario_id)
    if not scenario:
        raise HTTPException(status_code=404, detail="scenario not found")
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise HTTPException(status_code=400, detail="scenario name cannot be null")
    return scenarios.update_scenario(session, scenario, changes)

@router.delete("/scenarios/{scenario_id}")
def delete_scenario(scenario_id: str, session: Session = Depends(get_session)):
    scenario = scenarios.get_scenario(session, scenario_id)
    if not scenario:
        raise HTTPException(status_code=404, detail="scenario not found")
    scenarios.delete_scenario(session, scenario)
    return {"success": True}
