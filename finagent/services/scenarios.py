from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from loguru import logger
from sqlmodel import Session, select
from finagent.models import Scenario

def create_scenario(session: Session, model_id: str, data: Dict[str, Any]) -> Scenario:
    scenario = Scenario(model_id=model_id, **data)
    session.add(scenario); session.commit(); session.refresh(scenario)
    logger.info(f"scenario {scenario.id} '{scenario.name}' created for model {model_id}")
    return scenario

def list_scenarios(session: Session, model_id: str) -> List[Scenario]:
    return list(session.exec(select(Scenario).where(Scenario.model_id == model_id)
                             .order_by(Scenario.created_at)).all())

def get_scenario(session: Session, scenario_id: str) -> Optional[Scenario]:
    return session.get(Scenario, scenario_id)

def update_scenario(session: Session, scenario: Scenario, changes: Dict[str, Any]) -> Scenario:
    for key, value in changes.items():
        setattr(scenario, key, value)
    scenario.updated_at = datetime.now(timezone.utc)
    session.add(scenario); session.commit(); session.refresh(scenario)
    return scenario

def delete_scenario(session: Session, scenario: Scenario) -> None:
    session.delete(scenario); session.commit()
    logger.info(f"scenario {scenario.id} deleted")
