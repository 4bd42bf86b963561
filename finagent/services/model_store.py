"""Lifecycle persistence for FinancialModel records.

Status moves pending/processing -> completed|failed. The generated model and
both file paths are set together with `completed` and cleared otherwise.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from loguru import logger
from sqlmodel import Session, select
from finagent.models import FinancialModel

def create_model(session: Session, data: Dict[str, Any]) -> FinancialModel:
    model = FinancialModel(**data, status="processing")
    session.add(model); session.commit(); session.refresh(model)
    logger.info(f"model {model.id} created (processing)")
    return model

def get_model(session: Session, model_id: str) -> Optional[FinancialModel]:
    return session.get(FinancialModel, model_id)

def list_models(session: Session) -> List[FinancialModel]:
    return list(session.exec(select(FinancialModel).order_by(FinancialModel.created_at)).all())

def reset_for_regeneration(session: Session, model: FinancialModel, assumptions: Dict[str, Any]) -> FinancialModel:
    for key, value in assumptions.items():
        setattr(model, key, value)
    model.status = "processing"
    model.generated_model = None
    model.excel_file_path = None
    model.docx_file_path = None
    model.error = None
    model.completed_at = None
    session.add(model); session.commit(); session.refresh(model)
    logger.info(f"model {model.id} reset for regeneration")
    return model

def mark_completed(session: Session, model_id: str, artifact: Dict[str, Any],
                   excel_path: str, docx_path: str) -> Optional[FinancialModel]:
    model = session.get(FinancialModel, model_id)
    if model is None:
        logger.warning(f"model {model_id} vanished before completion")
        return None
    model.generated_model = artifact
    model.excel_file_path = excel_path
    model.docx_file_path = docx_path
    model.status = "completed"
    model.error = None
    model.completed_at = datetime.now(timezone.utc)
    session.add(model); session.commit(); session.refresh(model)
    logger.info(f"model {model_id} completed")
    return model

def mark_failed(session: Session, model_id: str, error: str) -> Optional[FinancialModel]:
    model = session.get(FinancialModel, model_id)
    if model is None:
        return None
    model.status = "failed"
    model.error = error
    model.generated_model = None
    model.excel_file_path = None
    model.docx_file_path = None
    session.add(model); session.commit(); session.refresh(model)
    logger.info(f"model {model_id} failed: {error}")
    return model
