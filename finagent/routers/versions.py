from fastapi import APIRouter, Body, Depends, HTTPException
from sqlmodel import Session
from typing import List, Optional
from finagent.deps import get_session
from finagent.schemas import VersionCreate, VersionRead, ModelRead
from finagent.services import model_store, versions
from finagent.services.jobs import runner

router = APIRouter()

def _model_or_404(session: Session, model_id: str):
    model = model_store.get_model(session, model_id)
    if not model:
        raise HTTPException(status_code=404, detail="model not found")
    return model

@router.get("/models/{model_id}/versions", response_model=List[VersionRead])
def list_versions(model_id: str, session: Session = Depends(get_session)):
    _model_or_404(session, model_id)
    return versions.list_versions(session, model_id)

@router.post("/models/{model_id}/versions", response_model=VersionRead, status_code=201)
def create_version(model_id: str, payload: Optional[VersionCreate] = Body(default=None),
                   session: Session = Depends(get_session)):
    model = _model_or_404(session, model_id)
    description = payload.change_description if payload else None
    return versions.create_version(session, model, description)

@router.post("/models/{model_id}/versions/{version_id}/restore", response_model=ModelRead)
def restore_version(model_id: str, version_id: str, session: Session = Depends(get_session)):
    model = _model_or_404(session, model_id)
    version = versions.get_version(session, model_id, version_id)
    if not version:
        raise HTTPException(status_code=404, detail="version not found")
    if runner.is_running(model_id):
        raise HTTPException(status_code=409, detail="generation in progress for this model")
    return versions.restore_version(session, model, version)
