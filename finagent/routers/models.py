import os
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlmodel import Session
from typing import List
from finagent.deps import get_session
from finagent.errors import RunInProgressError
from finagent.models import FinancialModel
from finagent.schemas import GenerateModelRequest, Assumptions, SubmitResponse, ModelRead
from finagent.services import model_store
from finagent.services.jobs import runner
from finagent.services.pipeline import GenerationInput

router = APIRouter()

XLSX_MEDIA = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOCX_MEDIA = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

def _load(session: Session, model_id: str) -> FinancialModel:
    model = model_store.get_model(session, model_id)
    if not model:
        raise HTTPException(status_code=404, detail="model not found")
    return model

def _inputs(model: FinancialModel) -> GenerationInput:
    return GenerationInput(business_idea=model.business_idea, selected_sector=model.selected_sector,
                           startup_cost=model.startup_cost, monthly_revenue=model.monthly_revenue,
                           gross_margin=model.gross_margin, operating_expenses=model.operating_expenses)

@router.post("/generate-model", response_model=SubmitResponse)
async def generate_model(req: GenerateModelRequest, session: Session = Depends(get_session)):
    data = req.model_dump()
    data["selected_sector"] = data.get("selected_sector") or None
    model = model_store.create_model(session, data)
    runner.start(model.id, _inputs(model))
    return {"id": model.id, "status": model.status}

@router.get("/models", response_model=List[ModelRead])
def list_models(session: Session = Depends(get_session)):
    return model_store.list_models(session)

@router.get("/models/{model_id}", response_model=ModelRead)
def get_model(model_id: str, session: Session = Depends(get_session)):
    return _load(session, model_id)

@router.post("/models/{model_id}/regenerate", response_model=ModelRead)
async def regenerate_model(model_id: str, req: Assumptions, session: Session = Depends(get_session)):
    model = _load(session, model_id)
    if runner.is_running(model_id):
        raise HTTPException(status_code=409, detail="generation already in progress for this model")
    changes = req.model_dump(exclude_unset=True)
    model = model_store.reset_for_regeneration(session, model, changes)
    try:
        runner.start(model.id, _inputs(model))
    except RunInProgressError:
        raise HTTPException(status_code=409, detail="generation already in progress for this model")
    return model

@router.post("/models/{model_id}/cancel")
async def cancel_generation(model_id: str, session: Session = Depends(get_session)):
    _load(session, model_id)
    if not await runner.cancel(model_id):
        raise HTTPException(status_code=409, detail="no generation in progress for this model")
    return {"id": model_id, "status": "failed"}

def _file_or_404(path: str | None, filename: str, media_type: str) -> FileResponse:
    if not path:
        raise HTTPException(status_code=404, detail="model or file not found")
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="file not found on disk")
    return FileResponse(path, media_type=media_type, filename=filename)

@router.get("/download/{model_id}")
def download_spreadsheet(model_id: str, session: Session = Depends(get_session)):
    model = _load(session, model_id)
    return _file_or_404(model.excel_file_path, f"financial-model-{model_id}.xlsx", XLSX_MEDIA)

@router.get("/download-docx/{model_id}")
def download_document(model_id: str, session: Session = Depends(get_session)):
    model = _load(session, model_id)
    return _file_or_404(model.docx_file_path, f"business-report-{model_id}.docx", DOCX_MEDIA)
