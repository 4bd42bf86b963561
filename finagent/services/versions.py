import copy
from typing import List, Optional
from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from finagent.models import FinancialModel, ModelVersion

SNAPSHOT_FIELDS = ("business_idea", "selected_sector", "startup_cost", "monthly_revenue", "gross_margin",
                   "operating_expenses", "custom_assumptions", "generated_model",
                   "excel_file_path", "docx_file_path")
MAX_NUMBERING_ATTEMPTS = 10

def _next_number(session: Session, model_id: str) -> int:
    current = session.exec(select(func.max(ModelVersion.version_number))
                           .where(ModelVersion.model_id == model_id)).one()
    return (current or 0) + 1

def create_version(session: Session, model: FinancialModel,
                   change_description: Optional[str] = None) -> ModelVersion:
    """Snapshot the model under max(version_number)+1.

    The (model_id, version_number) unique constraint turns a concurrent
    duplicate into an IntegrityError; the insert is then retried with a fresh number.
    """
    snapshot = {f: copy.deepcopy(getattr(model, f)) for f in SNAPSHOT_FIELDS}
    for attempt in range(1, MAX_NUMBERING_ATTEMPTS + 1):
        version = ModelVersion(model_id=model.id, version_number=_next_number(session, model.id),
                               change_description=change_description, **snapshot)
        session.add(version)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning(f"version number {version.version_number} taken for model {model.id} "
                           f"(attempt {attempt}), retrying")
            continue
        session.refresh(version)
        logger.info(f"model {model.id} snapshot saved as version {version.version_number}")
        return version
    raise RuntimeError(f"could not allocate a version number for model {model.id}")

def list_versions(session: Session, model_id: str) -> List[ModelVersion]:
    return list(session.exec(select(ModelVersion).where(ModelVersion.model_id == model_id)
                             .order_by(ModelVersion.version_number)).all())

def get_version(session: Session, model_id: str, version_id: str) -> Optional[ModelVersion]:
    version = session.get(ModelVersion, version_id)
    if version is None or version.model_id != model_id:
        return None
    return version

def restore_version(session: Session, model: FinancialModel, version: ModelVersion) -> FinancialModel:
    for f in SNAPSHOT_FIELDS:
        setattr(model, f, copy.deepcopy(getattr(version, f)))
    # keep status consistent with the restored artifact
    if model.generated_model is not None and model.excel_file_path and model.docx_file_path:
        model.status = "completed"
    else:
        model.status = "pending"
    model.error = None
    session.add(model); session.commit(); session.refresh(model)
    logger.info(f"model {model.id} restored to version {version.version_number}")
    return model
