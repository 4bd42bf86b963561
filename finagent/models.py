from sqlmodel import SQLModel, Field, Column, JSON
from sqlalchemy import UniqueConstraint
from typing import Optional, Dict, Any
from datetime import datetime, timezone
import uuid

def _uuid() -> str:
    return str(uuid.uuid4())

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class BusinessSector(SQLModel, table=True):
    __tablename__ = "business_sectors"

    id: str = Field(default_factory=_uuid, primary_key=True)
    sector_name: str = Field(index=True, unique=True)
    investor_persona_fit: str = ""
    year1_revenue: float = 0.0
    gross_margin_target: float = 0.0
    total_startup_cost: float = 0.0
    year1_roi: float = 0.0
    index_score: int = 0  # composite 0-100
    roi_potential: int = 0  # dimension scores are 1-10
    scalability: int = 0
    compliance_simplicity: int = 0
    market_resilience: int = 0
    execution_simplicity: int = 0
    equipment_cost: str = ""
    legal_cost: str = ""
    inventory_cost: str = ""
    top_risk: str = ""
    mitigating_control: str = ""
    is_custom: bool = False

class FinancialModel(SQLModel, table=True):
    __tablename__ = "financial_models"

    id: str = Field(default_factory=_uuid, primary_key=True)
    business_idea: str
    selected_sector: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    generated_model: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    excel_file_path: Optional[str] = None
    docx_file_path: Optional[str] = None
    status: str = "pending"  # pending|processing|completed|failed
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

class ModelVersion(SQLModel, table=True):
    __tablename__ = "model_versions"
    __table_args__ = (UniqueConstraint("model_id", "version_number", name="uq_model_version_number"),)

    id: str = Field(default_factory=_uuid, primary_key=True)
    model_id: str = Field(index=True, foreign_key="financial_models.id")
    version_number: int
    business_idea: str
    selected_sector: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    generated_model: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    excel_file_path: Optional[str] = None
    docx_file_path: Optional[str] = None
    change_description: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

class Scenario(SQLModel, table=True):
    __tablename__ = "scenarios"

    id: str = Field(default_factory=_uuid, primary_key=True)
    model_id: str = Field(index=True, foreign_key="financial_models.id")
    name: str
    description: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
