from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any, List
from datetime import datetime

class _Wire(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True,
                              from_attributes=True, protected_namespaces=())

# --- sectors ---

class SectorRead(_Wire):
    id: str
    sector_name: str
    investor_persona_fit: str
    year1_revenue: float
    gross_margin_target: float
    total_startup_cost: float
    year1_roi: float
    index_score: int
    roi_potential: int
    scalability: int
    compliance_simplicity: int
    market_resilience: int
    execution_simplicity: int
    equipment_cost: str
    legal_cost: str
    inventory_cost: str
    top_risk: str
    mitigating_control: str
    is_custom: bool

class SectorCreate(_Wire):
    sector_name: str = Field(min_length=1)
    investor_persona_fit: str = ""
    year1_revenue: float = Field(0.0, ge=0, allow_inf_nan=False)
    gross_margin_target: float = Field(0.0, ge=0, le=100, allow_inf_nan=False)
    total_startup_cost: float = Field(0.0, ge=0, allow_inf_nan=False)
    year1_roi: float = Field(0.0, allow_inf_nan=False)
    index_score: int = Field(0, ge=0, le=100)
    roi_potential: int = Field(0, ge=0, le=10)
    scalability: int = Field(0, ge=0, le=10)
    compliance_simplicity: int = Field(0, ge=0, le=10)
    market_resilience: int = Field(0, ge=0, le=10)
    execution_simplicity: int = Field(0, ge=0, le=10)
    equipment_cost: str = ""
    legal_cost: str = ""
    inventory_cost: str = ""
    top_risk: str = ""
    mitigating_control: str = ""

class RecommendRequest(_Wire):
    business_idea: str = Field(min_length=10)

class RecommendResponse(_Wire):
    recommended_sectors: List[str]
    reasoning: str

# --- financial models ---

class Assumptions(_Wire):
    startup_cost: float = Field(ge=0, allow_inf_nan=False)
    monthly_revenue: float = Field(ge=0, allow_inf_nan=False)
    gross_margin: float = Field(ge=0, le=100, allow_inf_nan=False)
    operating_expenses: float = Field(ge=0, allow_inf_nan=False)
    custom_assumptions: Optional[Dict[str, Any]] = None

class GenerateModelRequest(Assumptions):
    business_idea: str = Field(min_length=20, description="Free-text business description")
    selected_sector: Optional[str] = None

class SubmitResponse(_Wire):
    id: str
    status: str

class ModelRead(_Wire):
    id: str
    business_idea: str
    selected_sector: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = None
    generated_model: Optional[Dict[str, Any]] = None
    excel_file_path: Optional[str] = None
    docx_file_path: Optional[str] = None
    status: str
    error: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

# --- versions ---

class VersionCreate(_Wire):
    change_description: Optional[str] = None

class VersionRead(_Wire):
    id: str
    model_id: str
    version_number: int
    business_idea: str
    selected_sector: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = None
    generated_model: Optional[Dict[str, Any]] = None
    excel_file_path: Optional[str] = None
    docx_file_path: Optional[str] = None
    change_description: Optional[str] = None
    created_at: datetime

# --- scenarios ---

class ScenarioCreate(_Wire):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    startup_cost: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    monthly_revenue: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    gross_margin: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)
    operating_expenses: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    custom_assumptions: Optional[Dict[str, Any]] = None

class ScenarioUpdate(_Wire):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    startup_cost: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    monthly_revenue: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    gross_margin: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)
    operating_expenses: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    custom_assumptions: Optional[Dict[str, Any]] = None

class ScenarioRead(_Wire):
    id: str
    model_id: str
    name: str
    description: Optional[str] = None
    startup_cost: Optional[float] = None
    monthly_revenue: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_expenses: Optional[float] = None
    custom_assumptions: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
