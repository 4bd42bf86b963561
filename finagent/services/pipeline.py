"""Analyst -> Modeler -> Validator generation pipeline.

Each stage consumes the previous stage's output; stages never run out of
order or concurrently. Any error in the first two stages aborts the run; the
validator only repairs.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from loguru import logger
from finagent.models import BusinessSector
from finagent.services import analyst, modeler, validator

CREATED, ANALYZING, MODELING, VALIDATING, DONE, FAILED = (
    "created", "analyzing", "modeling", "validating", "done", "failed")

@dataclass
class GenerationInput:
    business_idea: str
    startup_cost: float
    monthly_revenue: float
    gross_margin: float
    operating_expenses: float
    selected_sector: Optional[str] = None

@dataclass
class PipelineRun:
    run_id: str
    stage: str = CREATED
    history: List[str] = field(default_factory=lambda: [CREATED])

    def advance(self, stage: str) -> None:
        logger.info(f"[run {self.run_id}] {self.stage} -> {stage}")
        self.stage = stage
        self.history.append(stage)

async def run_pipeline(inputs: GenerationInput, sector: Optional[BusinessSector],
                       run: PipelineRun) -> Dict[str, Any]:
    try:
        run.advance(ANALYZING)
        analysis = await analyst.analyze(inputs, sector)
        run.advance(MODELING)
        artifact = await modeler.build_model(inputs, analysis)
        run.advance(VALIDATING)
        artifact = validator.validate(artifact)
    except BaseException:
        run.advance(FAILED)
        raise
    run.advance(DONE)
    return artifact
