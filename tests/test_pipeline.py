import asyncio
import pytest
from finagent.errors import ArtifactSchemaError, ExternalServiceError
from finagent.models import BusinessSector
from finagent.services import analyst, modeler, validator
from finagent.services.pipeline import GenerationInput, PipelineRun, run_pipeline

INPUTS = GenerationInput(business_idea="Neighbourhood espresso bar with pastry counter",
                         startup_cost=120000, monthly_revenue=30000, gross_margin=68,
                         operating_expenses=12000, selected_sector="Specialty Coffee Shop")

def test_offline_run_visits_stages_in_order():
    run = PipelineRun(run_id="t1")
    artifact = asyncio.run(run_pipeline(INPUTS, None, run))
    assert run.history == ["created", "analyzing", "modeling", "validating", "done"]
    assert len(artifact["revenueProjections"]) == 12
    assert len(artifact["cashFlow"]) == 12
    assert len(artifact["annualProjections"]) in (0, 5)
    assert 1 <= artifact["keyMetrics"]["breakEvenMonth"] <= 24

def test_analysis_is_passed_to_modeler(monkeypatch):
    seen = {}
    async def fake_analysis(inputs, sector):
        return "ANALYSIS-TEXT"
    async def fake_model(inputs, analysis):
        seen["analysis"] = analysis
        return modeler._offline_model(inputs)
    monkeypatch.setattr(analyst, "_call_llm", fake_analysis)
    monkeypatch.setattr(modeler, "_call_llm", fake_model)
    asyncio.run(run_pipeline(INPUTS, None, PipelineRun(run_id="t2")))
    assert seen["analysis"] == "ANALYSIS-TEXT"

def test_analysis_failure_aborts_before_modeling(monkeypatch):
    called = []
    async def boom(inputs, sector):
        raise ExternalServiceError("service unavailable")
    async def fake_model(inputs, analysis):
        called.append("modeler")
        return {}
    monkeypatch.setattr(analyst, "_call_llm", boom)
    monkeypatch.setattr(modeler, "_call_llm", fake_model)
    run = PipelineRun(run_id="t3")
    with pytest.raises(ExternalServiceError):
        asyncio.run(run_pipeline(INPUTS, None, run))
    assert run.history == ["created", "analyzing", "failed"]
    assert called == []

def test_schema_mismatch_is_reported_distinctly(monkeypatch):
    repaired = []
    async def partial(inputs, analysis):
        return {"executiveSummary": "only a summary"}
    monkeypatch.setattr(modeler, "_call_llm", partial)
    monkeypatch.setattr(validator, "validate", lambda a: repaired.append(a) or a)
    run = PipelineRun(run_id="t4")
    with pytest.raises(ArtifactSchemaError):
        asyncio.run(run_pipeline(INPUTS, None, run))
    assert run.history[-2:] == ["modeling", "failed"]
    assert repaired == []

def test_short_model_output_is_repaired(monkeypatch):
    async def short(inputs, analysis):
        art = modeler._offline_model(inputs)
        art["revenueProjections"] = art["revenueProjections"][:4]
        art["cashFlow"] = art["cashFlow"][:7]
        art["keyMetrics"]["breakEvenMonth"] = 40
        return art
    monkeypatch.setattr(modeler, "_call_llm", short)
    artifact = asyncio.run(run_pipeline(INPUTS, None, PipelineRun(run_id="t5")))
    assert len(artifact["revenueProjections"]) == 12
    assert len(artifact["cashFlow"]) == 12
    assert artifact["keyMetrics"]["breakEvenMonth"] == 24

def test_benchmark_appears_in_analysis_prompt():
    sector = BusinessSector(sector_name="Specialty Coffee Shop", total_startup_cost=250000,
                            year1_revenue=420000, gross_margin_target=68, year1_roi=12, index_score=64)
    prompt = analyst.build_prompt(INPUTS, sector)
    assert "Sector Benchmark Data" in prompt
    assert "$250,000" in prompt
    assert "Sector Benchmark Data" not in analyst.build_prompt(INPUTS, None)
