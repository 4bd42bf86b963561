import asyncio
import json
from types import SimpleNamespace
import pytest
from finagent.config import settings
from finagent.errors import ArtifactParseError, ArtifactSchemaError, ExternalServiceError
from finagent.services import llm_client, modeler
from finagent.services.pipeline import GenerationInput

class FakeCompletions:
    def __init__(self, content=None, exc=None, choices=True):
        self.content, self.exc, self.choices = content, exc, choices
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        choices = [SimpleNamespace(message=SimpleNamespace(content=self.content))] if self.choices else []
        return SimpleNamespace(choices=choices)

def _use(monkeypatch, completions):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(llm_client, "_client", lambda: client)
    return completions

def test_text_returned_with_system_prompt(monkeypatch):
    fake = _use(monkeypatch, FakeCompletions(content="Solid market."))
    out = asyncio.run(llm_client.complete_text("idea", model="m", system="analyst"))
    assert out == "Solid market."
    assert fake.calls[0]["messages"][0] == {"role": "system", "content": "analyst"}

def test_blank_text_is_external_error(monkeypatch):
    _use(monkeypatch, FakeCompletions(content="   "))
    with pytest.raises(ExternalServiceError, match="empty response"):
        asyncio.run(llm_client.complete_text("idea", model="m"))

def test_call_failure_is_wrapped(monkeypatch):
    boom = RuntimeError("connection reset")
    _use(monkeypatch, FakeCompletions(exc=boom))
    with pytest.raises(ExternalServiceError, match="connection reset") as ei:
        asyncio.run(llm_client.complete_json("p", model="m", system="s"))
    assert ei.value.__cause__ is boom

def test_json_without_choices_is_external_error(monkeypatch):
    _use(monkeypatch, FakeCompletions(choices=False))
    with pytest.raises(ExternalServiceError):
        asyncio.run(llm_client.complete_json("p", model="m", system="s"))

def test_non_json_is_parse_error(monkeypatch):
    _use(monkeypatch, FakeCompletions(content="Sure! Here is your model: {"))
    with pytest.raises(ArtifactParseError):
        asyncio.run(llm_client.complete_json("p", model="m", system="s", schema_name="financial_model"))

def test_schema_selects_json_schema_format(monkeypatch):
    fake = _use(monkeypatch, FakeCompletions(content='{"ok": true}'))
    out = asyncio.run(llm_client.complete_json("p", model="m", system="s", schema={"type": "object"},
                                               schema_name="thing"))
    assert out == {"ok": True}
    fmt = fake.calls[0]["response_format"]
    assert fmt["type"] == "json_schema" and fmt["json_schema"]["name"] == "thing"

    asyncio.run(llm_client.complete_json("p", model="m", system="s"))
    assert fake.calls[1]["response_format"] == {"type": "json_object"}

def test_online_modeler_rejects_wrong_shape(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    _use(monkeypatch, FakeCompletions(content=json.dumps({"executiveSummary": "x", "cashFlow": []})))
    inputs = GenerationInput(business_idea="Online modeler shape check", startup_cost=1000,
                             monthly_revenue=500, gross_margin=50, operating_expenses=100)
    with pytest.raises(ArtifactSchemaError):
        asyncio.run(modeler.build_model(inputs, "analysis"))
