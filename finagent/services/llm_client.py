import json
from typing import Any, Dict, Optional
from loguru import logger
from finagent.config import settings
from finagent.errors import ExternalServiceError, ArtifactParseError

def is_offline() -> bool:
    return not settings.OPENAI_API_KEY

def _client():
    from openai import AsyncOpenAI
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.LLM_TIMEOUT_SECONDS)

async def complete_text(prompt: str, model: str, system: Optional[str] = None,
                        temperature: float = 0.4) -> str:
    messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": prompt})
    logger.debug(f"text completion: model={model} prompt_chars={len(prompt)}")
    try:
        resp = await _client().chat.completions.create(
            model=model, messages=messages, temperature=temperature,
        )
    except Exception as e:
        raise ExternalServiceError(f"text generation failed: {e}") from e
    text = resp.choices[0].message.content if resp.choices else None
    if not text or not text.strip():
        raise ExternalServiceError("empty response from text generation service")
    return text

async def complete_json(prompt: str, model: str, system: str,
                        schema: Optional[Dict[str, Any]] = None, schema_name: str = "response",
                        temperature: float = 0.3) -> Dict[str, Any]:
    if schema is not None:
        response_format = {"type": "json_schema",
                           "json_schema": {"name": schema_name, "schema": schema}}
    else:
        response_format = {"type": "json_object"}
    logger.debug(f"json completion: model={model} schema={schema_name} prompt_chars={len(prompt)}")
    try:
        resp = await _client().chat.completions.create(
            model=model,
            response_format=response_format,
            temperature=temperature,
            messages=[{"role": "system", "content": system}, {"role": "user", "content": prompt}],
        )
    except Exception as e:
        raise ExternalServiceError(f"structured generation failed: {e}") from e
    raw = resp.choices[0].message.content if resp.choices else None
    if not raw:
        raise ExternalServiceError(f"empty response for {schema_name}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"unparseable {schema_name} response: {raw[:500]}")
        raise ArtifactParseError(f"{schema_name} response is not valid JSON: {e}") from e
