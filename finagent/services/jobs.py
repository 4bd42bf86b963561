"""Background generation runs.

One asyncio task per model id. Registering a run is synchronous, so two
requests on the same event loop cannot both start a run for one model.
"""
import asyncio
import os
import uuid
from typing import Dict, Optional
from loguru import logger
from finagent.config import settings
from finagent.deps import session_scope
from finagent.errors import GenerationError, RenderError, RunInProgressError
from finagent.models import BusinessSector
from finagent.services import export_docx, export_xlsx, model_store, sector_catalog
from finagent.services.pipeline import GenerationInput, PipelineRun, run_pipeline

def _discard(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)
        logger.info(f"removed partial render {path}")

def _load_sector(name: Optional[str]) -> Optional[BusinessSector]:
    if not name:
        return None
    with session_scope() as session:
        sector = sector_catalog.get_sector(session, name)
        if sector is None:
            logger.warning(f"sector '{name}' not in catalog, continuing without benchmark")
            return None
        session.expunge(sector)
        return sector

def _mark_completed(model_id: str, artifact: dict, excel_path: str, docx_path: str) -> None:
    with session_scope() as session:
        model_store.mark_completed(session, model_id, artifact, excel_path, docx_path)

def _mark_failed(model_id: str, error: str) -> None:
    with session_scope() as session:
        model_store.mark_failed(session, model_id, error)

def render_documents(model_id: str, run_id: str, artifact: dict, business_idea: str,
                     sector: Optional[BusinessSector]) -> tuple[str, str]:
    """Write the spreadsheet then the report; neither survives if the other fails."""
    excel_path = None
    try:
        excel_path = export_xlsx.build_workbook(model_id, run_id, artifact, business_idea)
        docx_path = export_docx.build_doc(model_id, run_id, artifact, business_idea, sector)
    except Exception as e:
        _discard(excel_path)
        raise RenderError(f"rendering failed: {e}") from e
    logger.info(f"model {model_id} rendered: {excel_path}, {docx_path}")
    return excel_path, docx_path

class GenerationRunner:
    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT_SECONDS
        self._tasks: Dict[str, asyncio.Task] = {}

    def is_running(self, model_id: str) -> bool:
        task = self._tasks.get(model_id)
        return task is not None and not task.done()

    def start(self, model_id: str, inputs: GenerationInput) -> asyncio.Task:
        if self.is_running(model_id):
            raise RunInProgressError(model_id)
        task = asyncio.get_running_loop().create_task(self._run(model_id, inputs), name=f"generate-{model_id}")
        self._tasks[model_id] = task
        task.add_done_callback(lambda t: self._forget(model_id, t))
        return task

    def _forget(self, model_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(model_id) is task:
            del self._tasks[model_id]

    async def cancel(self, model_id: str) -> bool:
        task = self._tasks.get(model_id)
        if task is None or task.done():
            return False
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return True

    async def shutdown(self) -> None:
        for model_id in list(self._tasks):
            await self.cancel(model_id)

    async def _run(self, model_id: str, inputs: GenerationInput) -> None:
        run = PipelineRun(run_id=uuid.uuid4().hex[:8])
        logger.info(f"[run {run.run_id}] generation started for model {model_id}")
        try:
            sector = await asyncio.to_thread(_load_sector, inputs.selected_sector)
            artifact = await asyncio.wait_for(run_pipeline(inputs, sector, run), timeout=self.timeout)
            excel_path, docx_path = await asyncio.to_thread(
                render_documents, model_id, run.run_id, artifact, inputs.business_idea, sector)
            await asyncio.to_thread(_mark_completed, model_id, artifact, excel_path, docx_path)
        except asyncio.CancelledError:
            logger.warning(f"[run {run.run_id}] generation cancelled for model {model_id}")
            # no awaits after cancellation
            _mark_failed(model_id, "generation cancelled")
            raise
        except asyncio.TimeoutError:
            logger.error(f"[run {run.run_id}] generation timed out after {self.timeout}s for model {model_id}")
            await asyncio.to_thread(_mark_failed, model_id, f"generation timed out after {self.timeout:g}s")
        except GenerationError as e:
            logger.error(f"[run {run.run_id}] {type(e).__name__} for model {model_id}: {e}")
            await asyncio.to_thread(_mark_failed, model_id, f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.exception(f"[run {run.run_id}] unexpected error for model {model_id}")
            await asyncio.to_thread(_mark_failed, model_id, str(e) or type(e).__name__)

runner = GenerationRunner()
