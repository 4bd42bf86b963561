from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from finagent.config import settings
from finagent.deps import init_db, session_scope
from finagent.logging_config import setup_logging
from finagent.routers import sectors, models, versions, scenarios
from finagent.services import sector_catalog
from finagent.services.jobs import runner

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    with session_scope() as session:
        sector_catalog.load_sectors(session)
    yield
    await runner.shutdown()

app = FastAPI(title="finagent Financial Model Generator", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
    return JSONResponse(status_code=400,
                        content={"error": "validation failed", "details": jsonable_encoder(exc.errors())})

@app.get("/healthz")
def healthz():
    return {"status": "ok"}

app.include_router(sectors.router, prefix="/api", tags=["sectors"])
app.include_router(models.router, prefix="/api", tags=["models"])
app.include_router(versions.router, prefix="/api", tags=["versions"])
app.include_router(scenarios.router, prefix="/api", tags=["scenarios"])
