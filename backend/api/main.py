from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.quote_match import MarketplaceError, SchemaError

from backend.core.config import settings
from backend.core.db import init_db
from backend.core.worker import init_worker, stop_scheduler, get_scheduler_status
from backend.api.routers import projects_router, quotes_router, vendors_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    # Startup
    init_db()
    try:
        init_worker()
    except Exception as e:
        logger.warning(f"Failed to start worker: {e}")

    yield  # Application runs here

    # Shutdown
    stop_scheduler()


app = FastAPI(title="Quote Marketplace", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix FastAPI puts on the location
        loc = [str(part) for part in error.get("loc", ())[1:]]
        details.append(f"{'.'.join(loc) or 'body'}: {error.get('msg')}")
    return JSONResponse(status_code=400, content=SchemaError(details=details).to_payload())


@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": VERSION}


@app.get("/api/worker/status")
def worker_status():
    """Background scheduler status."""
    return get_scheduler_status()


app.include_router(projects_router)
app.include_router(quotes_router)
app.include_router(vendors_router)
