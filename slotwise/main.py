import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slotwise.api.v1.router import api_router
from slotwise.core.config import settings
from slotwise.scheduling.errors import SchedulingError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Slotwise API starting (%s)", settings.APP_ENV)
    yield
    logger.info("Slotwise API shutting down")


app = FastAPI(
    title="Slotwise API",
    description="Appointment availability and booking for small businesses",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Render engine rejections as ``{"detail", "code"}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/health")
async def health():
    return {"status": "ok", "service": "slotwise-api", "version": "0.1.0"}
