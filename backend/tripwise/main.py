import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripwise.config import settings
from tripwise.errors import TripWiseError

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(os.environ.get("LOG_DIR", Path(__file__).resolve().parent.parent / "logs"))
_LOG_DIR.mkdir(parents=True, exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "tripwise.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from tripwise.routers import (
    accommodations,
    adhoc_expenses,
    cost_forecast,
    expense_actuals,
    flights,
    itinerary,
    packing,
    reference,
    reports,
    trips,
)
from tripwise.services.cache_service import cache_service
from tripwise.services.exchange_rate_client import exchange_rate_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("TripWise starting")
    yield

    # Shutdown
    await exchange_rate_client.close()
    await cache_service.close()
    logger.info("Exchange-rate client and cache closed")


app = FastAPI(
    title="TripWise",
    description="Trip cost forecasting and expense settlement",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TripWiseError)
async def tripwise_error_handler(request: Request, exc: TripWiseError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": {"code": exc.code, "message": exc.message}},
    )


app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(flights.router, prefix="/api/trips", tags=["flights"])
app.include_router(accommodations.router, prefix="/api/trips", tags=["accommodations"])
app.include_router(itinerary.router, prefix="/api/trips", tags=["itinerary"])
app.include_router(adhoc_expenses.router, prefix="/api/trips", tags=["adhoc-expenses"])
app.include_router(packing.router, prefix="/api/trips", tags=["packing"])
app.include_router(cost_forecast.router, prefix="/api/trips", tags=["cost-forecast"])
app.include_router(expense_actuals.router, prefix="/api/trips", tags=["expense-actuals"])
app.include_router(reference.router, prefix="/api", tags=["reference"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "tripwise"}
