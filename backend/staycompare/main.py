import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staycompare.config import settings

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
            _LOG_DIR / "staycompare.log",
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

from staycompare.routers import compare, hotels, locations
from staycompare.services.amadeus_client import amadeus_client
from staycompare.services.geocoding_client import geocoding_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.amadeus_client_id:
        logger.warning("Amadeus credentials not set, hotel searches will fail until configured")

    yield

    # Shutdown
    await amadeus_client.close()
    await geocoding_client.close()
    logger.info("Upstream clients closed")


app = FastAPI(
    title="StayCompare",
    description="Hotel search and comparison",
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

app.include_router(hotels.router, prefix="/api/hotels", tags=["hotels"])
app.include_router(locations.router, prefix="/api/locations", tags=["locations"])
app.include_router(compare.router, prefix="/api/compare", tags=["compare"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "staycompare"}
