"""UFO sightings map API: FastAPI app."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.errors import SightingError
from app.routers import internal, seed, sightings
from app.seed_data import seed_all
from app.store import SightingStore, get_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the store with the historical dataset when it starts out empty."""
    store = SightingStore.get_instance()
    if settings.seed_on_startup:
        counts = seed_all(store)
        logger.info(
            "Seed ingest: %d loaded, %d malformed, %d without coordinates",
            counts["loaded"], counts["malformed"], counts["missing_coordinates"],
        )
    logger.info("Sightings backend started (%d sightings)", store.count())
    yield
    logger.info("Sightings backend stopped")


app = FastAPI(
    title="UFO Sightings Map API",
    description="Sighting reports with filter, bounding-box and moderation endpoints",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SightingError)
async def sighting_error_handler(request: Request, exc: SightingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(sightings.router)
app.include_router(seed.router)
if settings.enable_internal_routes:
    app.include_router(internal.router)


@app.get("/health")
async def health(store: SightingStore = Depends(get_store)):
    """Health check."""
    return {"status": "ok", "sightings": store.count()}
