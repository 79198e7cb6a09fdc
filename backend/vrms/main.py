"""
VRMS Backend - FastAPI Application
Visitor registration and property management console
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vrms.config import settings
from vrms.routers import announcements, dashboard, facilities, feedback, residents, vehicles, visitors
from vrms.services.overdue_sweep import OverdueSweeper
from vrms.store.seed import seed_intent
from vrms.store.store import DomainStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = DomainStore()
    if settings.SEED_ON_STARTUP:
        store.initialize(seed_intent())

    sweeper = OverdueSweeper(store)
    if settings.SWEEP_ON_STARTUP:
        sweeper.start()

    app.state.store = store
    app.state.sweeper = sweeper
    logger.info(f"STARTUP | seeded={settings.SEED_ON_STARTUP} sweep={sweeper.running}")

    try:
        yield
    finally:
        await sweeper.stop()
        store.close()
        logger.info("SHUTDOWN | store closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Visitor registration and property management",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
for module in (visitors, residents, vehicles, facilities, feedback, announcements, dashboard):
    app.include_router(module.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": settings.APP_NAME, "status": "running"}


@app.get("/health")
async def health(request: Request):
    store = getattr(request.app.state, "store", None)
    sweeper = getattr(request.app.state, "sweeper", None)
    return {
        "status": "healthy" if store is not None and not store.closed else "unavailable",
        "sweeper_running": bool(sweeper and sweeper.running),
    }


http_logger = logging.getLogger("http")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    route = f"{request.method} {request.url.path}"
    http_logger.info(f"REQUEST {route}")

    response = await call_next(request)

    duration = (time.time() - start) * 1000
    http_logger.info(f"RESPONSE {route} | status={response.status_code} time={duration:.2f}ms")
    return response
