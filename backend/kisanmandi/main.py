import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kisanmandi.config import settings
from kisanmandi.di import reset_mandi_service
from kisanmandi.http import init_http, close_http
from kisanmandi.routers import market

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("kisanmandi")

# Single FastAPI instance
app = FastAPI(title="Kisan Mandi", version="1.0.0")

# Single startup event
@app.on_event("startup")
async def startup_event():
    """Initialize HTTP client on startup."""
    await init_http()
    if not settings.DATA_GOV_IN_API_KEY:
        log.warning("DATA_GOV_IN_API_KEY is empty; data.gov.in will reject requests")

# Single shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Close HTTP client on shutdown."""
    reset_mandi_service()
    await close_http()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(market.router)

# API endpoints
@app.get("/")
async def root():
    return {"ok": True, "service": "Kisan Mandi", "version": app.version}

@app.get("/health")
async def health():
    return {
        "ok": True,
        "mandi_api_key_set": bool(settings.DATA_GOV_IN_API_KEY),
        "mandi": {
            "resource_id": settings.MANDI_RESOURCE_ID,
            "default_limit": settings.MANDI_DEFAULT_LIMIT,
            "lookup_limit": settings.MANDI_LOOKUP_LIMIT,
            "timeout_sec": settings.MANDI_HTTP_TIMEOUT_SEC,
        },
    }
