# omwx/main.py
"""
omwx - METAR/TAF Operational Weather Service

Decodes coded aviation weather reports into severity scores, alert levels
and OM-A/OM-B advisory flags with an auditable evidence trail.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .settings import settings
from .logging import get_logger
from .packets.builder import get_station_builder
from .api import evaluate_router, runways_router

logger = get_logger(__name__)

SERVICE_NAME = "omwx"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Loads the runway and minima tables once at startup.
    """
    logger.info("service_starting", service=SERVICE_NAME)
    get_station_builder()

    yield

    logger.info("service_stopping", service=SERVICE_NAME)


app = FastAPI(
    title="omwx",
    description="""
    Operational weather decoding for airline dispatch.

    Ingests METAR observations and TAF forecasts and returns, per station:
    - Decoded visibility, RVR, ceiling, wind and hazard fields
    - A 0-100 severity score and an OK/MED/HIGH/CRIT alert level
    - OM-A/OM-B advisories (takeoff prohibition, LVTO/LVP, CAT bands,
      crosswind, runway condition estimate, volcanic ash, cold correction)
    - An evidence trail explaining every raised flag
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# In production, set ALLOWED_ORIGINS to specific domains
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Server"] = SERVICE_NAME
        return response


app.add_middleware(SecurityHeadersMiddleware)

app.include_router(evaluate_router)
app.include_router(runways_router)


@app.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok", "service": SERVICE_NAME}


def run():
    """Run the server (entry point for CLI)."""
    import uvicorn
    uvicorn.run(
        "omwx.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
