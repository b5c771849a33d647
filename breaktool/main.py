from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI

from breaktool import __version__
from breaktool.config import settings
from breaktool.logging_config import configure_logging
from breaktool.metrics import metrics_endpoint
from breaktool.middleware.logging_middleware import RequestLoggingMiddleware
from breaktool.routers import analytics, trust, verdict


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure structured logging before anything else
    configure_logging(debug=settings.debug)

    # Startup: create Redis connection and store on app.state
    app.state.redis = aioredis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=True
    )
    try:
        yield
    finally:
        # Shutdown: close Redis connection
        await app.state.redis.aclose()


app = FastAPI(title=f"{settings.app_name} API", version=__version__, lifespan=lifespan)

# Register request logging middleware (runs on every request)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(verdict.router)
app.include_router(analytics.router)
app.include_router(trust.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
