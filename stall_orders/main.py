"""
Stall Orders — FastAPI application entrypoint
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from stall_orders.core.config import get_settings
from stall_orders.core.errors import StallError, ValidationError
from stall_orders.core.redis_client import close_redis
from stall_orders.db.database import engine, Base
from stall_orders.middleware.auth import JWTAuthMiddleware
from stall_orders.middleware.idempotency import IdempotencyMiddleware
from stall_orders.api import admin, customers, health, menu, menu_admin, orders
from stall_orders import models  # noqa: F401  (registers tables on Base.metadata)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (migrations would own this in a larger deployment)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="Stall Orders",
    description="Walk-in ordering: server-side pricing, pickup lifecycle and sales analytics.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Auth + Idempotency ────────────────────────────────────────────────────────
app.add_middleware(IdempotencyMiddleware)
app.add_middleware(JWTAuthMiddleware)


# ── Error handling ────────────────────────────────────────────────────────────
@app.exception_handler(StallError)
async def stall_error_handler(request: Request, exc: StallError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report every failing field, not just the first, as a 400."""
    fields = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")),
            "message": err.get("msg", "invalid"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=ValidationError(fields=fields).to_dict())


# ── Prometheus Metrics ────────────────────────────────────────────────────────
if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(customers.router)
app.include_router(menu.router)
app.include_router(orders.router)
app.include_router(admin.session_router)
app.include_router(admin.router)
app.include_router(menu_admin.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}
