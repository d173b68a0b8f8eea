"""
Shop API - Application Entry Point
====================================
FastAPI app initialization, exception handlers, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from apscheduler.schedulers.background import BackgroundScheduler

from config import settings
from config.database import SessionLocal, Base, engine
from common.exceptions import ShopError
from common.responses import api_error

shop_logger = logging.getLogger("shop")
if not shop_logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    shop_logger.addHandler(_handler)
shop_logger.setLevel(settings.LOG_LEVEL)

scheduler_logger = logging.getLogger("shop.scheduler")


# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401,E402
from modules.catalog.models import Product, ProductOption  # noqa: F401,E402
from modules.cart.models import CartLine  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.cart.routes import router as cart_router  # noqa: E402
from modules.catalog.routes import router as catalog_router  # noqa: E402


# ==========================================
# Background Scheduler: Empty Cart Line Cleanup
# ==========================================
def _purge_empty_cart_lines():
    """Background job: delete zero-quantity cart lines older than EMPTY_LINE_TTL_MINUTES."""
    db = SessionLocal()
    try:
        from modules.cart.service import cart_service
        count = cart_service.purge_empty_lines(db, settings.EMPTY_LINE_TTL_MINUTES)
        db.commit()
        if count:
            scheduler_logger.info(f"Purged {count} empty cart lines")
    except Exception as e:
        db.rollback()
        scheduler_logger.error(f"Cart cleanup error: {e}")
    finally:
        db.close()


scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)

    if settings.SCHEDULER_ENABLED:
        scheduler.add_job(_purge_empty_cart_lines, 'interval', minutes=10, id='empty_cart_lines', replace_existing=True)
        scheduler.start()
        scheduler_logger.info("Background scheduler started (empty cart lines: 10m)")
    yield
    if scheduler.running:
        scheduler.shutdown()
        scheduler_logger.info("Background scheduler stopped")


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Shop API",
    description="Cart and product management",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Exception handlers: everything → error envelope
# ==========================================
@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    return api_error(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()))
    message = f"Invalid request: {loc}: {first.get('msg', 'malformed body')}" if loc else "Invalid request."
    return api_error(message, 400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return api_error(str(exc.detail), exc.status_code)


# ==========================================
# Register Routers
# ==========================================
app.include_router(cart_router)
app.include_router(catalog_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok"}
