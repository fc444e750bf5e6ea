# boutique/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boutique.core.config import get_settings
from boutique.core.errors import BoutiqueError
from boutique.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from boutique.models import product as _product_models  # noqa: F401
from boutique.models import cart as _cart_models  # noqa: F401
from boutique.models import coupon as _coupon_models  # noqa: F401
from boutique.models import order as _order_models  # noqa: F401

# Routers
from boutique.routers.products import router as products_router
from boutique.routers.cart import router as cart_router
from boutique.routers.coupons import router as coupons_router
from boutique.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BoutiqueError)
async def boutique_error_handler(request: Request, exc: BoutiqueError) -> JSONResponse:
    """Map checkout/coupon failures to their HTTP status and a specific message."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": str(exc),
            "error_type": type(exc).__name__,
            "code": exc.code,
            **exc.extra(),
        },
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(coupons_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "alfalah-boutique-backend"}
