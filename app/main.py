import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import settings
from app.database import create_db_and_tables
from app.routes import (
    cart,
    checkout,
    health,
    pricing,
    products,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Jersey Store API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])

@app.get("/")
def root():
    return {
        "products": ["/products", "/products/{slug}"],
        "cart": [
            "/cart", "/cart/{cart_id}", "/cart/{cart_id}/add",
            "/cart/{cart_id}/items/{item_id}", "/cart/{cart_id}/clear"
        ],
        "pricing": ["/pricing/quote"],
        "checkout": ["/checkout/{cart_id}/quote"],
    }
