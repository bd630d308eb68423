import logging
from fastapi import FastAPI
from app.database import create_db_and_tables
from app.config import settings
from app.routes import (
    addresses,
    buy_now,
    cart,
    catalog,
    categories_admin,
    categories_public,
    coupons,
    dashboard,
    health,
    orders,
    products_admin,
    products_public,
    wishlist,
)

from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Furnishop Commerce API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(catalog.admin_router, prefix="/admin")
app.include_router(catalog.public_router)
app.include_router(categories_admin.router, prefix="/admin/categories", tags=["Admin Categories"])
app.include_router(categories_public.router, prefix="/categories", tags=["Public Categories"])
app.include_router(products_admin.router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(products_public.router, prefix="/products", tags=["Public Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(buy_now.router, prefix="/buy-now", tags=["Buy Now"])
app.include_router(coupons.router, prefix="/coupons", tags=["Coupons"])
app.include_router(wishlist.router, prefix="/wishlist", tags=["Wishlist"])
app.include_router(addresses.router, prefix="/addresses", tags=["Addresses"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(dashboard.router, prefix="/admin/dashboard", tags=["Admin Dashboard"])


@app.get("/")
def root():
    return {
        "cart": ["/cart", "/cart/sync", "/cart/clear", "/cart/{cart_id}"],
        "buy_now": ["/buy-now"],
        "coupons": [
            "/coupons", "/coupons/apply", "/coupons/apply-buy-now",
            "/coupons/clear", "/coupons/clear-buy-now", "/coupons/code/{code}"
        ],
        "catalog": ["/brands", "/colors", "/sizes", "/products", "/products/{product_id}"],
        "categories": ["/categories/tree", "/categories/{category_id}"],
        "wishlist": ["/wishlist", "/wishlist/count", "/wishlist/move-to-cart/{product_id}"],
        "addresses": ["/addresses", "/addresses/default", "/addresses/{address_id}/default"],
        "orders": [
            "/orders/place", "/orders/buy-now", "/orders/user", "/orders/user/details",
            "/orders/{order_id}", "/orders/invoice/{order_id}", "/orders/invoice/{order_id}/pdf"
        ],
        "admin": [
            "/admin/brands", "/admin/colors", "/admin/sizes", "/admin/categories",
            "/admin/products", "/admin/dashboard/summary", "/admin/dashboard/export", "/orders"
        ],
    }
