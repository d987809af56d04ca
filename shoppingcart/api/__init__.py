# shoppingcart/api/__init__.py
from fastapi import FastAPI
from shoppingcart.api.routers import carts
from shoppingcart.api.routers.health import router as health_router


def create_app():
    app = FastAPI(title="Shopping Cart Service", version="1.0.0")
    app.include_router(health_router)
    app.include_router(carts.router)
    return app
