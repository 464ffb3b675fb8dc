# foodmarket/api/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodmarket.api.errors import register_exception_handlers
from foodmarket.api.routers import carts, health, items, orders, users, workouts


def create_app() -> FastAPI:
    app = FastAPI(
        title="Food Marketplace Service",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(items.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(workouts.router)

    register_exception_handlers(app)
    return app
