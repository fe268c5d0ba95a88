from fastapi import APIRouter

from maestro.api.v1.endpoints import handlers, health, runs

v1_router = APIRouter()
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(handlers.router, tags=["handlers"])
v1_router.include_router(runs.router, tags=["runs"])
