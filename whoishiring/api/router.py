from fastapi import APIRouter

from whoishiring.api.routes import health, index

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(index.router, tags=["public"])
