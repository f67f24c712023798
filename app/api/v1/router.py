from fastapi import APIRouter

from app.api.v1.endpoints import care

api_router = APIRouter()

api_router.include_router(care.router)
