from fastapi import APIRouter

from api.routes import tomatoes

api_router = APIRouter()
api_router.include_router(tomatoes.router)
