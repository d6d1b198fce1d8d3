import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["info"])

ENDPOINTS = {
    "GET /tomatoes": "Get all tomatoes",
    "GET /tomatoes/:id": "Get a specific tomato",
    "GET /tomatoes/search/name/:name": "Search tomatoes by name",
    "GET /tomatoes/search/variety/:variety": "Search tomatoes by variety",
    "POST /tomatoes": "Create a new tomato",
    "PUT /tomatoes/:id": "Update a tomato",
    "DELETE /tomatoes/:id": "Delete a tomato",
}

class ApiInfo(BaseModel):
    message: str
    version: str
    endpoints: dict[str, str]

class Health(BaseModel):
    status: str
    timestamp: str
    uptime: float

@router.get("/")
async def root(request: Request) -> ApiInfo:
    app_settings = request.app.state.settings
    return ApiInfo(
        message=f"Welcome to the {app_settings.PROJECT_NAME}",
        version=app_settings.VERSION,
        endpoints=ENDPOINTS,
    )

@router.get("/health")
async def health(request: Request) -> Health:
    return Health(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        # seconds since the application was created
        uptime=time.monotonic() - request.app.state.started_at,
    )
