from typing import Annotated

from fastapi import Depends, Request

from services.tomatoes import TomatoService

def get_tomato_service(request: Request) -> TomatoService:
    # built by create_app, one per application
    return request.app.state.tomato_service

TomatoServiceDep = Annotated[TomatoService, Depends(get_tomato_service)]
