from fastapi import APIRouter, HTTPException
from starlette import status

from api.dependencies.logger import LoggerDep
from api.dependencies.service import TomatoServiceDep
from core.errors import NotFoundError, StoreError, ValidationError
from models.success_response import (
    DeleteResponse,
    DeletedData,
    TomatoListResponse,
    TomatoResponse,
)
from models.tomato import TomatoCreate, TomatoUpdate

router = APIRouter(prefix="/tomatoes", tags=["tomatoes"])

TOMATO_NOT_FOUND = "Tomato not found"


@router.get("", response_model_exclude_none=True)
async def get_tomatoes(
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoListResponse:
    try:
        tomatoes = service.list_all()
    except StoreError:
        logger.exception("Error fetching tomatoes")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tomatoes"
        )

    return TomatoListResponse(data=tomatoes, count=len(tomatoes))


# search routes are declared before /{tomato_id}
@router.get("/search/name/{name}", response_model_exclude_none=True)
async def search_by_name(
        name: str,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoListResponse:
    try:
        tomatoes = service.find_by_name(name)
    except StoreError:
        logger.exception("Error searching tomatoes by name")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search tomatoes"
        )

    return TomatoListResponse(data=tomatoes, count=len(tomatoes))


@router.get("/search/variety/{variety}", response_model_exclude_none=True)
async def search_by_variety(
        variety: str,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoListResponse:
    try:
        tomatoes = service.find_by_variety(variety)
    except StoreError:
        logger.exception("Error searching tomatoes by variety")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search tomatoes"
        )

    return TomatoListResponse(data=tomatoes, count=len(tomatoes))


@router.get("/{tomato_id}", response_model_exclude_none=True)
async def get_tomato(
        tomato_id: str,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoResponse:
    try:
        tomato = service.get(tomato_id)
    except StoreError:
        logger.exception("Error fetching tomato")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tomato"
        )

    if tomato is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOMATO_NOT_FOUND
        )

    return TomatoResponse(data=tomato)


@router.post("", status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
async def create_tomato(
        tomato_in: TomatoCreate,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoResponse:
    # price: null is a bad price, a missing price is a missing field
    if "price" in tomato_in.model_fields_set and tomato_in.price is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Price must be a non-negative number"
        )

    try:
        tomato_id = service.create(
            name=tomato_in.name,
            variety=tomato_in.variety,
            price=tomato_in.price,
            description=tomato_in.description,
            in_stock=tomato_in.in_stock,
        )
        # return the tomato as stored
        created = service.get(tomato_id)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except StoreError:
        logger.exception("Error creating tomato")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create tomato"
        )

    if created is None:
        # deleted before it could be read back
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOMATO_NOT_FOUND
        )

    return TomatoResponse(data=created, message="Tomato created successfully")


@router.put("/{tomato_id}", response_model_exclude_none=True)
async def update_tomato(
        tomato_id: str,
        tomato_in: TomatoUpdate,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> TomatoResponse:
    try:
        updated = service.update(tomato_id, tomato_in.changes())
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOMATO_NOT_FOUND
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except StoreError:
        logger.exception("Error updating tomato")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update tomato"
        )

    return TomatoResponse(data=updated, message="Tomato updated successfully")


@router.delete("/{tomato_id}")
async def delete_tomato(
        tomato_id: str,
        service: TomatoServiceDep,
        logger: LoggerDep,
) -> DeleteResponse:
    try:
        service.delete(tomato_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOMATO_NOT_FOUND
        )
    except StoreError:
        logger.exception("Error deleting tomato")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete tomato"
        )

    return DeleteResponse(
        message="Tomato deleted successfully",
        data=DeletedData(id=tomato_id),
    )
