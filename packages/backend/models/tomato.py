from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses inStock / createdAt / updatedAt, python code uses snake_case
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TomatoRecord(CamelModel):
    """A stored tomato, as returned by the stores and the service."""
    id: str
    name: str
    variety: str
    price: float
    description: str | None = None
    in_stock: bool = True
    created_at: int
    updated_at: int


class TomatoCreate(CamelModel):
    name: StrictStr | None = None
    variety: StrictStr | None = None
    # type checked by the service so that "expensive" is a validation error
    price: Any = None
    description: StrictStr | None = None
    in_stock: StrictBool | None = None


class TomatoUpdate(CamelModel):
    """
    Partial update. Only the fields present in the request body are applied,
    see ``model_fields_set``; an omitted field is left unchanged.
    """
    name: StrictStr | None = None
    variety: StrictStr | None = None
    price: Any = None
    description: StrictStr | None = None
    in_stock: StrictBool | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
