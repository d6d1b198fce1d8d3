"""
Tomato record service.

Creation applies defaults and timestamps, updates merge only the supplied
fields, deletes check existence first. The service holds no state of its
own: atomicity of each write is delegated to the store.
"""
import logging
import math
import time
from typing import Any, Callable, Mapping

from core.errors import NotFoundError, ValidationError
from core.store import TomatoStore
from models.tomato import TomatoRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, variety, and price are required fields"
PRICE_MESSAGE = "Price must be a non-negative number"

UPDATABLE_FIELDS = ("name", "variety", "price", "description", "in_stock")


def now_ms() -> int:
    return int(time.time() * 1000)


def validate_price(price: Any) -> float:
    # bool is an int subclass but never a price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError(PRICE_MESSAGE)
    try:
        value = float(price)
    except OverflowError:
        raise ValidationError(PRICE_MESSAGE) from None
    if not math.isfinite(value) or value < 0:
        raise ValidationError(PRICE_MESSAGE)
    return value


def _validate_text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field.capitalize()} must be a string")
    return value


def _validate_in_stock(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("inStock must be a boolean")
    return value


def _validate_description(value: Any) -> str | None:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Description must be a string")
    return value


class TomatoService:

    def __init__(self, store: TomatoStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock

    def create(
            self,
            name: str | None,
            variety: str | None,
            price: Any,
            description: str | None = None,
            in_stock: bool | None = None,
    ) -> str:
        """
        Create a tomato and return its id. ``in_stock`` defaults to True and
        both timestamps are set to the same instant.
        """
        if not name or not variety or price is None:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        fields: dict[str, Any] = {
            "name": _validate_text("name", name),
            "variety": _validate_text("variety", variety),
            "price": validate_price(price),
            "description": _validate_description(description),
            "in_stock": True if in_stock is None else _validate_in_stock(in_stock),
        }

        now = self.clock()
        fields["created_at"] = now
        fields["updated_at"] = now

        tomato_id = self.store.insert(fields)
        logger.info("Created tomato %s", tomato_id)
        return tomato_id

    def _build_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        # only keys actually present are applied, absent means unchanged
        updates: dict[str, Any] = {}
        for field in UPDATABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]

            if field == "description":
                # explicit null clears the description
                updates[field] = _validate_description(value)
            elif value is None:
                if field == "price":
                    raise ValidationError(PRICE_MESSAGE)
                raise ValidationError(f"{field} cannot be null")
            elif field == "price":
                updates[field] = validate_price(value)
            elif field == "in_stock":
                updates[field] = _validate_in_stock(value)
            else:
                updates[field] = _validate_text(field, value)
        return updates

    def update(self, tomato_id: str, changes: Mapping[str, Any]) -> TomatoRecord:
        """
        Merge the supplied ``changes`` into an existing tomato and return it
        as it now stands. With nothing to change the store is not touched and
        ``updated_at`` is kept.
        """
        existing = self.store.get(tomato_id)
        if existing is None:
            raise NotFoundError(tomato_id)

        updates = self._build_changes(changes)
        if not updates:
            return existing

        updates["updated_at"] = max(self.clock(), existing.updated_at)
        self.store.patch(tomato_id, updates)

        updated = self.store.get(tomato_id)
        if updated is None:
            # deleted between the patch and the read
            raise NotFoundError(tomato_id)

        logger.info("Updated tomato %s (%s)", tomato_id, ", ".join(sorted(updates)))
        return updated

    def delete(self, tomato_id: str) -> str:
        if self.store.get(tomato_id) is None:
            raise NotFoundError(tomato_id)

        if not self.store.delete(tomato_id):
            raise NotFoundError(tomato_id)

        logger.info("Deleted tomato %s", tomato_id)
        return tomato_id

    def get(self, tomato_id: str) -> TomatoRecord | None:
        return self.store.get(tomato_id)

    def list_all(self) -> list[TomatoRecord]:
        return self.store.scan()

    def find_by_name(self, name: str) -> list[TomatoRecord]:
        return self.store.scan({"name": name})

    def find_by_variety(self, variety: str) -> list[TomatoRecord]:
        return self.store.scan_index("by_variety", variety)
