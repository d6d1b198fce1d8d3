"""
Record store contract for tomatoes.

A store keeps tomato records keyed by an opaque identifier that it assigns
on insert. Every primitive is atomic with respect to a single record: a
concurrent reader never observes a half written record. The store does not
validate field values nor apply defaults, the service does.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping

from models.tomato import TomatoRecord

# index name -> indexed field
INDEXES: dict[str, str] = {
    "by_name": "name",
    "by_variety": "variety",
    "by_price": "price",
}

FIELDS = frozenset({
    "name",
    "variety",
    "price",
    "description",
    "in_stock",
    "created_at",
    "updated_at",
})


def index_field(index: str) -> str:
    try:
        return INDEXES[index]
    except KeyError:
        raise ValueError(f"Unknown index: {index}") from None


def check_fields(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - FIELDS
    if unknown:
        raise ValueError(f"Unknown tomato fields: {', '.join(sorted(unknown))}")


class TomatoStore(ABC):

    @abstractmethod
    def get(self, tomato_id: str) -> TomatoRecord | None:
        """Return the record, or None when no such record exists."""

    @abstractmethod
    def insert(self, fields: Mapping[str, Any]) -> str:
        """Persist a new record and return its freshly assigned id."""

    @abstractmethod
    def patch(self, tomato_id: str, fields: Mapping[str, Any]) -> None:
        """
        Merge ``fields`` into the existing record, leaving other fields
        untouched. Raises NotFoundError when the record does not exist.
        """

    @abstractmethod
    def delete(self, tomato_id: str) -> bool:
        """Remove the record. Returns False when there was nothing to remove."""

    @abstractmethod
    def scan(self, where: Mapping[str, Any] | None = None) -> list[TomatoRecord]:
        """Enumerate records, keeping those equal to every ``where`` value."""

    @abstractmethod
    def scan_index(self, index: str, value: Any) -> list[TomatoRecord]:
        """
        Exact-match lookup through a named index. The result is the same as
        ``scan({field: value})`` on the indexed field.
        """

    def close(self) -> None:
        pass
