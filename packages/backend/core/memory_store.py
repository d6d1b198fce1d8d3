import itertools
import logging
import threading
from typing import Any, Mapping

from core.errors import NotFoundError
from core.store import INDEXES, TomatoStore, check_fields, index_field
from models.tomato import TomatoRecord

logger = logging.getLogger(__name__)


class InMemoryTomatoStore(TomatoStore):
    """
    Dict backed store. Ids are ``tomato_<n>`` with ``n`` taken from a counter
    that only moves forward, so an id is never handed out twice.
    """

    def __init__(self):
        self._records: dict[str, dict[str, Any]] = {}
        self._counter = itertools.count(1)
        # field -> value -> ids, in insertion order
        self._indexes: dict[str, dict[Any, list[str]]] = {
            field: {} for field in INDEXES.values()
        }
        self._lock = threading.Lock()

    def _index_add(self, tomato_id: str, record: Mapping[str, Any]) -> None:
        for field, entries in self._indexes.items():
            entries.setdefault(record[field], []).append(tomato_id)

    def _index_remove(self, tomato_id: str, record: Mapping[str, Any]) -> None:
        for field, entries in self._indexes.items():
            ids = entries.get(record[field])
            if ids is None:
                continue
            ids.remove(tomato_id)
            if not ids:
                del entries[record[field]]

    def _position(self, tomato_id: str) -> int:
        return int(tomato_id.rsplit("_", 1)[1])

    def get(self, tomato_id: str) -> TomatoRecord | None:
        with self._lock:
            record = self._records.get(tomato_id)
            return TomatoRecord(**record) if record is not None else None

    def insert(self, fields: Mapping[str, Any]) -> str:
        check_fields(fields)
        with self._lock:
            tomato_id = f"tomato_{next(self._counter)}"
            record = {"id": tomato_id, "description": None, "in_stock": True, **fields}
            self._records[tomato_id] = record
            self._index_add(tomato_id, record)
        logger.debug("inserted %s", tomato_id)
        return tomato_id

    def patch(self, tomato_id: str, fields: Mapping[str, Any]) -> None:
        check_fields(fields)
        with self._lock:
            existing = self._records.get(tomato_id)
            if existing is None:
                raise NotFoundError(tomato_id)

            # build the merged record first, swap it in as a whole
            merged = {**existing, **fields}
            self._index_remove(tomato_id, existing)
            self._records[tomato_id] = merged
            self._index_add(tomato_id, merged)

            # keep index entries in insertion order after a re-add
            for field in self._indexes:
                ids = self._indexes[field][merged[field]]
                ids.sort(key=self._position)
        logger.debug("patched %s with %s", tomato_id, sorted(fields))

    def delete(self, tomato_id: str) -> bool:
        with self._lock:
            record = self._records.pop(tomato_id, None)
            if record is None:
                return False
            self._index_remove(tomato_id, record)
        logger.debug("deleted %s", tomato_id)
        return True

    def scan(self, where: Mapping[str, Any] | None = None) -> list[TomatoRecord]:
        where = dict(where or {})
        check_fields(where)
        with self._lock:
            return [
                TomatoRecord(**record)
                for record in self._records.values()
                if all(record.get(key) == value for key, value in where.items())
            ]

    def scan_index(self, index: str, value: Any) -> list[TomatoRecord]:
        field = index_field(index)
        with self._lock:
            ids = self._indexes[field].get(value, [])
            return [TomatoRecord(**self._records[tomato_id]) for tomato_id in ids]
