import threading
from collections import OrderedDict
from typing import Any, List, Mapping, Optional, Type

from ..models.core import Account, Exam, Result, Student
from .base import Storage
from .collections import EntityCollection, T


class MemoryCollection(EntityCollection[T]):
    """Ordered map from id to record plus the next-id counter."""

    def __init__(self, name: str, model: Type[T]):
        super().__init__(name, model)
        self._records: "OrderedDict[int, T]" = OrderedDict()
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, data: Mapping[str, Any]) -> T:
        with self._lock:
            record = self._build(self._next_id, data)
            self._records[record.id] = record
            self._next_id += 1
            return record

    def get(self, record_id: int) -> Optional[T]:
        return self._records.get(record_id)

    def get_all(self) -> List[T]:
        with self._lock:
            return list(self._records.values())

    def update(self, record_id: int, partial: Mapping[str, Any]) -> Optional[T]:
        with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                return None
            updated = self._merge(existing, partial)
            self._records[record_id] = updated
            return updated

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def count(self) -> int:
        return len(self._records)


class MemStorage(Storage):
    """Process-local store. Everything is lost when the process exits."""

    def __init__(self, **kwargs):
        super().__init__(
            accounts=MemoryCollection("accounts", Account),
            students=MemoryCollection("students", Student),
            exams=MemoryCollection("exams", Exam),
            results=MemoryCollection("results", Result),
            **kwargs,
        )
