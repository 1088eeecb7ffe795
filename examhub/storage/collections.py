from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from ..models.core import Record


T = TypeVar("T", bound=Record)


class EntityCollection(ABC, Generic[T]):
    """
    Keyed container for one record type.

    Ids are surrogate integers handed out by a counter owned by the
    collection. They start at 1, only ever grow and are never reused,
    even after a delete. No uniqueness checks happen at this layer.
    """

    def __init__(self, name: str, model: Type[T]):
        self.name = name
        self.model = model

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> T:
        ...

    @abstractmethod
    def get(self, record_id: int) -> Optional[T]:
        ...

    @abstractmethod
    def get_all(self) -> List[T]:
        ...

    @abstractmethod
    def update(self, record_id: int, partial: Mapping[str, Any]) -> Optional[T]:
        ...

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        ...

    def find_by(self, **criteria: Any) -> List[T]:
        return [
            record
            for record in self.get_all()
            if all(getattr(record, key) == value for key, value in criteria.items())
        ]

    def first_by(self, **criteria: Any) -> Optional[T]:
        matches = self.find_by(**criteria)
        return matches[0] if matches else None

    def count(self) -> int:
        return len(self.get_all())

    def _build(self, record_id: int, data: Mapping[str, Any]) -> T:
        fields = {k: v for k, v in data.items() if k != "id"}
        return self.model.model_validate({**fields, "id": record_id})

    def _merge(self, record: T, partial: Mapping[str, Any]) -> T:
        # the id is owned by the collection, never by the caller
        fields = record.model_dump()
        fields.update({k: v for k, v in partial.items() if k != "id"})
        return self.model.model_validate(fields)
