from typing import Any, List, Mapping, Optional, Type

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database

from ..models.core import Account, Exam, Result, Student
from .base import Storage
from .collections import EntityCollection, T


COUNTERS = "counters"


class MongoCollection(EntityCollection[T]):
    """
    Records live in ``db[name]`` keyed by their integer id (``_id``).

    The next id comes from a per-collection document in ``counters``
    bumped with ``$inc``, so two concurrent creates never share an id and
    a deleted id is never handed out again.
    """

    def __init__(self, db: Database, name: str, model: Type[T]):
        super().__init__(name, model)
        self._db = db
        self._docs = db[name]

    def _next_id(self) -> int:
        counter = self._db[COUNTERS].find_one_and_update(
            {"_id": self.name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    def _to_doc(self, record: T) -> dict:
        doc = record.model_dump(exclude={"id"})
        doc["_id"] = record.id
        return doc

    def _from_doc(self, doc: Optional[dict]) -> Optional[T]:
        if doc is None:
            return None
        fields = {k: v for k, v in doc.items() if k != "_id"}
        return self.model.model_validate({**fields, "id": doc["_id"]})

    def create(self, data: Mapping[str, Any]) -> T:
        # validate before burning an id
        self._build(0, data)
        record = self._build(self._next_id(), data)
        self._docs.insert_one(self._to_doc(record))
        return record

    def get(self, record_id: int) -> Optional[T]:
        return self._from_doc(self._docs.find_one({"_id": record_id}))

    def get_all(self) -> List[T]:
        return [self._from_doc(d) for d in self._docs.find().sort("_id", ASCENDING)]

    def update(self, record_id: int, partial: Mapping[str, Any]) -> Optional[T]:
        existing = self.get(record_id)
        if existing is None:
            return None
        updated = self._merge(existing, partial)
        doc = self._to_doc(updated)
        del doc["_id"]
        refreshed = self._docs.find_one_and_update(
            {"_id": record_id},
            {"$set": doc},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(refreshed)

    def delete(self, record_id: int) -> bool:
        return self._docs.delete_one({"_id": record_id}).deleted_count == 1

    def find_by(self, **criteria: Any) -> List[T]:
        cursor = self._docs.find(criteria).sort("_id", ASCENDING)
        return [self._from_doc(d) for d in cursor]

    def count(self) -> int:
        return self._docs.count_documents({})


class MongoStorage(Storage):
    """Same contract as MemStorage, persisted in MongoDB."""

    def __init__(self, db: Database, **kwargs):
        self.db = db
        super().__init__(
            accounts=MongoCollection(db, "accounts", Account),
            students=MongoCollection(db, "students", Student),
            exams=MongoCollection(db, "exams", Exam),
            results=MongoCollection(db, "results", Result),
            **kwargs,
        )
        self.ensure_indexes()

    def ensure_indexes(self) -> None:
        self.db["accounts"].create_index("email")
        self.db["students"].create_index("email")
        self.db["results"].create_index("student_id")
        self.db["results"].create_index("exam_id")
