class StorageError(Exception):
    """Base class for failures raised by the store."""


class NotFoundError(StorageError):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateEmailError(StorageError):
    def __init__(self, entity: str, email: str):
        super().__init__(f"{entity} with email {email} already exists")
        self.entity = entity
        self.email = email


class InvalidReferenceError(StorageError):
    """A result points at a student or exam that does not exist."""

    def __init__(self, field: str, value: int):
        super().__init__(f"{field}={value} does not reference an existing record")
        self.field = field
        self.value = value


class ScoreOutOfRangeError(StorageError):
    def __init__(self, score: float, total_marks: int):
        super().__init__(f"score {score} exceeds the exam's total marks ({total_marks})")
        self.score = score
        self.total_marks = total_marks
