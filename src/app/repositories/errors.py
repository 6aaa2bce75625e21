"""
Storage errors raised by repository implementations.

Adapters translate driver-level integrity failures into these so the
application layer never sees a raw constraint message.
"""


class StorageError(Exception):
    """Base class for repository failures the use cases know how to handle"""


class DuplicateKeyError(StorageError):
    """A unique secondary key (token or invitation_code) already exists"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Duplicate value for unique field: {field}")


class ForeignKeyError(StorageError):
    """A referenced organization or team does not exist"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Referenced row does not exist: {field}")


class ConstraintViolationError(StorageError):
    """A row was refused by a constraint other than a unique or foreign key"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Constraint violated: {detail}")


class StorageUnavailableError(StorageError):
    """The store is locked or unreachable; the operation may be retried"""
