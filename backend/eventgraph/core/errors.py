"""
Error taxonomy for the data-access layer.

Repository operations raise only these. The GraphQL layer passes their
messages through to clients unchanged, so messages must never contain
file paths or other internals; those live on attributes and in the logs.
"""


class DataAccessError(Exception):
    """Base class for every error a repository operation can raise."""


class NotFoundError(DataAccessError):
    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity.capitalize()} not found")


class ValidationError(DataAccessError):
    """Structurally invalid input; raised before anything is persisted."""

    def __init__(self, entity: str, errors: list[dict]):
        self.entity = entity
        self.errors = errors
        fields = sorted({".".join(str(part) for part in err.get("loc", ())) or "input" for err in errors})
        super().__init__(f"Invalid {entity} input: {', '.join(fields)}")


class StoreIOError(DataAccessError, OSError):
    """The backing document could not be read or written."""

    def __init__(self, message: str, path: str, operation: str):
        self.path = path
        self.operation = operation
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0] if self.args else "Data store error"
