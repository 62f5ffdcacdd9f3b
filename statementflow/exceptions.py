"""Custom exceptions for StatementFlow."""


class StatementFlowError(Exception):
    """Base exception for ETL pipeline errors."""


class FetchError(StatementFlowError):
    """Raised when a raw source document cannot be retrieved or parsed."""

    def __init__(self, location: str, message: str):
        self.location = location
        super().__init__(f"Failed to fetch {location}: {message}")


class SourceValidationError(StatementFlowError):
    """Raised when a source document fails structural checks."""

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(f"Invalid {source} data structure: {'; '.join(errors)}")


class DocumentStructureError(SourceValidationError):
    """Raised when a document cannot be read into its typed source schema."""

    def __init__(self, source: str, message: str):
        super().__init__(source, [message])


class PersistenceError(StatementFlowError):
    """Raised when a transactional save fails and the batch is rolled back."""

    def __init__(self, message: str):
        super().__init__(f"Persistence error: {message}")


class RequestValidationError(StatementFlowError):
    """Raised when caller input is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")
