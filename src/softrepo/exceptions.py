"""
Errors raised by softrepo itself.

Database failures are not wrapped: psycopg errors propagate to the caller
unchanged.
"""


class RepositoryError(Exception):
    """Base class for all softrepo errors."""


class SoftDeleteNotSupportedError(RepositoryError):
    """A soft-delete operation was called on a repository without a soft-delete column."""

    def __init__(self, table: str):
        super().__init__(f"Table '{table}' has no soft-delete column configured")
        self.table = table


class ModelNotPersistedError(RepositoryError):
    """An operation that targets a stored row was given a model without an identity."""

    def __init__(self, model, operation: str):
        super().__init__(
            f"Cannot {operation} {type(model).__name__}: identity attribute is not set"
        )
        self.model = model
        self.operation = operation


class QueryBuilderError(RepositoryError):
    """A statement was built or consumed in an invalid order."""


class ReservedColumnError(RepositoryError, ValueError):
    """A column name collides with an attribute the model class itself defines."""

    def __init__(self, model_class, names):
        names = sorted(names)
        super().__init__(
            f"{model_class.__name__} cannot hold column(s) {', '.join(names)}: "
            "name(s) clash with model attributes"
        )
        self.model_class = model_class
        self.names = names
