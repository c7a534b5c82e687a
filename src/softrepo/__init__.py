"""
softrepo

Generic single-table repository over PostgreSQL with optional soft delete.
"""

from softrepo.db import Database
from softrepo.exceptions import (
    ModelNotPersistedError,
    QueryBuilderError,
    RepositoryError,
    ReservedColumnError,
    SoftDeleteNotSupportedError,
)
from softrepo.model import Model, Record
from softrepo.query import Condition, QueryBuilder
from softrepo.repository import DbRepository, RepositoryInterface, SoftRepositoryInterface

__all__ = [
    "Condition",
    "Database",
    "DbRepository",
    "Model",
    "ModelNotPersistedError",
    "QueryBuilder",
    "QueryBuilderError",
    "Record",
    "RepositoryError",
    "RepositoryInterface",
    "ReservedColumnError",
    "SoftDeleteNotSupportedError",
    "SoftRepositoryInterface",
]
