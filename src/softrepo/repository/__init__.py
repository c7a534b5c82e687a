"""
Repository

Data access for a single table: the repository interfaces and the
database-backed implementation with soft-delete support.
"""

from softrepo.repository.base import RepositoryInterface, SoftRepositoryInterface
from softrepo.repository.db_repository import DbRepository

__all__ = ["DbRepository", "RepositoryInterface", "SoftRepositoryInterface"]
