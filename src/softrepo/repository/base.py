"""
Repository interfaces; define the data access API independent of storage.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, Sequence, TypeVar, Union

from softrepo.model import Model
from softrepo.query import Condition

T = TypeVar("T", bound=Model)

Conditions = Union[str, Condition, None]


class RepositoryInterface(ABC, Generic[T]):
    """Data access for one table."""

    @abstractmethod
    def find(self, column: str, value: Any) -> Optional[T]:
        """Find first entry by key."""

    @abstractmethod
    def get_first(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> Optional[T]:
        """Get first entry, optionally filtered."""

    @abstractmethod
    def get_all(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> List[T]:
        """Get all entries, optionally filtered."""

    @abstractmethod
    def count(self, conditions: Conditions = None, values: Sequence[Any] = ()) -> int:
        """Count entries, optionally filtered."""

    @abstractmethod
    def save(self, model: T) -> T:
        """Insert or update entry."""

    @abstractmethod
    def delete(self, model: T) -> None:
        """Delete entry."""


class SoftRepositoryInterface(RepositoryInterface[T]):
    """Data access for a table whose rows can be soft-deleted."""

    @abstractmethod
    def find_soft(self, column: str, value: Any) -> Optional[T]:
        """Find first entry by key, ignoring soft-deleted entries."""

    @abstractmethod
    def get_first_soft(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> Optional[T]:
        """Get first entry ignoring soft-deleted ones."""

    @abstractmethod
    def get_all_soft(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> List[T]:
        """Get all entries ignoring soft-deleted ones."""

    @abstractmethod
    def count_soft(self, conditions: Conditions = None, values: Sequence[Any] = ()) -> int:
        """Count entries ignoring soft-deleted ones."""

    @abstractmethod
    def delete_soft(self, model: T) -> None:
        """Soft delete entry."""

    @abstractmethod
    def restore_soft(self, model: T) -> None:
        """Restore soft-deleted entry."""
