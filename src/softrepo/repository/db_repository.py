from datetime import datetime
from typing import Any, List, Optional, Sequence, Type

import psycopg

from softrepo.db import Database
from softrepo.exceptions import ModelNotPersistedError, SoftDeleteNotSupportedError
from softrepo.logger import get_logger
from softrepo.query import Condition, QueryBuilder
from softrepo.repository.base import Conditions, SoftRepositoryInterface, T

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def _resolve_conditions(conditions: Conditions, values: Sequence[Any]) -> tuple[Optional[str], tuple]:
    """Normalize a raw condition string or a Condition into (sql, params)."""
    if isinstance(conditions, Condition):
        if values:
            raise ValueError("Pass values inside the Condition, not alongside it")
        return conditions.sql, conditions.params
    if conditions is None and values:
        raise ValueError("Values given without conditions to bind them to")
    return conditions, tuple(values)


class DbRepository(SoftRepositoryInterface[T]):
    """
    Database-backed repository for one table.

    Reads go through a single query pipeline (select, from, where, soft-delete
    filter, order, execute). Writes are keyed on the model's identity
    attribute: `save` inserts models without one and updates models with one.

    Soft-delete support is enabled by naming the nullable timestamp column
    that marks a row as deleted. Repositories built without one raise
    SoftDeleteNotSupportedError from every soft operation.
    """

    def __init__(
        self,
        db: Database,
        table: str,
        model_class: Type[T],
        deleted: Optional[str] = None,
    ):
        self._db = db
        self._table = table
        self._model_class = model_class
        self._deleted = deleted or None

    @property
    def db(self) -> Database:
        return self._db

    @property
    def table(self) -> str:
        return self._table

    @property
    def model_class(self) -> Type[T]:
        return self._model_class

    @property
    def deleted(self) -> Optional[str]:
        return self._deleted

    @property
    def supports_soft_delete(self) -> bool:
        return self._deleted is not None

    @property
    def _id(self) -> str:
        return self._model_class.id_field

    # =========================================================================
    # Reads
    # =========================================================================

    def find(self, column: str, value: Any) -> Optional[T]:
        """Find first entry whose `column` equals `value`, or None."""
        return self.get_first(Condition.eq(column, value))

    def find_soft(self, column: str, value: Any) -> Optional[T]:
        """Find first entry whose `column` equals `value`, ignoring soft-deleted entries."""
        return self.get_first_soft(Condition.eq(column, value))

    def get_first(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> Optional[T]:
        """
        Retrieve the first entry, optionally filtered by search criteria.

        Args:
            conditions: WHERE condition with `?` placeholders, or a Condition
            values: Values to bind to the placeholders, in order
            order: ORDER BY expression, e.g. "created_at DESC"

        Returns:
            A model instance, or None if nothing matched
        """
        return self._execute_query(None, conditions, values, order).fetch_class(self._model_class)

    def get_first_soft(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> Optional[T]:
        """Like get_first(), ignoring soft-deleted entries."""
        return self._execute_query(None, conditions, values, order, soft=True).fetch_class(
            self._model_class
        )

    def get_all(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> List[T]:
        """
        Retrieve all entries, optionally filtered by search criteria.

        Returns:
            List of model instances, empty if nothing matched
        """
        return self._execute_query(None, conditions, values, order).fetch_all_class(
            self._model_class
        )

    def get_all_soft(
        self, conditions: Conditions = None, values: Sequence[Any] = (), order: Optional[str] = None
    ) -> List[T]:
        """Like get_all(), ignoring soft-deleted entries."""
        return self._execute_query(None, conditions, values, order, soft=True).fetch_all_class(
            self._model_class
        )

    def count(self, conditions: Conditions = None, values: Sequence[Any] = ()) -> int:
        """Count entries, optionally filtered by search criteria."""
        row = self._execute_query(f"COUNT({self._id}) AS num", conditions, values).fetch()
        return self._parse_count(row)

    def count_soft(self, conditions: Conditions = None, values: Sequence[Any] = ()) -> int:
        """Count entries ignoring soft-deleted ones."""
        row = self._execute_query(
            f"COUNT({self._id}) AS num", conditions, values, soft=True
        ).fetch()
        return self._parse_count(row)

    @staticmethod
    def _parse_count(row: Optional[dict]) -> int:
        # A missing or unparseable aggregate counts as zero.
        if not row:
            return 0
        try:
            return int(row["num"])
        except (KeyError, TypeError, ValueError):
            return 0

    def _execute_query(
        self,
        select: Optional[str] = None,
        conditions: Conditions = None,
        values: Sequence[Any] = (),
        order: Optional[str] = None,
        soft: bool = False,
    ) -> QueryBuilder:
        """
        Build and execute a SELECT against the table.

        Args:
            select: Selection expression, all columns if None
            conditions: WHERE condition string or Condition
            values: Values for the condition placeholders
            order: ORDER BY expression
            soft: Whether to exclude soft-deleted rows

        Returns:
            The executed QueryBuilder, ready for fetching
        """
        where, params = _resolve_conditions(conditions, values)
        if soft:
            self._require_soft()

        query = self._db.connect()
        query = query.select(select) if select is not None else query.select()
        query = query.from_(self._table)
        if where is not None:
            query = query.where(where)
        if soft:
            soft_cond = f"{self._deleted} IS NULL"
            query = query.and_where(soft_cond) if where is not None else query.where(soft_cond)
        if order is not None:
            query = query.order_by(order)
        return query.execute(params)

    # =========================================================================
    # Writes
    # =========================================================================

    def save(self, model: T) -> T:
        """
        Save entry by inserting if the identity is missing and updating otherwise.

        Returns:
            The same model; after an insert its identity attribute is set.
        """
        if model.is_persisted:
            self._update(model)
        else:
            self._create(model)
        return model

    def delete(self, model: T) -> None:
        """Delete the entry's row and unset the model's identity."""
        self._require_persisted(model, "delete")
        query = self._db.connect().delete_from(self._table).where(f"{self._id} = ?")
        self._run("delete from", query, [model.identity])
        logger.info("Deleted %s #%s", self._table, model.identity)
        model.identity = None

    def delete_soft(self, model: T) -> None:
        """Mark the entry's row as deleted with the current timestamp."""
        self._require_soft()
        self._require_persisted(model, "soft delete")
        query = self._db.connect().update(self._table, [self._deleted]).where(f"{self._id} = ?")
        self._run("soft delete from", query, [_now(), model.identity])
        logger.info("Soft deleted %s #%s", self._table, model.identity)

    def restore_soft(self, model: T) -> None:
        """Clear the soft-delete marker of the entry's row."""
        self._require_soft()
        self._require_persisted(model, "restore")
        query = self._db.connect().update(self._table, [self._deleted]).where(f"{self._id} = ?")
        self._run("restore in", query, [None, model.identity])
        logger.info("Restored %s #%s", self._table, model.identity)

    def _create(self, model: T) -> None:
        props = model.columns()
        query = self._db.connect().insert(self._table, list(props), returning=self._id)
        self._run("insert into", query, list(props.values()))
        model.identity = query.last_insert_id()
        logger.info("Inserted %s #%s", self._table, model.identity)

    def _update(self, model: T) -> None:
        props = model.columns()
        values = list(props.values())
        values.append(model.identity)
        query = self._db.connect().update(self._table, list(props)).where(f"{self._id} = ?")
        self._run("update", query, values)
        logger.info("Updated %s #%s", self._table, model.identity)

    def _run(self, action: str, query: QueryBuilder, values: Sequence[Any]) -> QueryBuilder:
        try:
            return query.execute(values)
        except psycopg.Error as e:
            logger.error("Failed to %s %s: %s", action, self._table, e)
            raise

    # =========================================================================
    # Guards
    # =========================================================================

    def _require_soft(self) -> None:
        if self._deleted is None:
            raise SoftDeleteNotSupportedError(self._table)

    @staticmethod
    def _require_persisted(model: T, operation: str) -> None:
        if not model.is_persisted:
            raise ModelNotPersistedError(model, operation)
