from typing import Any, Sequence


class Condition:
    """
    A SQL predicate together with the values bound to its `?` placeholders.

    Conditions compose with `&` (AND) and `|` (OR); each side is
    parenthesized and the parameters are concatenated left to right, so
    positional binding is preserved.

    Usage:
        cond = Condition.eq("name", "Ada") & Condition.raw("age > ?", 30)
        cond.sql     # "(name = ?) AND (age > ?)"
        cond.params  # ("Ada", 30)
    """

    def __init__(self, sql: str, params: Sequence[Any] = ()):
        self.sql = sql
        self.params = tuple(params)

    @classmethod
    def raw(cls, sql: str, *params: Any) -> "Condition":
        """Wrap a hand-written predicate and its values."""
        return cls(sql, params)

    @classmethod
    def eq(cls, column: str, value: Any) -> "Condition":
        """`column = ?`. A None value matches nothing; use is_null() for NULL checks."""
        return cls(f"{column} = ?", (value,))

    @classmethod
    def is_null(cls, column: str) -> "Condition":
        return cls(f"{column} IS NULL")

    @classmethod
    def is_not_null(cls, column: str) -> "Condition":
        return cls(f"{column} IS NOT NULL")

    def _combine(self, other: "Condition", operator: str) -> "Condition":
        if not isinstance(other, Condition):
            return NotImplemented
        return Condition(
            f"({self.sql}) {operator} ({other.sql})", self.params + other.params
        )

    def __and__(self, other: "Condition") -> "Condition":
        return self._combine(other, "AND")

    def __or__(self, other: "Condition") -> "Condition":
        return self._combine(other, "OR")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self.sql == other.sql and self.params == other.params

    def __hash__(self) -> int:
        return hash((self.sql, self.params))

    def __repr__(self) -> str:
        return f"Condition({self.sql!r}, {self.params!r})"
