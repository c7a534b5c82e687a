import dataclasses
from typing import Any, Mapping

from softrepo.exceptions import ReservedColumnError


class Model:
    """
    Base class for records stored by a repository.

    A model is a mutable record whose attributes map one-to-one onto table
    columns. One attribute, named by `id_field`, holds the row identity:
    it is None until the model has been saved.

    Subclasses are usually dataclasses, which fixes the column order to the
    field declaration order:

        @dataclass
        class User(Model):
            id: Optional[int] = None
            name: str = ""
            deleted_at: Optional[str] = None

    Plain subclasses accept arbitrary keyword attributes and use their
    assignment order. Names the class already defines (identity, columns,
    to_dict, ...) are rejected with ReservedColumnError; use Record for
    tables whose columns may clash.
    """

    id_field = "id"

    def __init__(self, **attrs: Any):
        reserved = [n for n in attrs if n != self.id_field and hasattr(type(self), n)]
        if reserved:
            raise ReservedColumnError(type(self), reserved)
        setattr(self, self.id_field, None)
        for name, value in attrs.items():
            setattr(self, name, value)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Model":
        """Hydrate an instance from a column -> value mapping."""
        if dataclasses.is_dataclass(cls):
            names = {f.name for f in dataclasses.fields(cls) if f.init}
            return cls(**{k: v for k, v in row.items() if k in names})
        return cls(**row)

    @property
    def identity(self) -> Any:
        return getattr(self, self.id_field, None)

    @identity.setter
    def identity(self, value: Any) -> None:
        setattr(self, self.id_field, value)

    @property
    def is_persisted(self) -> bool:
        """True once the model corresponds to a stored row."""
        return self.identity is not None

    def columns(self) -> dict[str, Any]:
        """
        Ordered column -> value mapping, excluding the identity attribute.

        Attributes whose names start with an underscore are never columns.
        """
        if dataclasses.is_dataclass(self):
            names = [f.name for f in dataclasses.fields(self)]
        else:
            names = list(vars(self))
        return {
            name: getattr(self, name)
            for name in names
            if name != self.id_field and not name.startswith("_")
        }

    def to_dict(self) -> dict[str, Any]:
        """All columns including the identity attribute."""
        return {self.id_field: self.identity, **self.columns()}


class Record(Model):
    """
    Schema-less model holding whatever columns a row carries.

    Row data lives in its own mapping, so any column name is accepted,
    including ones that match model attributes. Columns are read as
    attributes where the name is free, and always with `record["name"]`.
    """

    def __init__(self, **attrs: Any):
        object.__setattr__(self, "_data", {self.id_field: None})
        self._data.update(attrs)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Record":
        record = cls()
        record._data.update(row)
        return record

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} has no column {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self._data[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._data[name] = value

    @property
    def identity(self) -> Any:
        return self._data.get(self.id_field)

    @identity.setter
    def identity(self, value: Any) -> None:
        self._data[self.id_field] = value

    def columns(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self._data.items()
            if name != self.id_field and not name.startswith("_")
        }

    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"Record({attrs})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.to_dict() == other.to_dict()
