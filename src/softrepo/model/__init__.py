from softrepo.model.base import Model, Record

__all__ = ["Model", "Record"]
