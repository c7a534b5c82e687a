"""
Query

Statement construction for single-table queries: the fluent QueryBuilder
and the Condition predicate builder.
"""

from softrepo.query.builder import QueryBuilder
from softrepo.query.condition import Condition

__all__ = ["Condition", "QueryBuilder"]
