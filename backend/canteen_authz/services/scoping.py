from __future__ import annotations
from typing import Any, Iterable, List, Mapping
from flask import abort
from sqlalchemy import false

from canteen_authz.services.decision import CanteenScope, Unrestricted


def apply_canteen_scope(query, canteen_column, scope: CanteenScope):
    """Narrow a select / Query to the canteens in scope.

    Works with anything exposing ``.where`` (2.0 Select) or ``.filter`` (legacy Query).
    An empty restriction adds a never-matching predicate instead of skipping the filter.
    """
    if isinstance(scope, Unrestricted):
        return query
    if scope.canteen_ids:
        clause = canteen_column.in_(sorted(scope.canteen_ids))
    else:
        clause = false()
    if hasattr(query, 'where'):
        return query.where(clause)
    return query.filter(clause)


def _field_value(row: Any, field: str):
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def filter_rows(rows: Iterable[Any], field: str, scope: CanteenScope) -> List[Any]:
    """In-memory counterpart of apply_canteen_scope for mappings or objects."""
    if isinstance(scope, Unrestricted):
        return list(rows)
    return [r for r in rows if _field_value(r, field) in scope.canteen_ids]


def can_access_canteen(scope: CanteenScope, canteen_id: str) -> bool:
    return scope.allows(canteen_id)


def assert_canteen_access(scope: CanteenScope, canteen_id: str):
    if not scope.allows(canteen_id):
        abort(403, description='Canteen access denied')


__all__ = ['apply_canteen_scope', 'filter_rows', 'can_access_canteen', 'assert_canteen_access']
