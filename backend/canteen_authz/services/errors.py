"""Error taxonomy for authorization resolution.

Only IdentityUnresolvable and ResolutionTimeout ever reach a caller. The
remaining types are raised inside the resolvers and recovered there (fall
through to the next authority, or fail closed); they exist so the recovery
sites can log a stable name.
"""
from __future__ import annotations


class AuthorizationError(Exception):
    status = 403
    title = 'Forbidden'


class IdentityUnresolvable(AuthorizationError):
    """The principal could not be mapped to any usable profile (store unreachable)."""
    status = 503
    title = 'Service Unavailable'


class ResolutionTimeout(AuthorizationError):
    """Resolution did not finish inside the configured deadline; treated as denial."""
    status = 503
    title = 'Service Unavailable'


class PermissionSourceUnavailable(AuthorizationError):
    pass


class ScopeSourceUnavailable(AuthorizationError):
    pass


class UnknownRoleCode(AuthorizationError):
    pass


class PermissionTreeError(ValueError):
    """Permission rows do not form a valid tree (duplicate code, unknown parent, cycle)."""


__all__ = [
    'AuthorizationError', 'IdentityUnresolvable', 'ResolutionTimeout', 'PermissionSourceUnavailable',
    'ScopeSourceUnavailable', 'UnknownRoleCode', 'PermissionTreeError',
]
