from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from canteen_authz.config.authz import DEFAULT_DENIED_REDIRECT, DENIED_NOTICE, FORBIDDEN_LANDING
from canteen_authz.constants.navigation import ROUTE_PERMISSIONS
from canteen_authz.constants.permissions import ADMIN, SUPER_ADMIN
from canteen_authz.services.decision import AuthenticatedSession, PermissionSet, StaffProfile

Grantee = Union[AuthenticatedSession, PermissionSet, None]


def _permissions_of(grantee: Grantee) -> PermissionSet:
    if grantee is None:
        return PermissionSet.empty()
    if isinstance(grantee, AuthenticatedSession):
        return grantee.permissions
    if isinstance(grantee, PermissionSet):
        return grantee
    # a bare StaffProfile carries no resolved permissions
    raise TypeError(
        f'permission checks need an AuthenticatedSession or PermissionSet, got {type(grantee).__name__}'
    )


def has_permission(grantee: Grantee, code: str) -> bool:
    """True iff the resolved set holds the wildcard or exactly ``code``."""
    return _permissions_of(grantee).allows(code)


def has_any_permission(grantee: Grantee, codes: Iterable[str]) -> bool:
    perms = _permissions_of(grantee)
    return any(perms.allows(c) for c in codes)


def has_all_permissions(grantee: Grantee, codes: Iterable[str]) -> bool:
    perms = _permissions_of(grantee)
    return all(perms.allows(c) for c in codes)


def _profile_of(subject: Union[AuthenticatedSession, StaffProfile, None]) -> Optional[StaffProfile]:
    if isinstance(subject, AuthenticatedSession):
        return subject.profile
    return subject


def has_role(subject: Union[AuthenticatedSession, StaffProfile, None], role_code: str) -> bool:
    profile = _profile_of(subject)
    return profile is not None and profile.role_code == role_code


def is_super_admin(subject: Union[AuthenticatedSession, StaffProfile, None]) -> bool:
    return has_role(subject, SUPER_ADMIN)


def is_admin(subject: Union[AuthenticatedSession, StaffProfile, None]) -> bool:
    return has_role(subject, SUPER_ADMIN) or has_role(subject, ADMIN)


def affordance(grantee: Grantee, code: str, granted: Any, fallback: Any = None) -> Any:
    """Pick what a UI affordance renders: ``granted`` when allowed, else ``fallback``."""
    return granted if has_permission(grantee, code) else fallback


@dataclass(frozen=True)
class RouteDecision:
    path: str
    allowed: bool
    required_permission: Optional[str] = None
    redirect_to: Optional[str] = None
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'allowed': self.allowed,
            'required_permission': self.required_permission,
            'redirect_to': self.redirect_to,
            'notice': self.notice,
        }


def normalize_path(path: str) -> str:
    path = (path or '/').split('?', 1)[0]
    if not path.startswith('/'):
        path = '/' + path
    return path.rstrip('/') or '/'


def required_permission_for(path: str, routes: Mapping[str, str] = ROUTE_PERMISSIONS) -> Optional[str]:
    return routes.get(normalize_path(path))


def check_route(
    grantee: Grantee,
    path: str,
    routes: Mapping[str, str] = ROUTE_PERMISSIONS,
    redirect_to: str = DEFAULT_DENIED_REDIRECT,
    notice: str = DENIED_NOTICE,
) -> RouteDecision:
    """Gate a navigation transition. Unlisted paths are allowed unconditionally.

    A denial never redirects to a route the grantee would be denied as well;
    FORBIDDEN_LANDING is used instead.
    """
    target = normalize_path(path)
    required = routes.get(target)
    if required is None or has_permission(grantee, required):
        return RouteDecision(path=target, allowed=True, required_permission=required)
    return RouteDecision(
        path=target,
        allowed=False,
        required_permission=required,
        redirect_to=_safe_redirect(grantee, redirect_to, routes),
        notice=notice,
    )


def _safe_redirect(grantee: Grantee, redirect_to: str, routes: Mapping[str, str]) -> str:
    target = normalize_path(redirect_to)
    required = routes.get(target)
    if required is None or has_permission(grantee, required):
        return redirect_to
    return FORBIDDEN_LANDING


__all__ = [
    'has_permission', 'has_any_permission', 'has_all_permissions', 'has_role', 'is_admin', 'is_super_admin',
    'affordance', 'RouteDecision', 'normalize_path', 'required_permission_for', 'check_route',
]
