from __future__ import annotations
import logging
from typing import Callable, Optional, Sequence
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from canteen_authz.constants.permissions import ROLE_PERMISSIONS, SUPER_ADMIN, UNSCOPED_ROLE_CODES
from canteen_authz.models.authz import DepartmentCanteen, Permission, Role, RolePermission, Staff
from canteen_authz.services.decision import (
    CanteenScope, PermissionSet, RestrictedTo, StaffProfile, UNRESTRICTED,
)
from canteen_authz.services.errors import PermissionSourceUnavailable, ScopeSourceUnavailable, UnknownRoleCode

logger = logging.getLogger(__name__)

# A strategy returns a PermissionSet to stop the chain, or None to hand over to the next one.
PermissionStrategy = Callable[[Session, StaffProfile], Optional[PermissionSet]]


def _role_permission_codes(session: Session, role_id: str) -> PermissionSet:
    try:
        codes = session.execute(
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        ).scalars().all()
    except SQLAlchemyError as exc:
        raise PermissionSourceUnavailable(f'role_permissions lookup failed for role {role_id}') from exc
    return PermissionSet.of(codes)


def super_admin_wildcard(session: Session, profile: StaffProfile) -> Optional[PermissionSet]:
    if profile.role_code == SUPER_ADMIN:
        return PermissionSet.wildcard()
    return None


def permissions_by_role_ref(session: Session, profile: StaffProfile) -> Optional[PermissionSet]:
    """Join by explicit role reference. Zero rows is an answer, not a fall-through."""
    if not profile.role_ref:
        return None
    return _role_permission_codes(session, profile.role_ref)


def permissions_by_role_code(session: Session, profile: StaffProfile) -> Optional[PermissionSet]:
    """Resolve role_code to a role row, then join. Continues only when no role row matches."""
    if not profile.role_code:
        return None
    try:
        role_id = session.execute(select(Role.id).where(Role.code == profile.role_code)).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise PermissionSourceUnavailable(f'role lookup failed for code {profile.role_code}') from exc
    if role_id is None:
        return None
    return _role_permission_codes(session, role_id)


def default_role_permissions(session: Session, profile: StaffProfile) -> Optional[PermissionSet]:
    defaults = ROLE_PERMISSIONS.get(profile.role_code or '')
    if defaults is None:
        err = UnknownRoleCode(f'no default permissions for role code {profile.role_code!r}')
        logger.warning('%s (staff %s); resolving to no permissions', err, profile.id)
        return PermissionSet.empty()
    return PermissionSet.of(defaults)


PERMISSION_STRATEGIES: Sequence[PermissionStrategy] = (
    super_admin_wildcard,
    permissions_by_role_ref,
    permissions_by_role_code,
    default_role_permissions,
)


def _discard_failed_transaction(session: Session):
    try:
        session.rollback()
    except SQLAlchemyError:
        logger.exception('Rollback after failed permission lookup also failed')


def resolve_first(strategies: Sequence[PermissionStrategy], session: Session, profile: StaffProfile) -> PermissionSet:
    """Run strategies in order; the first non-None result wins.

    A strategy raising PermissionSourceUnavailable is logged and skipped. When
    every strategy passes, the result is the empty set.
    """
    for strategy in strategies:
        try:
            result = strategy(session, profile)
        except PermissionSourceUnavailable as exc:
            logger.warning('Permission source unavailable in %s for staff %s: %s; falling through',
                           strategy.__name__, profile.id, exc)
            _discard_failed_transaction(session)
            continue
        if result is not None:
            logger.debug('Permissions for staff %s resolved by %s', profile.id, strategy.__name__)
            return result
    return PermissionSet.empty()


def resolve_permissions(session: Session, profile: StaffProfile) -> PermissionSet:
    return resolve_first(PERMISSION_STRATEGIES, session, profile)


def resolve_canteen_scope(session: Session, staff_id: str) -> CanteenScope:
    """Canteens a staff member may access, by department assignment.

    Administrative roles are unrestricted. Every failure path yields an empty
    restriction (deny all rows), never UNRESTRICTED.
    """
    try:
        row = session.execute(
            select(Staff.role_code, Staff.department_id).where(Staff.id == staff_id)
        ).one_or_none()
    except SQLAlchemyError as exc:
        err = ScopeSourceUnavailable(f'staff lookup failed for {staff_id}')
        logger.warning('%s: %s; denying all canteens', err, exc)
        return RestrictedTo.nothing()
    if row is None:
        logger.info('No staff record %s for scope resolution; denying all canteens', staff_id)
        return RestrictedTo.nothing()
    role_code, department_id = row
    if role_code in UNSCOPED_ROLE_CODES:
        return UNRESTRICTED
    if not department_id:
        return RestrictedTo.nothing()
    try:
        canteen_ids = session.execute(
            select(DepartmentCanteen.canteen_id).where(DepartmentCanteen.department_id == department_id)
        ).scalars().all()
    except SQLAlchemyError as exc:
        err = ScopeSourceUnavailable(f'department_canteens lookup failed for department {department_id}')
        logger.warning('%s: %s; denying all canteens', err, exc)
        return RestrictedTo.nothing()
    return RestrictedTo(frozenset(canteen_ids))
