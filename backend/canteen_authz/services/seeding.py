"""Idempotent seeding of the permission tree and role presets, plus tree validation.

SUPER_ADMIN is seeded without join rows: its wildcard comes from the role
code, never from role_permissions.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.orm import Session

from canteen_authz.constants.permissions import PERMISSION_TREE, ROLE_PERMISSIONS, SUPER_ADMIN, WILDCARD
from canteen_authz.models.authz import Permission, Role, RolePermission
from canteen_authz.services.errors import PermissionTreeError

logger = logging.getLogger(__name__)

# (id, code, parent_id)
PermissionNode = Tuple[str, str, Optional[str]]


def validate_permission_tree(nodes: Iterable[PermissionNode]) -> List[str]:
    """Return a list of problems: duplicate codes, unknown parents, cycles. Empty means valid."""
    problems: List[str] = []
    parent_of: Dict[str, Optional[str]] = {}
    code_of: Dict[str, str] = {}
    seen_codes = set()
    for node_id, code, parent_id in nodes:
        if code in seen_codes:
            problems.append(f'Duplicate permission code: {code}')
        seen_codes.add(code)
        parent_of[node_id] = parent_id
        code_of[node_id] = code
    for node_id, parent_id in parent_of.items():
        if parent_id is not None and parent_id not in parent_of:
            problems.append(f'Permission {code_of[node_id]} references unknown parent {parent_id}')
    reported = set()
    for start in parent_of:
        path = []
        on_path = set()
        current: Optional[str] = start
        while current is not None and current in parent_of and current not in on_path:
            path.append(current)
            on_path.add(current)
            current = parent_of[current]
        if current is not None and current in on_path:
            cycle = path[path.index(current):]
            key = frozenset(cycle)
            if key not in reported:
                reported.add(key)
                problems.append('Permission cycle: ' + ' -> '.join(code_of[n] for n in cycle + [current]))
    return problems


def assert_valid_permission_tree(nodes: Iterable[PermissionNode]):
    problems = validate_permission_tree(nodes)
    if problems:
        raise PermissionTreeError('; '.join(problems))


def permission_nodes(session: Session) -> List[PermissionNode]:
    return [tuple(r) for r in session.execute(select(Permission.id, Permission.code, Permission.parent_id)).all()]


def ensure_permissions(session: Session) -> int:
    existing = {p.code: p for p in session.execute(select(Permission)).scalars().all()}
    created = 0
    for code, (name, kind, _parent) in PERMISSION_TREE.items():
        if code not in existing:
            perm = Permission(code=code, name=name, kind=kind)
            session.add(perm)
            existing[code] = perm
            created += 1
    session.flush()
    for code, (_name, _kind, parent_code) in PERMISSION_TREE.items():
        parent_id = existing[parent_code].id if parent_code else None
        if existing[code].parent_id != parent_id:
            existing[code].parent_id = parent_id
    session.flush()
    return created


def ensure_roles(session: Session) -> int:
    existing_roles = {r.code: r for r in session.execute(select(Role)).scalars().all()}
    created = 0
    for role_code in ROLE_PERMISSIONS:
        if role_code not in existing_roles:
            role = Role(code=role_code, name=role_code.replace('_', ' ').title(), status='ACTIVE')
            session.add(role)
            existing_roles[role_code] = role
            created += 1
    session.flush()

    perms_map = {p.code: p for p in session.execute(select(Permission)).scalars()}
    for role_code, role in existing_roles.items():
        raw_codes = ROLE_PERMISSIONS.get(role_code)
        if raw_codes is None or role_code == SUPER_ADMIN or WILDCARD in raw_codes:
            continue
        current_codes = {rp.permission.code for rp in role.permissions}
        for code in set(raw_codes) - current_codes:
            if code not in perms_map:
                logger.warning('Missing permission referenced by role %s: %s', role_code, code)
                continue
            session.add(RolePermission(role=role, permission=perms_map[code]))
    session.flush()
    return created


def build_role_permission_map(session: Session) -> Dict[str, List[str]]:
    mapping = {}
    for role in session.execute(select(Role)).scalars().all():
        mapping[role.code] = sorted({rp.permission.code for rp in role.permissions})
    return mapping


def seed_authz(session: Session) -> Tuple[int, int]:
    """Seed permissions then roles; validates the resulting tree. Caller commits."""
    created_p = ensure_permissions(session)
    created_r = ensure_roles(session)
    assert_valid_permission_tree(permission_nodes(session))
    return created_p, created_r


__all__ = [
    'validate_permission_tree', 'assert_valid_permission_tree', 'permission_nodes', 'ensure_permissions',
    'ensure_roles', 'build_role_permission_map', 'seed_authz',
]
