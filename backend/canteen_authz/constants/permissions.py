"""Central enum-like definitions to avoid typos in role / permission strings.
Extend cautiously; never rename codes silently. Create new ones and deprecate old via migration if needed.
"""
from __future__ import annotations
from typing import Dict, FrozenSet, List

WILDCARD = '*'

# Role codes
SUPER_ADMIN = 'SUPER_ADMIN'
ADMIN = 'ADMIN'
CANTEEN_MANAGER = 'CANTEEN_MANAGER'
OPERATOR = 'OPERATOR'
VIEWER = 'VIEWER'

ROLE_CODES = [SUPER_ADMIN, ADMIN, CANTEEN_MANAGER, OPERATOR, VIEWER]

# Roles that see every canteen regardless of department assignment.
UNSCOPED_ROLE_CODES: FrozenSet[str] = frozenset({SUPER_ADMIN, ADMIN})

STATUS_ACTIVE = 'ACTIVE'
STATUS_INACTIVE = 'INACTIVE'

KIND_MENU = 'MENU'
KIND_ACTION = 'ACTION'

# Legacy default permissions by role code. Consulted only when the role tables
# do not yield an answer for a profile.
ROLE_PERMISSIONS: Dict[str, List[str]] = {
    SUPER_ADMIN: [WILDCARD],
    ADMIN: [
        'view:all',
        'view:dashboard',
        'manage:staff',
        'manage:departments',
        'manage:roles',
        'manage:permissions',
        'manage:canteens',
        'manage:products',
        'manage:orders',
        'manage:marketing',
        'view:analytics',
    ],
    CANTEEN_MANAGER: [
        'view:dashboard',
        'view:canteen',
        'manage:canteen',
        'manage:products',
        'manage:orders',
        'view:analytics',
    ],
    OPERATOR: [
        'view:dashboard',
        'view:canteen',
        'manage:products',
        'view:orders',
    ],
    VIEWER: [
        'view:dashboard',
        'view:canteen',
        'view:products',
        'view:orders',
    ],
}

# Permission tree: code -> (name, kind, parent code). Seeded into the permissions table.
PERMISSION_TREE: Dict[str, tuple] = {
    'view:dashboard': ('Dashboard', KIND_MENU, None),
    'view:all': ('View all data', KIND_ACTION, None),
    'view:canteen': ('View own canteen', KIND_MENU, None),
    'manage:canteen': ('Manage own canteen', KIND_ACTION, 'view:canteen'),
    'manage:canteens': ('Canteens', KIND_MENU, None),
    'view:products': ('View products', KIND_MENU, None),
    'manage:products': ('Products', KIND_MENU, None),
    'view:orders': ('View orders', KIND_MENU, None),
    'manage:orders': ('Orders', KIND_MENU, None),
    'manage:users': ('Users', KIND_MENU, None),
    'manage:marketing': ('Marketing', KIND_MENU, None),
    'manage:coupons': ('Coupons', KIND_MENU, 'manage:marketing'),
    'manage:promotions': ('Promotions', KIND_MENU, 'manage:marketing'),
    'view:analytics': ('Analytics', KIND_MENU, None),
    'manage:staff': ('Staff', KIND_MENU, None),
    'manage:departments': ('Departments', KIND_MENU, None),
    'manage:roles': ('Roles', KIND_MENU, None),
    'view:permissions': ('View permissions', KIND_MENU, None),
    'manage:permissions': ('Manage permissions', KIND_ACTION, 'view:permissions'),
    'manage:config': ('System configuration', KIND_MENU, None),
}

ALL_PERMISSION_CODES = sorted(PERMISSION_TREE)
