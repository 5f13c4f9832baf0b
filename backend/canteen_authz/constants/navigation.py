"""Static navigation definitions: the admin menu tree and the route -> permission table."""
from __future__ import annotations
from typing import Any, Dict, List

# Paths not listed here are reachable by any authenticated principal.
ROUTE_PERMISSIONS: Dict[str, str] = {
    '/': 'view:dashboard',
    '/dashboard': 'view:dashboard',
    '/products': 'manage:products',
    '/orders': 'manage:orders',
    '/users': 'manage:users',
    '/canteens': 'manage:canteens',
    '/marketing/coupons': 'manage:coupons',
    '/marketing/promotions': 'manage:promotions',
    '/analytics': 'view:analytics',
    '/settings/staff': 'manage:staff',
    '/settings/departments': 'manage:departments',
    '/settings/roles': 'manage:roles',
    '/settings/permissions': 'view:permissions',
    '/settings/config': 'manage:config',
}

MENU_CONFIG: List[Dict[str, Any]] = [
    {'key': '/', 'label': 'Dashboard', 'permission': 'view:dashboard'},
    {'key': '/products', 'label': 'Products', 'permission': 'manage:products'},
    {'key': '/orders', 'label': 'Orders', 'permission': 'manage:orders'},
    {'key': '/users', 'label': 'Users', 'permission': 'manage:users'},
    {'key': '/canteens', 'label': 'Canteens', 'permission': 'manage:canteens'},
    {
        'key': 'marketing_group',
        'label': 'Marketing',
        'permission': 'manage:marketing',
        'requires_children': True,
        'children': [
            {'key': '/marketing/coupons', 'label': 'Coupons', 'permission': 'manage:coupons'},
            {'key': '/marketing/promotions', 'label': 'Promotions', 'permission': 'manage:promotions'},
        ],
    },
    {'key': '/analytics', 'label': 'Analytics', 'permission': 'view:analytics'},
    {
        'key': 'settings_group',
        'label': 'Settings',
        'children': [
            {'key': '/settings/staff', 'label': 'Staff', 'permission': 'manage:staff'},
            {'key': '/settings/departments', 'label': 'Departments', 'permission': 'manage:departments'},
            {'key': '/settings/roles', 'label': 'Roles', 'permission': 'manage:roles'},
            {'key': '/settings/permissions', 'label': 'Permissions', 'permission': 'view:permissions'},
            {'key': '/settings/config', 'label': 'System configuration', 'permission': 'manage:config'},
        ],
    },
]
