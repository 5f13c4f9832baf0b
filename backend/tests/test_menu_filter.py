import pytest
from canteen_authz.constants.navigation import MENU_CONFIG
from canteen_authz.constants.permissions import ROLE_PERMISSIONS
from canteen_authz.services.decision import PermissionSet
from canteen_authz.services.menu import MenuItem, build_menu, filter_menu

MENU = build_menu(MENU_CONFIG)


def _keys(items):
    out = []
    for item in items:
        out.append(item.key)
        if item.children:
            out.extend(_keys(item.children))
    return out


def test_wildcard_keeps_identical_tree():
    assert filter_menu(MENU, PermissionSet.wildcard()) == MENU


def test_wildcard_keeps_childless_groups_too():
    menu = (MenuItem('group', 'Group', children=()), MenuItem('gated', 'Gated', permission='x:y', children=(), requires_children=True))
    assert filter_menu(menu, PermissionSet.wildcard()) == menu


@pytest.mark.parametrize('codes', [[], ['view:dashboard'], ROLE_PERMISSIONS['OPERATOR'], ROLE_PERMISSIONS['ADMIN'], ['*']])
def test_filtering_is_idempotent(codes):
    perms = PermissionSet.of(codes)
    once = filter_menu(MENU, perms)
    assert filter_menu(once, perms) == once


def test_input_tree_is_not_mutated():
    before = build_menu(MENU_CONFIG)
    filter_menu(MENU, PermissionSet.of(['manage:staff']))
    assert MENU == before


def test_operator_sees_dashboard_and_products_only():
    items = filter_menu(MENU, PermissionSet.of(ROLE_PERMISSIONS['OPERATOR']))
    assert _keys(items) == ['/', '/products']


def test_group_without_permission_survives_with_visible_children():
    items = filter_menu(MENU, PermissionSet.of(['manage:staff', 'manage:roles']))
    assert _keys(items) == ['settings_group', '/settings/staff', '/settings/roles']


def test_group_requiring_children_dropped_when_none_visible():
    # ADMIN holds manage:marketing but neither coupon nor promotion permission
    items = filter_menu(MENU, PermissionSet.of(ROLE_PERMISSIONS['ADMIN']))
    assert 'marketing_group' not in _keys(items)
    items = filter_menu(MENU, PermissionSet.of(['manage:marketing', 'manage:coupons']))
    assert _keys(items) == ['marketing_group', '/marketing/coupons']


def test_permissioned_parent_without_requires_children_kept_empty():
    menu = (MenuItem('reports', 'Reports', permission='view:analytics',
                     children=(MenuItem('export', 'Export', permission='export:reports'),)),)
    items = filter_menu(menu, PermissionSet.of(['view:analytics']))
    assert items == (MenuItem('reports', 'Reports', permission='view:analytics', children=()),)


def test_no_permissions_hides_everything():
    assert filter_menu(MENU, PermissionSet.empty()) == ()


def test_to_dict_serializes_nested_items():
    items = filter_menu(MENU, PermissionSet.of(['manage:marketing', 'manage:promotions']))
    assert [i.to_dict() for i in items] == [{
        'key': 'marketing_group',
        'label': 'Marketing',
        'permission': 'manage:marketing',
        'requires_children': True,
        'children': [{'key': '/marketing/promotions', 'label': 'Promotions', 'permission': 'manage:promotions'}],
    }]
