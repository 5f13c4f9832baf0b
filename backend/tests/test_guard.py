import pytest
from canteen_authz.services.decision import (
    AuthenticatedSession, AuthorizationDecision, PermissionSet, RestrictedTo, StaffProfile,
)
from canteen_authz.services.guard import (
    affordance, check_route, has_all_permissions, has_any_permission, has_permission, has_role, is_admin,
    is_super_admin, required_permission_for,
)

OPERATOR = PermissionSet.of(['view:dashboard', 'view:canteen', 'manage:products', 'view:orders'])


def _profile(role_code):
    return StaffProfile(id='s', username='s', display_name='S', email=None, role_code=role_code)


def test_literal_match_only():
    assert has_permission(OPERATOR, 'manage:products')
    assert not has_permission(OPERATOR, 'manage:orders')
    assert not has_permission(OPERATOR, 'manage')
    assert not has_permission(PermissionSet.of(['manage:*']), 'manage:orders')


def test_wildcard_grants_everything():
    assert has_permission(PermissionSet.wildcard(), 'manage:anything')


def test_missing_grantee_is_denied():
    assert not has_permission(None, 'view:dashboard')


def test_session_is_accepted_as_grantee():
    session = AuthenticatedSession('s', _profile('OPERATOR'), AuthorizationDecision(OPERATOR, RestrictedTo.nothing()))
    assert has_permission(session, 'view:orders')
    assert not has_permission(session, 'manage:orders')


def test_any_and_all():
    assert has_any_permission(OPERATOR, ['manage:orders', 'view:orders'])
    assert not has_any_permission(OPERATOR, ['manage:orders'])
    assert has_all_permissions(OPERATOR, ['view:orders', 'manage:products'])
    assert not has_all_permissions(OPERATOR, ['view:orders', 'manage:orders'])


def test_role_helpers():
    assert is_super_admin(_profile('SUPER_ADMIN'))
    assert is_admin(_profile('SUPER_ADMIN')) and is_admin(_profile('ADMIN'))
    assert not is_admin(_profile('CANTEEN_MANAGER'))
    assert has_role(_profile('VIEWER'), 'VIEWER')
    assert not has_role(None, 'VIEWER')


def test_unlisted_route_is_allowed_without_permissions():
    decision = check_route(PermissionSet.empty(), '/profile')
    assert decision.allowed
    assert decision.required_permission is None


def test_listed_route_allowed_with_permission():
    decision = check_route(OPERATOR, '/products/')
    assert decision.allowed
    assert decision.path == '/products'
    assert decision.required_permission == 'manage:products'


def test_denied_route_redirects_with_notice():
    decision = check_route(OPERATOR, '/orders?page=2', redirect_to='/dashboard')
    assert not decision.allowed
    assert decision.required_permission == 'manage:orders'
    assert decision.redirect_to == '/dashboard'
    assert decision.notice
    assert decision.to_dict()['allowed'] is False


def test_required_permission_lookup():
    assert required_permission_for('/settings/permissions') == 'view:permissions'
    assert required_permission_for('settings/roles') == 'manage:roles'
    assert required_permission_for('/nowhere') is None


def test_affordance_falls_back_when_denied():
    assert affordance(OPERATOR, 'manage:products', 'delete-button') == 'delete-button'
    assert affordance(OPERATOR, 'manage:departments', 'delete-button') is None
    assert affordance(OPERATOR, 'manage:departments', 'delete-button', fallback='disabled') == 'disabled'


def test_no_permissions_never_redirected_to_a_gated_page():
    decision = check_route(PermissionSet.empty(), '/orders')
    assert not decision.allowed
    assert decision.redirect_to == '/forbidden'
    assert required_permission_for(decision.redirect_to) is None
    assert check_route(PermissionSet.empty(), decision.redirect_to).allowed


def test_gated_redirect_target_kept_when_grantee_may_open_it():
    assert check_route(OPERATOR, '/orders').redirect_to == '/'
    assert check_route(OPERATOR, '/orders', redirect_to='/settings/roles').redirect_to == '/forbidden'


def test_bare_profile_is_rejected_as_grantee():
    with pytest.raises(TypeError):
        has_permission(_profile('ADMIN'), 'view:dashboard')
    with pytest.raises(TypeError):
        affordance(_profile('ADMIN'), 'view:dashboard', 'button')
