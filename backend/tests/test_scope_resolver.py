import pytest
from canteen_authz.services.decision import RestrictedTo, Unrestricted, UNRESTRICTED
from canteen_authz.services.policy import resolve_canteen_scope
from seed_helpers import make_canteen, make_department, make_staff, BoomSession, FlakySession


@pytest.mark.parametrize('role_code', ['SUPER_ADMIN', 'ADMIN'])
def test_admin_roles_are_unrestricted_even_with_department(db, role_code):
    dept = make_department(db, 'North', [make_canteen(db, 'C1', 'c1')])
    make_staff(db, 'boss', role_code, department=dept)
    assert resolve_canteen_scope(db, 'boss') is UNRESTRICTED


def test_unassigned_staff_gets_empty_scope_not_unrestricted(db):
    make_staff(db, 'floater', 'OPERATOR')
    scope = resolve_canteen_scope(db, 'floater')
    assert isinstance(scope, RestrictedTo)
    assert scope.canteen_ids == frozenset()
    assert not scope.allows('c1')


def test_department_canteens_are_the_scope(db):
    c1, c2 = make_canteen(db, 'C1', 'c1'), make_canteen(db, 'C2', 'c2')
    make_canteen(db, 'C3', 'c3')
    dept = make_department(db, 'D', [c1, c2])
    make_staff(db, 'mgr', 'CANTEEN_MANAGER', department=dept)
    assert resolve_canteen_scope(db, 'mgr') == RestrictedTo(frozenset({'c1', 'c2'}))


def test_department_without_canteens_is_empty(db):
    dept = make_department(db, 'Empty')
    make_staff(db, 'op', 'OPERATOR', department=dept)
    assert resolve_canteen_scope(db, 'op') == RestrictedTo.nothing()


def test_canteen_shared_between_departments(db):
    shared = make_canteen(db, 'Shared', 'shared')
    d1 = make_department(db, 'D1', [shared, make_canteen(db, 'Only1', 'only1')])
    d2 = make_department(db, 'D2', [shared])
    make_staff(db, 'a', 'OPERATOR', department=d1)
    make_staff(db, 'b', 'OPERATOR', department=d2)
    assert resolve_canteen_scope(db, 'a').canteen_ids == {'shared', 'only1'}
    assert resolve_canteen_scope(db, 'b').canteen_ids == {'shared'}


def test_unknown_staff_fails_closed(db):
    scope = resolve_canteen_scope(db, 'ghost')
    assert not isinstance(scope, Unrestricted)
    assert scope.canteen_ids == frozenset()


def test_profile_lookup_failure_fails_closed():
    assert resolve_canteen_scope(BoomSession(), 'anyone') == RestrictedTo.nothing()


def test_join_failure_fails_closed(db):
    dept = make_department(db, 'D', [make_canteen(db, 'C1', 'c1')])
    make_staff(db, 'mgr', 'CANTEEN_MANAGER', department=dept)
    flaky = FlakySession(db, fail_tables={'department_canteens'})
    assert resolve_canteen_scope(flaky, 'mgr') == RestrictedTo.nothing()
