import pytest
from sqlalchemy import select
from werkzeug.exceptions import Forbidden
from canteen_authz.models.catalog import Product
from canteen_authz.services.decision import RestrictedTo, UNRESTRICTED
from canteen_authz.services.policy import resolve_canteen_scope
from canteen_authz.services.scoping import apply_canteen_scope, assert_canteen_access, can_access_canteen, filter_rows
from seed_helpers import make_canteen, make_department, make_product, make_staff


@pytest.fixture()
def three_canteens(db):
    c1, c2, c3 = (make_canteen(db, name, name.lower()) for name in ('C1', 'C2', 'C3'))
    for c in (c1, c2, c3):
        make_product(db, f'noodles-{c.id}', c)
        make_product(db, f'tea-{c.id}', c)
    return c1, c2, c3


def _canteens_of(db, stmt):
    return sorted({p.canteen_id for p in db.execute(stmt).scalars()})


def test_unrestricted_leaves_select_untouched(db, three_canteens):
    stmt = select(Product)
    assert apply_canteen_scope(stmt, Product.canteen_id, UNRESTRICTED) is stmt
    assert _canteens_of(db, stmt) == ['c1', 'c2', 'c3']


def test_restricted_narrows_to_listed_canteens(db, three_canteens):
    stmt = apply_canteen_scope(select(Product), Product.canteen_id, RestrictedTo(frozenset({'c1', 'c2'})))
    assert _canteens_of(db, stmt) == ['c1', 'c2']


def test_empty_scope_matches_nothing(db, three_canteens):
    stmt = apply_canteen_scope(select(Product), Product.canteen_id, RestrictedTo.nothing())
    assert db.execute(stmt).scalars().all() == []


def test_legacy_query_is_scoped_too(db, three_canteens):
    q = apply_canteen_scope(db.query(Product), Product.canteen_id, RestrictedTo(frozenset({'c3'})))
    assert {p.canteen_id for p in q.all()} == {'c3'}
    empty = apply_canteen_scope(db.query(Product), Product.canteen_id, RestrictedTo.nothing())
    assert empty.count() == 0


def test_department_scope_excludes_foreign_canteen_products(db, three_canteens):
    c1, c2, _c3 = three_canteens
    dept = make_department(db, 'D', [c1, c2])
    make_staff(db, 'mgr', 'CANTEEN_MANAGER', department=dept)
    scope = resolve_canteen_scope(db, 'mgr')
    names = [p.name for p in db.execute(apply_canteen_scope(select(Product), Product.canteen_id, scope)).scalars()]
    assert names
    assert not any(n.endswith('-c3') for n in names)


@pytest.mark.parametrize('rows', [
    [{'canteen_id': 'c1'}],
    [{'canteen_id': 'c1'}, {'canteen_id': None}, {'other': 'x'}],
    [{'canteen_id': str(i)} for i in range(50)],
])
def test_filter_rows_with_empty_scope_yields_nothing(rows):
    assert filter_rows(rows, 'canteen_id', RestrictedTo.nothing()) == []


def test_filter_rows_handles_objects_and_mappings():
    class Row:
        def __init__(self, canteen_id):
            self.canteen_id = canteen_id

    rows = [Row('c1'), {'canteen_id': 'c2'}, Row('c3')]
    kept = filter_rows(rows, 'canteen_id', RestrictedTo(frozenset({'c1', 'c2'})))
    assert kept == rows[:2]
    assert filter_rows(rows, 'canteen_id', UNRESTRICTED) == rows


def test_single_canteen_checks():
    scope = RestrictedTo(frozenset({'c1'}))
    assert can_access_canteen(scope, 'c1')
    assert not can_access_canteen(scope, 'c2')
    assert can_access_canteen(UNRESTRICTED, 'anything')
    assert_canteen_access(scope, 'c1')
    with pytest.raises(Forbidden):
        assert_canteen_access(scope, 'c2')
