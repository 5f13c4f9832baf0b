from __future__ import annotations
from flask import Blueprint, request
from sqlalchemy import select
from canteen_authz import get_db
from canteen_authz.models.catalog import Canteen, Product
from canteen_authz.decorators.auth import require_any_permission
from canteen_authz.services.context import current_session
from canteen_authz.services.scoping import apply_canteen_scope, assert_canteen_access

cat_bp = Blueprint('catalog', __name__)


def _canteen_json(c: Canteen):
    return {
        'id': c.id,
        'name': c.name,
        'address': c.address,
        'status': c.status,
        'is_delivery_active': c.is_delivery_active,
        'delivery_radius': c.delivery_radius,
        'min_delivery_amount': c.min_delivery_amount,
        'delivery_fee': c.delivery_fee,
        'free_delivery_threshold': c.free_delivery_threshold,
        'default_packaging_fee': c.default_packaging_fee,
    }


def _product_json(p: Product):
    return {'id': p.id, 'name': p.name, 'canteen_id': p.canteen_id, 'price_cents': p.price_cents}


@cat_bp.get('/canteens')
@require_any_permission('view:canteen', 'manage:canteen', 'manage:canteens')
def list_canteens():
    scope = current_session().canteen_scope
    stmt = apply_canteen_scope(select(Canteen), Canteen.id, scope).order_by(Canteen.name.asc())
    rows = get_db().execute(stmt).scalars().all()
    return {'data': [_canteen_json(c) for c in rows]}


@cat_bp.get('/products')
@require_any_permission('view:products', 'manage:products')
def list_products():
    scope = current_session().canteen_scope
    stmt = apply_canteen_scope(select(Product), Product.canteen_id, scope)
    canteen_id = request.args.get('canteen_id')
    if canteen_id:
        assert_canteen_access(scope, canteen_id)
        stmt = stmt.where(Product.canteen_id == canteen_id)
    rows = get_db().execute(stmt.order_by(Product.name.asc())).scalars().all()
    return {'data': [_product_json(p) for p in rows]}
