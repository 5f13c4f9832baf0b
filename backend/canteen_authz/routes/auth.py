from flask import Blueprint, request, abort, current_app
from canteen_authz.constants.navigation import MENU_CONFIG
from canteen_authz.services.context import current_session
from canteen_authz.services.guard import check_route, has_permission
from canteen_authz.services.menu import build_menu, filter_menu

auth_bp = Blueprint('auth', __name__)

MENU = build_menu(MENU_CONFIG)


@auth_bp.get('/me')
def me():
    return current_session().to_dict()


@auth_bp.get('/menu')
def menu():
    session = current_session()
    items = filter_menu(MENU, session.permissions)
    return {'data': [i.to_dict() for i in items]}


@auth_bp.get('/routes/check')
def check_route_access():
    path = request.args.get('path')
    if not path:
        abort(400, description='path required')
    decision = check_route(
        current_session(),
        path,
        redirect_to=current_app.config['AUTHZ_DENIED_REDIRECT'],
    )
    return decision.to_dict()


@auth_bp.get('/permissions/check')
def check_permission():
    code = request.args.get('code')
    if not code:
        abort(400, description='code required')
    return {'code': code, 'granted': has_permission(current_session(), code)}
