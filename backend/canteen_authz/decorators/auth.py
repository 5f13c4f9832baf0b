from functools import wraps
from flask import abort
from canteen_authz.services.context import current_session
from canteen_authz.services.guard import has_all_permissions, has_any_permission


def require_permissions(*codes: str):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not has_all_permissions(current_session(), codes):
                abort(403, description='Missing permission')
            return fn(*args, **kwargs)
        return wrapper
    return outer


def require_any_permission(*codes: str):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not has_any_permission(current_session(), codes):
                abort(403, description='Missing permission')
            return fn(*args, **kwargs)
        return wrapper
    return outer
