"""Request-scoped access to the caller's AuthenticatedSession.

The session is resolved at most once per request and kept on ``flask.g``;
nothing survives the request.
"""
from __future__ import annotations
from flask import current_app, g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from canteen_authz.services.decision import AuthenticatedSession, Principal
from canteen_authz.services.session import establish_session


def current_principal() -> Principal:
    verify_jwt_in_request()
    claims = get_jwt()
    return Principal(id=str(get_jwt_identity()), email=claims.get('email'))


def current_session() -> AuthenticatedSession:
    cached = g.get('authz_session')
    if cached is not None:
        return cached
    from canteen_authz import get_session_factory
    session = establish_session(
        current_principal(),
        get_session_factory(),
        timeout=current_app.config.get('AUTHZ_RESOLUTION_TIMEOUT'),
    )
    g.authz_session = session
    return session
