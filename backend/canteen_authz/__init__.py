from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

from canteen_authz.config.authz import DEFAULT_RESOLUTION_TIMEOUT, DEFAULT_DENIED_REDIRECT
from canteen_authz.services.errors import AuthorizationError

load_dotenv()

logger = logging.getLogger(__name__)

db_engine = None
SessionFactory = None
SessionLocal = None
jwt = JWTManager()


def _build_engine(db_url: str):
    if db_url.endswith(':memory:'):
        logger.warning(
            "In-memory SQLite shares one connection across resolver threads; use a file database outside tests"
        )
        # Ensure a single shared in-memory SQLite database across all sessions
        return create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith('sqlite'):
        # resolver threads open their own connections
        return create_engine(db_url, echo=False, future=True, connect_args={"check_same_thread": False})
    return create_engine(db_url, echo=False, future=True)


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionFactory, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///dev.db')
    app.config['AUTHZ_RESOLUTION_TIMEOUT'] = float(os.getenv('AUTHZ_RESOLUTION_TIMEOUT', DEFAULT_RESOLUTION_TIMEOUT))
    app.config['AUTHZ_DENIED_REDIRECT'] = os.getenv('AUTHZ_DENIED_REDIRECT', DEFAULT_DENIED_REDIRECT)

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    db_engine = _build_engine(app.config['DATABASE_URL'])
    SessionFactory = sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False)
    SessionLocal = scoped_session(SessionFactory)

    jwt.init_app(app)

    from .routes.auth import auth_bp  # session, menu and guard decisions
    from .routes.catalog import cat_bp  # canteen-scoped reads
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(cat_bp, url_prefix='/catalog')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        if SessionLocal is not None:
            SessionLocal.remove()

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        if isinstance(e, AuthorizationError):
            app.logger.warning('Authorization resolution failed: %s', e)
            return {
                'error': {
                    'status': e.status,
                    'title': e.title,
                    'detail': str(e),
                }
            }, e.status
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()


def get_session_factory():
    return SessionFactory
