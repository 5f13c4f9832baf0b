import os, sys, pytest
# Ensure the backend directory is on path so 'canteen_authz' imports without an install
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
import canteen_authz
from canteen_authz import create_app, get_db
from canteen_authz.models.authz import Base
# Import all model modules to ensure tables are registered before create_all
import canteen_authz.models.catalog  # noqa: F401

TEST_JWT_SECRET = 'test-secret-key-long-enough-for-hs256-signing'


@pytest.fixture(scope='session')
def app_instance(tmp_path_factory):
    # File database: resolver threads open their own connections
    db_path = tmp_path_factory.mktemp('db') / 'authz.db'
    app = create_app({
        'DATABASE_URL': f'sqlite+pysqlite:///{db_path}',
        'JWT_SECRET_KEY': TEST_JWT_SECRET,
        'TESTING': True,
    })
    yield app


@pytest.fixture(autouse=True)
def fresh_schema(app_instance):
    canteen_authz.SessionLocal.remove()
    engine = get_db().get_bind()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    canteen_authz.SessionLocal.remove()


@pytest.fixture()
def db(app_instance):
    return get_db()


@pytest.fixture()
def session_factory(app_instance):
    return canteen_authz.get_session_factory()


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
