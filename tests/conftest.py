import pytest
from freetime import create_app
from freetime.db_models import db
from freetime.services.interval_store import MemoryIntervalStore


def _make_app(store_backend):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "INTERVAL_STORE": store_backend,
        "LOG_FILE": None,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()

        # 🛡️ Protect against real DB being wiped
        db_url = app.config["SQLALCHEMY_DATABASE_URI"]
        if "sqlite:///:memory:" not in db_url:
            raise RuntimeError(f"Refusing to drop_all() on non-test DB: {db_url}")

        db.drop_all()


@pytest.fixture
def test_app():
    yield from _make_app("sql")


@pytest.fixture(params=["sql", "memory"])
def any_app(request):
    yield from _make_app(request.param)


@pytest.fixture
def client(any_app):
    return any_app.test_client()


@pytest.fixture
def memory_store():
    return MemoryIntervalStore()


@pytest.fixture(params=["sql", "memory"])
def store(request):
    """Each store test runs against both backends."""
    if request.param == "memory":
        yield MemoryIntervalStore()
        return
    for app in _make_app("sql"):
        yield app.extensions["interval_store"]
