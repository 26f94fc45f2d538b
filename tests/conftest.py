import pytest

from db import init_db
from main import create_app
from tests import factories


@pytest.fixture
def db_url(tmp_path):
    """SQLite file database; the importer opens more than one connection."""
    return f"sqlite:///{tmp_path / 'grimoire.sqlite'}"


@pytest.fixture(autouse=True)
def db(db_url):
    """Fresh schema for every test."""
    init_db(db_url)
    yield
    factories.Session.remove()


@pytest.fixture
def session(db):
    """The session shared with the factories."""
    return factories.Session()


@pytest.fixture
def app(db_url):
    app = create_app(db_url)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()
