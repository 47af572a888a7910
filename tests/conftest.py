import pytest

from shapeless_blog import create_app
from shapeless_blog.config import TestConfig
from shapeless_blog.data import tokens
from shapeless_blog.models import db
from shapeless_blog.services import accounts


@pytest.fixture(scope="function")
def app():
    """A fresh application backed by an in-memory database for each test."""
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture(scope="function")
def session(app):
    return db.session


@pytest.fixture(scope="function")
def make_user(session):
    def _make_user(username, password="secret1"):
        return accounts.register_user(session, username, password)
    return _make_user


@pytest.fixture(scope="function")
def bearer(session):
    """Authorization header for a freshly issued token of `user`."""
    def _bearer(user):
        token = tokens.issue(session, user.id)
        session.commit()
        return {"Authorization": f"Bearer {token.token}"}
    return _bearer
