import io

import pytest
from werkzeug.datastructures import FileStorage

from restaurant.main import create_app
from restaurant.migrations import init_db
from restaurant.models import db
from restaurant.services.account_service import AccountService

BASE_URL = "http://testserver"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "MIGRATIONS_ROOT": None,
        "UPLOAD_ROOT": str(tmp_path / "uploads"),
        "PUBLIC_BASE_URL": BASE_URL,
    })
    init_db(app, max_retries=1)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def assets(app):
    return app.extensions["asset_store"]


@pytest.fixture
def service(app, assets):
    with app.app_context():
        yield AccountService(db.session, assets)


def make_upload(filename="avatar.png", content=b"\x89PNG fake image"):
    return FileStorage(stream=io.BytesIO(content), filename=filename)


def stored_path(url):
    """Relative asset path back from a public image URL"""
    prefix = f"{BASE_URL}/uploads/"
    assert url.startswith(prefix)
    return url[len(prefix):]
