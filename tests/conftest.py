import os

import pytest
from flask_jwt_extended import create_access_token

from hrms_payroll import create_app
from hrms_payroll.extensions import db


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def session(app):
    return db.session


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture(scope="function")
def auth_headers(app):
    token = create_access_token(identity="7", additional_claims={"perms": ["payroll.*"]})
    return {"Authorization": f"Bearer {token}"}
