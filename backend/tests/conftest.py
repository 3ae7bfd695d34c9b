import mongomock
import pytest
from flask_jwt_extended import create_access_token

from flyover_cms import create_app
from flyover_cms.persistence.gateway import MongoGateway


@pytest.fixture()
def gateway():
    gateway = MongoGateway(
        "mongodb://localhost:27017/flyover_test",
        db_name="flyover_test",
        client_factory=mongomock.MongoClient,
    )
    yield gateway
    gateway.close()


@pytest.fixture()
def app(gateway, tmp_path):
    app = create_app("testing", gateway=gateway)
    app.config.update(UPLOAD_FOLDER=str(tmp_path / "uploads"))

    with app.app_context():
        app.extensions["resources"].ensure_indexes()

    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def registry(app):
    return app.extensions["resources"]


def _token(app, user_id, role):
    with app.app_context():
        return create_access_token(identity=user_id, additional_claims={"role": role})


@pytest.fixture()
def admin_headers(app):
    return {"Authorization": f"Bearer {_token(app, 'admin-1', 'ADMIN')}"}


@pytest.fixture()
def support_headers(app):
    return {"Authorization": f"Bearer {_token(app, 'support-1', 'SUPPORT')}"}


@pytest.fixture()
def user_headers(app):
    return {"Authorization": f"Bearer {_token(app, 'user-1', 'USER')}"}


@pytest.fixture()
def token_for(app):
    def _make(user_id, role="ADMIN"):
        return {"Authorization": f"Bearer {_token(app, user_id, role)}"}
    return _make
