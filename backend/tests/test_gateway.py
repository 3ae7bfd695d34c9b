import mongomock
import pytest
from flask_jwt_extended import create_access_token
from pymongo.errors import PyMongoError

from flyover_cms import create_app
from flyover_cms.domain.exceptions import PersistenceConfigError, PersistenceError
from flyover_cms.persistence.gateway import MongoGateway
from flyover_cms.utils.store import store_operation


def test_missing_uri_fails_fast():
    gateway = MongoGateway(None, client_factory=mongomock.MongoClient)

    with pytest.raises(PersistenceConfigError):
        gateway.get_handle()
    assert not gateway.connected


def test_handle_is_created_once_and_reused():
    calls = []

    def factory(uri):
        calls.append(uri)
        return mongomock.MongoClient(uri)

    gateway = MongoGateway("mongodb://localhost:27017/flyover_test", client_factory=factory)

    assert not gateway.connected
    first = gateway.get_handle()
    second = gateway.get_handle()

    assert first is second
    assert calls == ["mongodb://localhost:27017/flyover_test"]
    assert first.name == "flyover_test"
    assert gateway.connected


def test_explicit_database_name_wins():
    gateway = MongoGateway(
        "mongodb://localhost:27017/ignored",
        db_name="flyover_other",
        client_factory=mongomock.MongoClient,
    )
    assert gateway.collection("blogs").database.name == "flyover_other"


def test_close_allows_reconnect():
    gateway = MongoGateway("mongodb://localhost:27017/flyover_test", client_factory=mongomock.MongoClient)
    gateway.get_handle()
    gateway.close()

    assert not gateway.connected
    assert gateway.get_handle() is not None


def test_driver_errors_become_generic_persistence_errors():
    with pytest.raises(PersistenceError) as exc_info:
        with store_operation("create", "blog"):
            raise PyMongoError("connection refused at 10.0.0.5")

    assert exc_info.value.message == "Failed to create blog"
    assert exc_info.value.status_code == 500


def test_unconfigured_store_renders_as_500():
    app = create_app("testing", gateway=MongoGateway(None))
    with app.app_context():
        token = create_access_token(identity="admin-1", additional_claims={"role": "ADMIN"})

    response = app.test_client().get(
        "/api/v1/admin/blogs",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 500
    assert response.get_json()["success"] is False
