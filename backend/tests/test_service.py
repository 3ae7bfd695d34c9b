import pytest
from mongomock.collection import Collection
from pymongo.errors import PyMongoError

from flyover_cms.domain import derived
from flyover_cms.domain.exceptions import NotFound, PersistenceError, ValidationError


def _payload(title="Study in Canada"):
    return {"title": title, "content": "Words", "author": "A", "category": "Study Guides"}


def test_concurrent_slug_collision_is_resolved_internally(registry, monkeypatch):
    service = registry.get("blogs")
    service.create(_payload())

    real_unique_slug = derived.unique_slug
    lookups = []

    def stale_lookup(collection, base, **kwargs):
        lookups.append(base)
        # First lookup answers as if the other writer had not committed yet
        if len(lookups) == 1:
            return base
        return real_unique_slug(collection, base, **kwargs)

    monkeypatch.setattr(derived, "unique_slug", stale_lookup)

    blog = service.create(_payload())
    assert blog["slug"] == "study-in-canada-1"
    assert len(lookups) == 2
    assert service.collection.count_documents({}) == 2


def test_store_identifier_is_never_exposed_natively(registry):
    service = registry.get("offices")
    office = service.create({"city": "London", "phone": "+44 20 7946 0000"})

    assert isinstance(office["_id"], str)
    assert service.get(office["_id"]) == office


def test_list_returns_empty_page_when_nothing_matches(registry):
    result = registry.get("partners").list(search="nobody")

    assert result == {"items": [], "page": 1, "limit": 20, "total": 0, "totalPages": 0}


def test_find_one_raises_not_found(registry):
    with pytest.raises(NotFound):
        registry.get("blogs").find_one({"slug": "missing"})


def test_update_payload_must_be_an_object(registry):
    service = registry.get("offices")
    office = service.create({"city": "Lagos", "phone": "+234 1 000 0000"})

    with pytest.raises(ValidationError):
        service.update(office["_id"], "city=Abuja")


def test_unknown_resource_in_registry(registry):
    with pytest.raises(NotFound):
        registry.get("spaceships")


def test_ensure_indexes_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["ensure-indexes"])

    assert result.exit_code == 0
    assert "Indexes ensured for blogs" in result.output

    indexes = app.extensions["mongo"].collection("blogs").index_information()
    assert any(info.get("unique") for info in indexes.values())


def test_store_failure_while_deriving_fields_is_reported_generically(registry, monkeypatch):
    def unreachable(collection, base, **kwargs):
        raise PyMongoError("connection reset by 10.0.0.7")

    monkeypatch.setattr(derived, "unique_slug", unreachable)

    with pytest.raises(PersistenceError) as exc_info:
        registry.get("blogs").create(_payload())
    assert exc_info.value.message == "Failed to create blog"


def test_store_failure_in_hooks_renders_generic_500(client, admin_headers, monkeypatch):
    def unreachable(*args, **kwargs):
        raise PyMongoError("connection reset by 10.0.0.7")

    monkeypatch.setattr(Collection, "find_one", unreachable)

    response = client.post(
        "/api/v1/admin/users",
        json={"name": "Kemi", "email": "kemi@example.com", "role": "SUPPORT"},
        headers=admin_headers,
    )
    assert response.status_code == 500
    assert response.get_json() == {"success": False, "error": "Failed to fetch user"}
