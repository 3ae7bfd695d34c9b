import time

from dateutil.parser import isoparse

FOUR_HUNDRED_WORDS = " ".join(["word"] * 400)


def _blog(**overrides):
    payload = {
        "title": "Study in Canada",
        "content": FOUR_HUNDRED_WORDS,
        "author": "A",
        "category": "Study Guides",
        "tags": ["visa"],
        "status": "draft",
    }
    payload.update(overrides)
    return payload


def _create(client, headers, **overrides):
    response = client.post("/api/v1/admin/blogs", json=_blog(**overrides), headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["blog"]


def test_create_blog_derives_slug_read_time_and_empty_published_at(client, admin_headers):
    blog = _create(client, admin_headers)

    assert blog["slug"] == "study-in-canada"
    assert blog["readTime"] == "2 min read"
    assert blog["publishedAt"] == ""
    assert isinstance(blog["_id"], str)
    assert blog["createdAt"] == blog["updatedAt"]


def test_same_title_gets_suffixed_slug(client, admin_headers):
    _create(client, admin_headers)
    second = _create(client, admin_headers)

    assert second["slug"] == "study-in-canada-1"


def test_create_then_read_round_trip(client, admin_headers):
    created = _create(client, admin_headers, excerpt="Short intro", featured=True)

    response = client.get(f"/api/v1/admin/blogs/{created['_id']}", headers=admin_headers)
    assert response.status_code == 200

    blog = response.get_json()["blog"]
    for field, value in _blog(excerpt="Short intro", featured=True).items():
        assert blog[field] == value
    assert blog["_id"] == created["_id"]
    assert {"slug", "readTime", "publishedAt", "createdAt", "updatedAt"} <= set(blog)


def test_publish_stamps_published_at_once(client, admin_headers):
    blog = _create(client, admin_headers)
    url = f"/api/v1/admin/blogs/{blog['_id']}"

    published = client.patch(url, json={"status": "published"}, headers=admin_headers).get_json()["blog"]
    assert published["publishedAt"]
    assert isoparse(published["publishedAt"]) >= isoparse(published["createdAt"])

    retitled = client.put(url, json={"title": "Study in Canada 2025"}, headers=admin_headers).get_json()["blog"]
    assert retitled["publishedAt"] == published["publishedAt"]
    assert retitled["slug"] == "study-in-canada-2025"

    client.patch(url, json={"status": "draft"}, headers=admin_headers)
    republished = client.patch(url, json={"status": "published"}, headers=admin_headers).get_json()["blog"]
    assert republished["publishedAt"] == published["publishedAt"]


def test_creating_published_blog_stamps_immediately(client, admin_headers):
    blog = _create(client, admin_headers, status="published")
    assert blog["publishedAt"]


def test_creating_archived_blog_is_rejected(client, admin_headers):
    response = client.post("/api/v1/admin/blogs", json=_blog(status="archived"), headers=admin_headers)
    assert response.status_code == 400


def test_archived_is_terminal(client, admin_headers):
    blog = _create(client, admin_headers, status="published")
    url = f"/api/v1/admin/blogs/{blog['_id']}"

    assert client.patch(url, json={"status": "archived"}, headers=admin_headers).status_code == 200

    response = client.patch(url, json={"status": "published"}, headers=admin_headers)
    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert "archived" in body["error"]


def test_content_edit_recomputes_read_time_only(client, admin_headers):
    blog = _create(client, admin_headers)
    url = f"/api/v1/admin/blogs/{blog['_id']}"

    updated = client.put(url, json={"content": " ".join(["w"] * 650)}, headers=admin_headers).get_json()["blog"]
    assert updated["readTime"] == "4 min read"
    assert updated["slug"] == blog["slug"]


def test_editing_own_title_keeps_slug_free_of_self_collision(client, admin_headers):
    blog = _create(client, admin_headers)
    url = f"/api/v1/admin/blogs/{blog['_id']}"

    updated = client.put(url, json={"title": "Study in CANADA"}, headers=admin_headers).get_json()["blog"]
    assert updated["slug"] == "study-in-canada"


def test_update_validation_errors_list_fields(client, admin_headers):
    blog = _create(client, admin_headers)

    response = client.put(
        f"/api/v1/admin/blogs/{blog['_id']}",
        json={"category": "Gossip", "image": "nope"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    fields = {detail["field"] for detail in response.get_json()["details"]}
    assert fields == {"category", "image"}


def test_empty_update_is_rejected(client, admin_headers):
    blog = _create(client, admin_headers)

    response = client.put(f"/api/v1/admin/blogs/{blog['_id']}", json={}, headers=admin_headers)
    assert response.status_code == 400


def test_unchanged_update_leaves_updated_at(client, admin_headers):
    blog = _create(client, admin_headers)

    response = client.put(
        f"/api/v1/admin/blogs/{blog['_id']}",
        json={"title": "Study in Canada"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.get_json()["blog"]["updatedAt"] == blog["updatedAt"]


def test_real_update_advances_updated_at_but_not_created_at(client, admin_headers):
    blog = _create(client, admin_headers)
    time.sleep(0.01)

    response = client.put(
        f"/api/v1/admin/blogs/{blog['_id']}",
        json={"excerpt": "A fresh summary"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    updated = response.get_json()["blog"]
    assert updated["createdAt"] == blog["createdAt"]
    assert isoparse(updated["updatedAt"]) > isoparse(blog["updatedAt"])


def test_unknown_and_malformed_ids_are_not_found(client, admin_headers):
    for item_id in ("64b7f0c2a1b2c3d4e5f60718", "not-an-id"):
        response = client.get(f"/api/v1/admin/blogs/{item_id}", headers=admin_headers)
        assert response.status_code == 404
        assert response.get_json() == {"success": False, "error": "Blog not found"}

        response = client.put(f"/api/v1/admin/blogs/{item_id}", json={"title": "X"}, headers=admin_headers)
        assert response.status_code == 404


def test_delete_twice_is_not_found_both_times(client, admin_headers):
    blog = _create(client, admin_headers)
    url = f"/api/v1/admin/blogs/{blog['_id']}"

    assert client.delete(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 404

    for _ in range(2):
        response = client.delete(url, headers=admin_headers)
        assert response.status_code == 404
        assert response.get_json()["success"] is False


def test_admin_routes_require_staff_token(client, user_headers, support_headers):
    assert client.get("/api/v1/admin/blogs").status_code == 401
    assert client.get("/api/v1/admin/blogs", headers=user_headers).status_code == 403
    assert client.get("/api/v1/admin/blogs", headers=support_headers).status_code == 200


def test_list_filters_and_search(client, admin_headers):
    _create(client, admin_headers, title="Visa checklist", category="Visa Guides")
    _create(client, admin_headers, title="Scholarships in Germany", category="Scholarships", status="published")
    _create(client, admin_headers, title="Germany visa (a+b)", category="Visa Guides", status="published")

    body = client.get("/api/v1/admin/blogs?search=germany", headers=admin_headers).get_json()
    assert {blog["title"] for blog in body["blogs"]} == {"Scholarships in Germany", "Germany visa (a+b)"}

    body = client.get(
        "/api/v1/admin/blogs?search=visa&status=published",
        headers=admin_headers,
    ).get_json()
    assert [blog["title"] for blog in body["blogs"]] == ["Germany visa (a+b)"]

    # Regex metacharacters are matched literally
    body = client.get("/api/v1/admin/blogs?search=(a%2Bb)", headers=admin_headers).get_json()
    assert body["pagination"]["total"] == 1

    body = client.get("/api/v1/admin/blogs?status=all&category=", headers=admin_headers).get_json()
    assert body["pagination"]["total"] == 3

    body = client.get("/api/v1/admin/blogs?search=nothing-matches", headers=admin_headers).get_json()
    assert body == {
        "success": True,
        "blogs": [],
        "pagination": {"page": 1, "limit": 20, "total": 0, "totalPages": 0},
    }


def test_list_is_newest_first(client, admin_headers):
    first = _create(client, admin_headers, title="First")
    second = _create(client, admin_headers, title="Second")

    body = client.get("/api/v1/admin/blogs", headers=admin_headers).get_json()
    assert [blog["_id"] for blog in body["blogs"]] == [second["_id"], first["_id"]]
