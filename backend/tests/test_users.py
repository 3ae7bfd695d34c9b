def _create_user(client, headers, **overrides):
    payload = {"name": "Grace", "email": "grace@example.com", "role": "SUPPORT"}
    payload.update(overrides)
    return client.post("/api/v1/admin/users", json=payload, headers=headers)


def test_admin_creates_user_and_upload_count_is_derived(client, admin_headers):
    response = _create_user(client, admin_headers)
    assert response.status_code == 201

    user = response.get_json()["user"]
    assert user["role"] == "SUPPORT"
    assert user["isActive"] is True
    assert user["uploadCount"] == 0


def test_support_can_read_but_not_write_users(client, admin_headers, support_headers):
    _create_user(client, admin_headers)

    assert client.get("/api/v1/admin/users", headers=support_headers).status_code == 200
    assert _create_user(client, support_headers, email="other@example.com").status_code == 403


def test_duplicate_email_conflicts(client, admin_headers):
    assert _create_user(client, admin_headers).status_code == 201

    response = _create_user(client, admin_headers, email="GRACE@example.com")
    assert response.status_code == 409


def test_changing_to_a_taken_email_conflicts(client, admin_headers):
    _create_user(client, admin_headers)
    other = _create_user(client, admin_headers, name="Alan", email="alan@example.com").get_json()["user"]

    response = client.patch(
        f"/api/v1/admin/users/{other['_id']}",
        json={"email": "grace@example.com"},
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_admin_cannot_change_own_role_or_delete_self(client, admin_headers, token_for):
    me = _create_user(client, admin_headers, name="Root", email="root@example.com", role="ADMIN").get_json()["user"]
    my_headers = token_for(me["_id"], "ADMIN")
    url = f"/api/v1/admin/users/{me['_id']}"

    response = client.patch(url, json={"role": "USER"}, headers=my_headers)
    assert response.status_code == 403
    assert response.get_json()["error"] == "You cannot change your own role"

    assert client.patch(url, json={"name": "Root Admin"}, headers=my_headers).status_code == 200

    response = client.delete(url, headers=my_headers)
    assert response.status_code == 403

    # Another admin may do both
    assert client.patch(url, json={"role": "USER"}, headers=admin_headers).status_code == 200
    assert client.delete(url, headers=admin_headers).status_code == 200


def test_filter_users_by_role_and_active_flag(client, admin_headers):
    _create_user(client, admin_headers)
    _create_user(client, admin_headers, name="Alan", email="alan@example.com", role="USER", isActive=False)

    body = client.get("/api/v1/admin/users?role=USER", headers=admin_headers).get_json()
    assert [user["name"] for user in body["users"]] == ["Alan"]

    body = client.get("/api/v1/admin/users?isActive=true", headers=admin_headers).get_json()
    assert [user["name"] for user in body["users"]] == ["Grace"]

    body = client.get("/api/v1/admin/users?search=example.com&role=all", headers=admin_headers).get_json()
    assert body["pagination"]["total"] == 2
