"""Authentication and user management routes."""

from course_portal.models.user import UserModel


def test_login_and_me(client, admin):
    bad = client.post("/api/auth/login", json={"username": "root", "password": "nope"})
    assert bad.status_code == 401

    response = client.post(
        "/api/auth/login", json={"username": "root", "password": "secret"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "password_hash" not in body["user"]

    me = client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"}
    )
    assert me.status_code == 200
    assert me.json()["user"]["username"] == "root"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401


def test_list_users_hides_hashes_and_is_admin_only(client, admin, editor, headers_for):
    assert client.get("/api/users", headers=headers_for(editor)).status_code == 403

    users = client.get("/api/users", headers=headers_for(admin)).json()["users"]
    assert {u["username"] for u in users} == {"root", "editor"}
    assert all("password_hash" not in u for u in users)


def test_create_user(client, admin, headers_for):
    created = client.post(
        "/api/users",
        json={"username": "newbie", "password": "secret"},
        headers=headers_for(admin),
    )
    assert created.status_code == 200
    assert created.json()["role"] == "editor"
    assert not any(created.json()["permissions"].values())

    duplicate = client.post(
        "/api/users",
        json={"username": "newbie", "password": "secret"},
        headers=headers_for(admin),
    )
    assert duplicate.status_code == 400

    short = client.post(
        "/api/users",
        json={"username": "tiny", "password": "abc"},
        headers=headers_for(admin),
    )
    assert short.status_code == 400


def test_last_admin_cannot_be_deleted(client, db, admin, headers_for):
    response = client.delete(f"/api/users/{admin.user_id}", headers=headers_for(admin))

    assert response.status_code == 400
    assert db.query(UserModel).filter(UserModel.role == "admin").count() == 1


def test_last_admin_cannot_be_demoted(client, admin, headers_for):
    response = client.put(
        f"/api/users/{admin.user_id}",
        json={"role": "editor"},
        headers=headers_for(admin),
    )
    assert response.status_code == 400


def test_editor_updates_self_but_not_others(client, admin, editor, headers_for):
    own = client.put(
        f"/api/users/{editor.user_id}",
        json={"name": "Ed Itor"},
        headers=headers_for(editor),
    )
    assert own.status_code == 200
    assert own.json()["name"] == "Ed Itor"

    other = client.put(
        f"/api/users/{admin.user_id}",
        json={"name": "Hacked"},
        headers=headers_for(editor),
    )
    assert other.status_code == 403

    promote = client.put(
        f"/api/users/{editor.user_id}",
        json={"role": "admin"},
        headers=headers_for(editor),
    )
    assert promote.status_code == 403


def test_change_password(client, editor, headers_for):
    response = client.put(
        f"/api/users/{editor.user_id}/password",
        json={"new_password": "much-better"},
        headers=headers_for(editor),
    )
    assert response.status_code == 200

    login = client.post(
        "/api/auth/login", json={"username": "editor", "password": "much-better"}
    )
    assert login.status_code == 200


def test_set_permissions(client, admin, editor, headers_for):
    denied = client.put(
        f"/api/users/{editor.user_id}/permissions",
        json={"permissions": {"courses_edit": True}},
        headers=headers_for(editor),
    )
    assert denied.status_code == 403

    granted = client.put(
        f"/api/users/{editor.user_id}/permissions",
        json={"permissions": {"courses_edit": True, "bogus": True}},
        headers=headers_for(admin),
    )
    assert granted.status_code == 200
    permissions = granted.json()["permissions"]
    assert permissions["courses_edit"] is True
    assert "bogus" not in permissions


def test_unknown_user_is_not_found(client, admin, headers_for):
    headers = headers_for(admin)

    for response in (
        client.put("/api/users/user-missing", json={"name": "X"}, headers=headers),
        client.put(
            "/api/users/user-missing/password",
            json={"new_password": "secret"},
            headers=headers,
        ),
        client.put(
            "/api/users/user-missing/permissions",
            json={"permissions": {}},
            headers=headers,
        ),
        client.delete("/api/users/user-missing", headers=headers),
    ):
        assert response.status_code == 404
        assert "user-missing" in response.json()["detail"]
