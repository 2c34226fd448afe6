import uuid

import pytest

from conftest import auth_header


def _franchise_name():
    return f"Test Franchise {uuid.uuid4().hex[:8]}"


@pytest.fixture()
def franchisee(register_user):
    user, token, _ = register_user(name="Franchisee User")
    return user, token


@pytest.fixture()
def franchise(client, admin_token, franchisee):
    user, _ = franchisee
    response = client.post(
        "/api/franchise",
        json={"name": _franchise_name(), "admins": [{"email": user["email"]}]},
        headers=auth_header(admin_token),
    )
    assert response.status_code == 200
    return response.get_json()


def test_create_franchise_as_admin(client, admin_token, franchisee):
    user, _ = franchisee
    name = _franchise_name()

    response = client.post(
        "/api/franchise",
        json={"name": name, "admins": [{"email": user["email"]}]},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["name"] == name
    assert body["admins"] == [{"id": user["id"], "name": user["name"], "email": user["email"]}]
    assert body["stores"] == []


def test_create_franchise_requires_admin(client, franchisee):
    user, token = franchisee
    response = client.post(
        "/api/franchise",
        json={"name": _franchise_name(), "admins": [{"email": user["email"]}]},
        headers=auth_header(token),
    )
    assert response.status_code == 403


def test_create_franchise_with_unknown_admin(client, admin_token):
    response = client.post(
        "/api/franchise",
        json={"name": _franchise_name(), "admins": [{"email": "ghost@test.com"}]},
        headers=auth_header(admin_token),
    )
    assert response.status_code == 404


def test_list_franchises_is_public(client, franchise):
    response = client.get("/api/franchise")
    assert response.status_code == 200
    listed = {f["id"]: f for f in response.get_json()}
    assert franchise["id"] in listed
    assert "admins" not in listed[franchise["id"]]


def test_admin_sees_franchise_admins(client, franchise, admin_token):
    response = client.get("/api/franchise", headers=auth_header(admin_token))
    listed = {f["id"]: f for f in response.get_json()}
    assert listed[franchise["id"]]["admins"] == franchise["admins"]


def test_user_franchises(client, franchise, franchisee):
    user, token = franchisee
    response = client.get(f"/api/franchise/{user['id']}", headers=auth_header(token))

    assert response.status_code == 200
    assert [f["id"] for f in response.get_json()] == [franchise["id"]]


def test_user_franchises_requires_auth(client, franchisee):
    user, _ = franchisee
    response = client.get(f"/api/franchise/{user['id']}")
    assert response.status_code == 401


def test_user_franchises_of_someone_else_is_empty(client, franchise, franchisee, register_user):
    user, _ = franchisee
    _, other_token, _ = register_user()
    response = client.get(f"/api/franchise/{user['id']}", headers=auth_header(other_token))
    assert response.status_code == 200
    assert response.get_json() == []


def test_franchisee_role_is_reported(client, franchise, franchisee):
    user, token = franchisee
    response = client.put(f"/api/auth/{user['id']}", json={}, headers=auth_header(token))
    assert {"role": "franchisee", "objectId": franchise["id"]} in response.get_json()["roles"]


def test_create_and_delete_store_as_franchisee(client, franchise, franchisee):
    _, token = franchisee

    response = client.post(
        f"/api/franchise/{franchise['id']}/store",
        json={"name": "Franchisee Store"},
        headers=auth_header(token),
    )
    assert response.status_code == 200
    store = response.get_json()
    assert store["name"] == "Franchisee Store"
    assert store["franchiseId"] == franchise["id"]

    response = client.delete(
        f"/api/franchise/{franchise['id']}/store/{store['id']}",
        headers=auth_header(token),
    )
    assert response.status_code == 200
    assert response.get_json() == {"message": "store deleted"}


def test_create_store_as_admin(client, franchise, admin_token):
    response = client.post(
        f"/api/franchise/{franchise['id']}/store",
        json={"name": "Admin Store"},
        headers=auth_header(admin_token),
    )
    assert response.status_code == 200


def test_create_store_forbidden_for_diner(client, franchise, register_user):
    _, token, _ = register_user()
    response = client.post(
        f"/api/franchise/{franchise['id']}/store",
        json={"name": "Nope"},
        headers=auth_header(token),
    )
    assert response.status_code == 403


def test_delete_unknown_store(client, franchise, admin_token):
    response = client.delete(
        f"/api/franchise/{franchise['id']}/store/999999",
        headers=auth_header(admin_token),
    )
    assert response.status_code == 404


def test_delete_franchise(client, franchise, franchisee, admin_token):
    response = client.delete(
        f"/api/franchise/{franchise['id']}", headers=auth_header(admin_token)
    )
    assert response.status_code == 200
    assert response.get_json() == {"message": "franchise deleted"}

    listed = client.get("/api/franchise").get_json()
    assert franchise["id"] not in [f["id"] for f in listed]

    user, token = franchisee
    response = client.get(f"/api/franchise/{user['id']}", headers=auth_header(token))
    assert response.get_json() == []


def test_delete_franchise_requires_admin(client, franchise, franchisee):
    _, token = franchisee
    response = client.delete(f"/api/franchise/{franchise['id']}", headers=auth_header(token))
    assert response.status_code == 403
