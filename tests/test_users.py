"""Tests for user management endpoints."""

from conftest import data


class TestUsers:
    def test_get_and_lookup_by_email(self, client, user):
        assert data(client.get(f"/api/users/{user['id']}"))["fullName"] == f"Ada {user['lastName']}"
        assert data(client.get(f"/api/users/email/{user['emailAddress'].upper()}"))["id"] == user["id"]

    def test_update_refreshes_email_lookup(self, client, user):
        old_email = user["emailAddress"]
        data(client.get(f"/api/users/email/{old_email}"))

        updated = data(client.put(f"/api/users/{user['id']}", json={"emailAddress": "renamed@example.com"}))
        assert updated["emailAddress"] == "renamed@example.com"
        assert updated["firstName"] == "Ada"
        assert client.get(f"/api/users/email/{old_email}").status_code == 404
        assert data(client.get("/api/users/email/renamed@example.com"))["id"] == user["id"]

    def test_update_to_taken_email(self, client, make_user):
        first = make_user()
        second = make_user()
        response = client.put(f"/api/users/{second['id']}", json={"emailAddress": first["emailAddress"]})
        assert response.status_code == 409

    def test_list_search_count(self, client, make_user):
        make_user(lastName="Lovelace")
        make_user(lastName="Turing")

        assert data(client.get("/api/users"))["totalElements"] == 2
        assert data(client.get("/api/users/count")) == 2
        found = data(client.get("/api/users/search", params={"keyword": "love"}))
        assert [u["lastName"] for u in found["content"]] == ["Lovelace"]

    def test_activate_deactivate(self, client, user):
        assert data(client.patch(f"/api/users/{user['id']}/deactivate"))["isActive"] is False
        assert data(client.get(f"/api/users/{user['id']}"))["isActive"] is False
        assert data(client.patch(f"/api/users/{user['id']}/activate"))["isActive"] is True

    def test_delete(self, client, user):
        assert client.delete(f"/api/users/{user['id']}").json()["message"] == "User deleted successfully"
        assert client.get(f"/api/users/{user['id']}").status_code == 404
