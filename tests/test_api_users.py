"""Integration tests for the /api/users endpoints."""

from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.conftest import user_payload


def create(client: TestClient, headers: Dict[str, str], name: str) -> Dict:
    response = client.post("/api/users", json=user_payload(name), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateUser:
    def test_create_returns_record_and_links(self, client: TestClient, auth_headers) -> None:
        response = client.post("/api/users", json=user_payload("ana"), headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        user = body["data"]
        assert user["user_name"] == "ana"
        assert user["birth_date"] == "1990-01-01"
        assert "created_at" in user and "updated_at" not in user
        assert body["_links"]["self"] == {"href": f"/api/users/{user['id']}"}
        assert body["_links"]["update"]["method"] == "PATCH"
        assert body["_links"]["delete"]["method"] == "DELETE"
        assert response.headers["Location"] == f"/api/users/{user['id']}"

    def test_create_requires_token(self, client: TestClient) -> None:
        response = client.post("/api/users", json=user_payload("ana"))
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_create_rejects_invalid_token(self, client: TestClient) -> None:
        response = client.post(
            "/api/users", json=user_payload("ana"), headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_create_validates_payload(self, client: TestClient, auth_headers) -> None:
        response = client.post(
            "/api/users",
            json={"user_name": "", "email": "bad", "birth_date": "yesterday"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation Error"
        fields = {d["field"] for d in body["details"]}
        assert {"body.user_name", "body.email", "body.birth_date"} <= fields


class TestGetUpdateDelete:
    def test_get_user(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.get(f"/api/users/{user['id']}")
        assert response.status_code == 200
        assert response.json()["data"] == user

    def test_get_unknown_user_is_404(self, client: TestClient) -> None:
        response = client.get("/api/users/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"

    def test_patch_merges_fields(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.patch(
            f"/api/users/{user['id']}", json={"email": "new@example.com"}, headers=auth_headers
        )
        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["email"] == "new@example.com"
        assert updated["user_name"] == "ana"
        assert updated["created_at"] == user["created_at"]
        assert "updated_at" in updated

    def test_patch_refreshes_cached_record(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        client.get(f"/api/users/{user['id']}")
        client.patch(f"/api/users/{user['id']}", json={"user_name": "anna"}, headers=auth_headers)
        assert client.get(f"/api/users/{user['id']}").json()["data"]["user_name"] == "anna"

    def test_patch_unknown_user_is_404(self, client: TestClient, auth_headers) -> None:
        response = client.patch("/api/users/missing", json={"user_name": "x"}, headers=auth_headers)
        assert response.status_code == 404

    def test_patch_requires_token(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.patch(f"/api/users/{user['id']}", json={"user_name": "x"})
        assert response.status_code == 401

    def test_patch_rejects_unknown_fields(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.patch(f"/api/users/{user['id']}", json={"id": "forged"}, headers=auth_headers)
        assert response.status_code == 400

    def test_patch_rejects_null_field(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.patch(f"/api/users/{user['id']}", json={"email": None}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"
        assert client.get(f"/api/users/{user['id']}").json()["data"]["email"] == user["email"]

    def test_delete_user(self, client: TestClient, auth_headers) -> None:
        user = create(client, auth_headers, "ana")
        response = client.delete(f"/api/users/{user['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/api/users/{user['id']}").status_code == 404
        assert client.delete(f"/api/users/{user['id']}", headers=auth_headers).status_code == 404


class TestListUsers:
    def list_ids(self, client: TestClient, **params) -> Dict:
        response = client.get("/api/users", params=params)
        assert response.status_code == 200, response.text
        return response.json()

    def test_empty_collection(self, client: TestClient) -> None:
        body = self.list_ids(client)
        assert body["data"] == []
        assert "next" not in body["_links"]
        assert body["meta"] == {"page_size": 10}

    def test_end_to_end_scenario(self, client: TestClient, auth_headers) -> None:
        a, b, c = (create(client, auth_headers, n) for n in ("a", "b", "c"))

        first = self.list_ids(client, limit=2)
        assert [u["id"] for u in first["data"]] == [a["id"], b["id"]]
        assert first["_links"]["next"]["href"] == f"/api/users?cursor={b['id']}&limit=2"

        second = self.list_ids(client, cursor=b["id"], limit=2)
        assert [u["id"] for u in second["data"]] == [c["id"]]
        assert "next" not in second["_links"]

        client.delete(f"/api/users/{b['id']}", headers=auth_headers)
        fallback = self.list_ids(client, cursor=b["id"], limit=2)
        assert [u["id"] for u in fallback["data"]] == [a["id"], c["id"]]

    def test_following_next_links_visits_everyone(self, client: TestClient, auth_headers) -> None:
        created = [create(client, auth_headers, f"u{i}")["id"] for i in range(7)]
        seen: List[str] = []
        cursor: Optional[str] = None
        while True:
            params = {"limit": 3}
            if cursor:
                params["cursor"] = cursor
            body = self.list_ids(client, **params)
            seen.extend(u["id"] for u in body["data"])
            if "next" not in body["_links"]:
                break
            cursor = body["data"][-1]["id"]
        assert seen == created

    def test_field_selection(self, client: TestClient, auth_headers) -> None:
        create(client, auth_headers, "ana")
        body = self.list_ids(client, fields="user_name,unknown")
        assert body["data"] == [{"user_name": "ana"}]
        assert "fields=user_name%2Cunknown" in body["_links"]["self"]["href"]

    def test_include_total(self, client: TestClient, auth_headers) -> None:
        for name in ("a", "b", "c"):
            create(client, auth_headers, name)
        body = self.list_ids(client, limit=1, include_total="true")
        assert body["meta"] == {"page_size": 1, "total_count": 3}

    def test_limit_out_of_range_is_400(self, client: TestClient) -> None:
        for limit in (0, 101):
            response = client.get("/api/users", params={"limit": limit})
            assert response.status_code == 400
            assert response.json()["error"] == "Invalid Argument"

    def test_non_numeric_limit_is_400(self, client: TestClient) -> None:
        response = client.get("/api/users", params={"limit": "ten"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"

    def test_writes_invalidate_cached_pages(self, client: TestClient, auth_headers, app: FastAPI) -> None:
        create(client, auth_headers, "a")
        assert len(self.list_ids(client)["data"]) == 1
        assert any(k.startswith("users:page:") for k in app.state.user_service.cache.keys())

        create(client, auth_headers, "b")
        assert not any(k.startswith("users:page:") for k in app.state.user_service.cache.keys())
        assert len(self.list_ids(client)["data"]) == 2

    def test_repeated_reads_are_served_from_cache(self, client: TestClient, auth_headers, app: FastAPI) -> None:
        create(client, auth_headers, "a")
        cache = app.state.user_service.cache
        self.list_ids(client)
        hits_before = cache.stats()["hits"]
        self.list_ids(client)
        assert cache.stats()["hits"] == hits_before + 1

    def test_distinct_parameters_never_share_a_cached_page(self, client: TestClient, auth_headers) -> None:
        for name in ("a", "b", "c"):
            create(client, auth_headers, name)

        first = self.list_ids(client, cursor="x|1|f", limit=2)
        assert len(first["data"]) == 2

        second = self.list_ids(client, cursor="x", limit=1, fields="f|2|")
        assert len(second["data"]) == 1
        assert second["meta"] == {"page_size": 1}
        assert second["_links"]["self"]["href"] == "/api/users?cursor=x&limit=1&fields=f%7C2%7C"

    def test_empty_cursor_is_the_first_page(self, client: TestClient, auth_headers) -> None:
        create(client, auth_headers, "a")
        empty = self.list_ids(client, cursor="")
        plain = self.list_ids(client)
        assert empty["_links"]["self"]["href"] == "/api/users?limit=10"
        assert plain["_links"]["self"]["href"] == "/api/users?limit=10"
        assert plain["data"] == empty["data"]
