"""CRUD on the writable collections: sources, endpoints and authentications."""
from __future__ import annotations

from src.db.models import Source

BASE = "/api/v0.1"


async def test_create_source(client, headers, source_type):
    resp = await client.post(
        f"{BASE}/sources",
        json={"name": "ocp-dev", "source_type_id": str(source_type.id)},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "ocp-dev"
    assert body["source_type_id"] == str(source_type.id)
    assert body["uid"] is None
    assert "tenant_id" not in body
    assert resp.headers["location"] == f"http://test{BASE}/sources/{body['id']}"

    shown = await client.get(f"{BASE}/sources/{body['id']}", headers=headers)
    assert shown.status_code == 200
    assert shown.json()["name"] == "ocp-dev"


async def test_create_ignores_read_only_attributes(client, headers, source_type):
    resp = await client.post(
        f"{BASE}/sources",
        json={"id": "999", "name": "ocp-dev", "source_type_id": str(source_type.id)},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["id"] != "999"


async def test_create_source_without_required_attribute(client, headers):
    resp = await client.post(f"{BASE}/sources", json={"name": "ocp-dev"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {
        "errors": [{"status": "400", "detail": "param is missing or the value is empty: source_type_id"}]
    }


async def test_create_source_with_unpermitted_attribute(client, headers, source_type):
    resp = await client.post(
        f"{BASE}/sources",
        json={"name": "a", "source_type_id": str(source_type.id), "color": "red"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["detail"] == "found unpermitted parameter: color"


async def test_create_source_with_invalid_body(client, headers):
    resp = await client.post(
        f"{BASE}/sources",
        content=b"name=a",
        headers={**headers, "content-type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["detail"] == "Failed to parse POST body, expected JSON"


async def test_show_unknown_source(client, headers, tenant):
    for record_id in ("12345", "abc"):
        resp = await client.get(f"{BASE}/sources/{record_id}", headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"errors": [{"status": "404", "detail": "Record not found"}]}


async def test_update_source(client, headers, source):
    resp = await client.patch(f"{BASE}/sources/{source.id}", json={"name": "renamed"}, headers=headers)
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await client.put(f"{BASE}/sources/{source.id}", json={"uid": "uid-2"}, headers=headers)
    assert resp.status_code == 204

    body = (await client.get(f"{BASE}/sources/{source.id}", headers=headers)).json()
    assert (body["name"], body["uid"]) == ("renamed", "uid-2")


async def test_update_rejects_read_only_attributes(client, headers, source):
    resp = await client.patch(f"{BASE}/sources/{source.id}", json={"created_at": "2020-01-01T00:00:00Z"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["detail"] == "found unpermitted parameter: created_at"


async def test_delete_source(client, headers, source, session_maker):
    resp = await client.delete(f"{BASE}/sources/{source.id}", headers=headers)
    assert resp.status_code == 204

    resp = await client.get(f"{BASE}/sources/{source.id}", headers=headers)
    assert resp.status_code == 404
    async with session_maker() as fresh:
        assert await fresh.get(Source, source.id) is None


async def test_create_endpoint(client, headers, source):
    resp = await client.post(
        f"{BASE}/endpoints",
        json={"source_id": str(source.id), "host": "api.example.com", "port": 8443, "default": True},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["port"] == 8443
    assert body["default"] is True
    assert body["source_id"] == str(source.id)

    listed = (await client.get(f"{BASE}/sources/{source.id}/endpoints", headers=headers)).json()
    assert [e["id"] for e in listed["data"]] == [body["id"]]


async def test_create_endpoint_with_invalid_port(client, headers, source):
    resp = await client.post(
        f"{BASE}/endpoints",
        json={"source_id": str(source.id), "port": "https"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["detail"] == "Invalid value for port: https"


async def test_authentications_hide_passwords(client, headers, source):
    resp = await client.post(
        f"{BASE}/authentications",
        json={
            "resource_type": "Source",
            "resource_id": str(source.id),
            "username": "admin",
            "password": "s3cret",
        },
        headers=headers,
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["username"] == "admin"
    assert "password" not in created

    listed = (await client.get(f"{BASE}/sources/{source.id}/authentications", headers=headers)).json()
    assert listed["meta"]["count"] == 1
    assert listed["data"][0]["id"] == created["id"]
    assert "password" not in listed["data"][0]


async def test_endpoint_authentications_are_polymorphic(client, headers, source):
    endpoint = (
        await client.post(f"{BASE}/endpoints", json={"source_id": str(source.id)}, headers=headers)
    ).json()
    for resource_type, resource_id in (("Endpoint", endpoint["id"]), ("Source", str(source.id))):
        resp = await client.post(
            f"{BASE}/authentications",
            json={"resource_type": resource_type, "resource_id": resource_id, "username": resource_type},
            headers=headers,
        )
        assert resp.status_code == 201

    listed = (await client.get(f"{BASE}/endpoints/{endpoint['id']}/authentications", headers=headers)).json()
    assert [a["username"] for a in listed["data"]] == ["Endpoint"]
