import pytest
from sqlalchemy import func, select

from conftest import make_organization, make_user
from app.models.organization import Organization

ORG_PAYLOAD = {
    "name": "Aurora Labs",
    "slug": "aurora-labs",
    "email": "aurora-labs@example.com",
    "phone": "+91 9000000000",
    "website": "aurora-labs.com",
    "avatar": "https://api.dicebear.com/6.x/identicon/svg?seed=Aurora%20Labs",
}


async def _org_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Organization))).scalar_one()


async def test_create_then_get_round_trip(client):
    created = await client.post("/api/organizations", json=ORG_PAYLOAD)
    assert created.status_code == 201
    org_id = created.json()["id"]

    fetched = await client.get(f"/api/organizations/{org_id}")
    assert fetched.status_code == 200
    body = fetched.json()
    for key, value in ORG_PAYLOAD.items():
        assert body[key] == value
    assert body["id"] == org_id
    assert body["status"] == "active"
    assert body["pendingRequests"] == 0
    assert "createdAt" in body and "updatedAt" in body


async def test_create_blank_optional_fields_become_null(client):
    payload = {"name": "Nimbus Co", "slug": "nimbus-co", "email": "n@example.com", "phone": "", "website": "  "}
    resp = await client.post("/api/organizations", json=payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["phone"] is None
    assert body["website"] is None
    assert body["avatar"] is None


async def test_create_accepts_explicit_status(client):
    resp = await client.post(
        "/api/organizations", json={**ORG_PAYLOAD, "status": "blocked"}
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "blocked"


@pytest.mark.parametrize("missing", ["name", "slug", "email"])
async def test_create_missing_required_field_is_bad_request(client, db, missing):
    payload = {k: v for k, v in ORG_PAYLOAD.items() if k != missing}
    resp = await client.post("/api/organizations", json=payload)
    assert resp.status_code == 400
    assert resp.json()["code"] == "bad_request"
    assert await _org_count(db) == 0


async def test_create_blank_name_is_bad_request(client, db):
    resp = await client.post("/api/organizations", json={**ORG_PAYLOAD, "name": "   "})
    assert resp.status_code == 400
    assert await _org_count(db) == 0


async def test_create_keeps_text_fields_as_sent(client):
    payload = {"name": " Acme ", "slug": "acme", "email": "Sales@Acme.COM"}
    created = await client.post("/api/organizations", json=payload)
    assert created.status_code == 201

    body = (await client.get(f"/api/organizations/{created.json()['id']}")).json()
    assert body["name"] == " Acme "
    assert body["slug"] == "acme"
    assert body["email"] == "Sales@Acme.COM"


async def test_create_accepts_free_form_email(client):
    resp = await client.post(
        "/api/organizations", json={"name": "Front Desk", "slug": "front-desk", "email": "contact"}
    )
    assert resp.status_code == 201
    assert resp.json()["email"] == "contact"


async def test_create_empty_status_defaults_to_active(client):
    resp = await client.post("/api/organizations", json={**ORG_PAYLOAD, "status": ""})
    assert resp.status_code == 201
    assert resp.json()["status"] == "active"


async def test_create_unknown_status_is_bad_request(client):
    resp = await client.post("/api/organizations", json={**ORG_PAYLOAD, "status": "archived"})
    assert resp.status_code == 400


async def test_create_duplicate_slug_conflicts_and_keeps_original(client, db):
    original = await make_organization(db, slug="aurora-labs", name="Original Name")

    resp = await client.post("/api/organizations", json=ORG_PAYLOAD)
    assert resp.status_code == 409
    assert resp.json() == {
        "code": "conflict",
        "message": "Organization with this slug already exists",
    }

    fetched = (await client.get(f"/api/organizations/{original.id}")).json()
    assert fetched["name"] == "Original Name"
    assert fetched["email"] == "aurora-labs@example.com"
    assert await _org_count(db) == 1


async def test_list_returns_newest_first(client):
    ids = []
    for slug in ("first", "second", "third"):
        resp = await client.post(
            "/api/organizations",
            json={"name": slug.title(), "slug": slug, "email": f"{slug}@example.com"},
        )
        ids.append(resp.json()["id"])

    listed = await client.get("/api/organizations")
    assert listed.status_code == 200
    assert [org["id"] for org in listed.json()] == list(reversed(ids))


async def test_list_empty(client):
    resp = await client.get("/api/organizations")
    assert resp.status_code == 200
    assert resp.json() == []


async def test_get_missing_organization_is_not_found(client):
    resp = await client.get("/api/organizations/999")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Organization not found"


async def test_partial_update_only_touches_given_field(client):
    created = (await client.post("/api/organizations", json=ORG_PAYLOAD)).json()

    resp = await client.put(f"/api/organizations/{created['id']}", json={"phone": "123"})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["phone"] == "123"
    assert updated["updatedAt"] != created["updatedAt"]
    for key in ("name", "slug", "email", "status", "website", "avatar", "pendingRequests", "createdAt"):
        assert updated[key] == created[key]


async def test_update_accepts_camel_case_pending_requests(client):
    created = (await client.post("/api/organizations", json=ORG_PAYLOAD)).json()
    resp = await client.put(
        f"/api/organizations/{created['id']}", json={"pendingRequests": 42, "status": "inactive"}
    )
    assert resp.status_code == 200
    assert resp.json()["pendingRequests"] == 42
    assert resp.json()["status"] == "inactive"


async def test_update_empty_body_still_refreshes_updated_at(client):
    created = (await client.post("/api/organizations", json=ORG_PAYLOAD)).json()
    resp = await client.put(f"/api/organizations/{created['id']}", json={})
    assert resp.status_code == 200
    assert resp.json()["updatedAt"] != created["updatedAt"]
    assert resp.json()["name"] == created["name"]


async def test_update_null_on_required_field_is_bad_request(client):
    created = (await client.post("/api/organizations", json=ORG_PAYLOAD)).json()
    resp = await client.put(f"/api/organizations/{created['id']}", json={"name": None})
    assert resp.status_code == 400


async def test_update_can_clear_nullable_field(client):
    created = (await client.post("/api/organizations", json=ORG_PAYLOAD)).json()
    resp = await client.put(f"/api/organizations/{created['id']}", json={"website": None})
    assert resp.status_code == 200
    assert resp.json()["website"] is None


async def test_update_missing_organization_is_not_found(client):
    resp = await client.put("/api/organizations/999", json={"phone": "123"})
    assert resp.status_code == 404


async def test_update_to_taken_slug_conflicts(client, db):
    await make_organization(db, slug="taken")
    other = await make_organization(db, slug="free", name="Free Org")

    resp = await client.put(f"/api/organizations/{other.id}", json={"slug": "taken"})
    assert resp.status_code == 409

    fetched = (await client.get(f"/api/organizations/{other.id}")).json()
    assert fetched["slug"] == "free"


async def test_delete_cascades_to_users(client, db):
    org = await make_organization(db)
    await make_user(db, org, name="Sana Khan")
    await make_user(db, org, name="Liam Smith")

    before = await client.get(f"/api/organizations/{org.id}/users")
    assert len(before.json()) == 2

    resp = await client.delete(f"/api/organizations/{org.id}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Organization deleted successfully", "id": org.id}

    after = await client.get(f"/api/organizations/{org.id}/users")
    assert after.status_code == 200
    assert after.json() == []
    assert (await client.get(f"/api/organizations/{org.id}")).status_code == 404


async def test_delete_missing_organization_is_not_found(client):
    resp = await client.delete("/api/organizations/12345")
    assert resp.status_code == 404


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/organizations/abc"),
        ("put", "/api/organizations/abc"),
        ("delete", "/api/organizations/abc"),
        ("get", "/api/organizations/1.5/users"),
        ("post", "/api/organizations/x1/users"),
        ("put", "/api/users/abc"),
        ("delete", "/api/users/-3"),
    ],
)
async def test_non_numeric_id_is_bad_request(client, method, path):
    kwargs = {"json": {"name": "Someone"}} if method in {"put", "post"} else {}
    resp = await getattr(client, method)(path, **kwargs)
    assert resp.status_code == 400
    assert resp.json()["code"] == "bad_request"


async def test_response_carries_request_id(client):
    resp = await client.get("/api/organizations", headers={"X-Request-ID": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"
