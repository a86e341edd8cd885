from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from src.main import create_app
from src.tenancy.domain.value_objects import tenant_schema_name
from tests.fakes import FakeHealthCheck


def _create(client, name="Acme", domain="acme.test"):
    return client.post("/api/tenants", json={"name": name, "domain": domain})


# ─────────────────────────── /api/tenants ───────────────────────────

def test_create_then_fetch_tenant(client, provisioner):
    r = _create(client)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Tenant created successfully"
    tenant = body["data"]
    assert {"id", "name", "domain", "created_at", "updated_at"} <= tenant.keys()
    assert r.headers["location"] == f"/api/tenants/{tenant['id']}"
    assert provisioner.calls == [tenant_schema_name(tenant["id"])]

    r = client.get(f"/api/tenants/{tenant['id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": tenant}


@pytest.mark.parametrize("payload", [{"name": "Acme"}, {"domain": "acme.test"}, {"name": "", "domain": "acme.test"}])
def test_create_requires_name_and_domain(client, provisioner, payload):
    r = client.post("/api/tenants", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Name and domain are required"
    assert body["code"] == "validation_error"
    assert provisioner.calls == []


def test_create_without_body_is_bad_request(client):
    r = client.post("/api/tenants")
    assert r.status_code == 400
    assert r.json()["code"] == "validation_error"


def test_duplicate_domain_is_conflict(client):
    assert _create(client).status_code == 201
    r = _create(client, name="Acme Again", domain="ACME.test")
    assert r.status_code == 409
    assert r.json()["code"] == "domain_taken"


@pytest.mark.parametrize("tenant_id", [str(uuid4()), "not-a-uuid"])
def test_unknown_tenant_is_not_found(client, tenant_id):
    r = client.get(f"/api/tenants/{tenant_id}")
    assert r.status_code == 404
    assert r.json()["error"] == "Tenant not found"


def test_list_newest_first(client):
    first = _create(client, "One", "one.test").json()["data"]
    second = _create(client, "Two", "two.test").json()["data"]

    r = client.get("/api/tenants")
    assert r.status_code == 200
    assert [t["id"] for t in r.json()["data"]] == [second["id"], first["id"]]


def test_list_empty_registry(client):
    assert client.get("/api/tenants").json() == {"success": True, "data": []}


def test_provisioning_failure_on_create_is_generic_500(client, provisioner):
    provisioner.failures = 1
    r = _create(client)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal server error"
    assert "boom" not in r.text


# ─────────────────────────── /api/tenant/* ───────────────────────────

def test_tenant_scope_requires_header(client):
    r = client.get("/api/tenant/contacts")
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Tenant ID required in x-tenant-id header"
    assert body["code"] == "tenant_header_missing"


def test_tenant_scope_unknown_tenant_never_provisions(client, provisioner):
    r = client.get("/api/tenant/contacts", headers={"x-tenant-id": str(uuid4())})
    assert r.status_code == 404
    assert r.json()["error"] == "Tenant not found"
    assert provisioner.calls == []


@pytest.mark.parametrize("method", ["get", "post", "put", "patch", "delete"])
def test_tenant_scope_echoes_tenant(client, method):
    tenant_id = _create(client).json()["data"]["id"]
    r = client.request(method.upper(), "/api/tenant/leads/42", headers={"x-tenant-id": tenant_id})
    assert r.status_code == 200
    assert r.json() == {"success": True, "tenantId": tenant_id}


def test_tenant_scope_provisions_lazily_once(client, repository, provisioner, resolver):
    tenant = repository.seed("Legacy", "legacy.test")
    headers = {"x-tenant-id": str(tenant.id)}

    for _ in range(3):
        assert client.get("/api/tenant/contacts", headers=headers).status_code == 200

    assert provisioner.calls == [tenant_schema_name(tenant.id)]
    assert resolver.get_cached(tenant.id) is not None


def test_tenant_scope_resolution_failure_is_generic_500(client, repository, provisioner):
    tenant = repository.seed("Broken", "broken.test")
    provisioner.failures = 1
    headers = {"x-tenant-id": str(tenant.id)}

    r = client.get("/api/tenant/contacts", headers=headers)
    assert r.status_code == 500
    assert r.json()["error"] == "Internal server error"
    assert "boom" not in r.text

    # nothing cached; the next request retries and succeeds
    assert client.get("/api/tenant/contacts", headers=headers).status_code == 200
    assert len(provisioner.calls) == 2


def _spelling(tenant_id: UUID, form: str) -> str:
    return {
        "upper": str(tenant_id).upper(),
        "hex": tenant_id.hex,
        "braced": "{%s}" % tenant_id,
        "urn": f"urn:uuid:{tenant_id}",
    }[form]


SPELLINGS = ["upper", "hex", "braced", "urn"]


@pytest.mark.parametrize("form", SPELLINGS)
def test_tenant_scope_id_spellings_share_one_schema(client, repository, provisioner, resolver, form):
    tenant = repository.seed("Acme", "acme.test")

    first = client.get("/api/tenant/contacts", headers={"x-tenant-id": str(tenant.id)})
    again = client.get("/api/tenant/contacts", headers={"x-tenant-id": _spelling(tenant.id, form)})

    assert first.status_code == 200
    assert again.status_code == 200, again.text
    assert again.json() == {"success": True, "tenantId": str(tenant.id)}
    assert provisioner.calls == [tenant_schema_name(tenant.id)]
    assert resolver.cached_tenant_ids() == [str(tenant.id)]


@pytest.mark.parametrize("form", SPELLINGS)
def test_tenant_scope_unknown_id_in_any_spelling_is_not_found(client, provisioner, form):
    r = client.get("/api/tenant/contacts", headers={"x-tenant-id": _spelling(uuid4(), form)})
    assert r.status_code == 404
    assert provisioner.calls == []


@pytest.mark.parametrize("form", SPELLINGS)
def test_get_tenant_accepts_id_spellings(client, repository, form):
    tenant = repository.seed("Acme", "acme.test")
    r = client.get(f"/api/tenants/{_spelling(tenant.id, form)}")
    assert r.status_code == 200, r.text
    assert r.json()["data"]["id"] == str(tenant.id)


# ─────────────────────────── ambient ───────────────────────────

def test_request_id_is_echoed(client):
    r = client.get("/", headers={"X-Request-ID": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


def test_request_id_is_generated(client):
    assert client.get("/").headers.get("x-request-id")


@pytest.mark.parametrize("incoming", ["x" * 200, "bad id with spaces", "<script>"])
def test_unusable_request_id_is_replaced(client, incoming):
    echoed = client.get("/", headers={"X-Request-ID": incoming}).headers["x-request-id"]
    assert echoed != incoming
    assert UUID(echoed)


def test_security_headers_on_every_response(client):
    for r in (client.get("/"), client.get("/api/tenant/x")):
        assert r.headers["x-content-type-options"] == "nosniff"
        assert r.headers["x-frame-options"] == "DENY"
        assert r.headers["cache-control"] == "no-store"


def test_error_body_carries_correlation_id(client):
    r = client.get("/api/tenant/x", headers={"X-Request-ID": "req-err"})
    assert r.json()["correlation_id"] == "req-err"


def test_health_reports_pools(client):
    _create(client)
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["tenant_pools"] == 1


def test_health_unavailable_when_database_down(settings, container):
    container.health_check = FakeHealthCheck(healthy=False)
    with TestClient(create_app(settings, container=container)) as c:
        r = c.get("/health")
    assert r.status_code == 503
    assert r.json()["database"] == "disconnected"


def test_shutdown_disposes_tenant_pools(settings, container, pool_factory, resolver):
    with TestClient(create_app(settings, container=container)) as c:
        assert c.post("/api/tenants", json={"name": "Acme", "domain": "acme.test"}).status_code == 201
    assert resolver.closed
    assert all(p.disposed for p in pool_factory.created)
