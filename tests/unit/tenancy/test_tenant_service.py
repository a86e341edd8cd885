from uuid import uuid4

import pytest

from src.shared.exceptions import ConflictError, NotFoundError, TenantProvisioningError, ValidationError
from src.tenancy.application.services import TenantPoolResolver, TenantService
from src.tenancy.domain.value_objects import tenant_schema_name
from tests.fakes import FakePoolFactory, FakeProvisioner, InMemoryTenantRepository


async def test_create_tenant_registers_and_provisions(tenant_service, provisioner, resolver):
    tenant = await tenant_service.create_tenant(name="  Acme ", domain=" ACME.test ")

    assert tenant.name == "Acme"
    assert tenant.domain == "acme.test"
    assert provisioner.calls == [tenant_schema_name(tenant.id)]
    assert resolver.get_cached(tenant.id) is not None


@pytest.mark.parametrize(
    "name, domain, field",
    [(None, "acme.test", "name"), ("Acme", None, "domain"), ("", "acme.test", "name"), ("Acme", "   ", "domain")],
)
async def test_create_tenant_requires_name_and_domain(tenant_service, provisioner, name, domain, field):
    with pytest.raises(ValidationError) as exc:
        await tenant_service.create_tenant(name=name, domain=domain)

    assert exc.value.message == "Name and domain are required"
    assert exc.value.details == {"field": field}
    assert provisioner.calls == []


async def test_duplicate_domain_conflicts_case_insensitively(tenant_service, repository):
    await tenant_service.create_tenant(name="Acme", domain="acme.test")

    with pytest.raises(ConflictError) as exc:
        await tenant_service.create_tenant(name="Other", domain="ACME.TEST")

    assert exc.value.code == "domain_taken"
    assert len(await repository.list_all()) == 1


async def test_provisioning_failure_surfaces_and_keeps_registry_row():
    repository = InMemoryTenantRepository()
    provisioner = FakeProvisioner(failures=1)
    resolver = TenantPoolResolver(provisioner, FakePoolFactory())
    service = TenantService(repository=repository, pool_resolver=resolver)

    with pytest.raises(TenantProvisioningError) as exc:
        await service.create_tenant(name="Acme", domain="acme.test")

    assert isinstance(exc.value.__cause__, RuntimeError)
    [tenant] = await repository.list_all()
    assert resolver.get_cached(tenant.id) is None

    # next access retries provisioning
    await resolver.resolve(tenant.id)
    assert len(provisioner.calls) == 2


async def test_get_tenant_returns_registered_tenant(tenant_service):
    created = await tenant_service.create_tenant(name="Acme", domain="acme.test")
    assert await tenant_service.get_tenant(str(created.id)) == created


@pytest.mark.parametrize("tenant_id", [str(uuid4()), "not-a-uuid", None])
async def test_get_tenant_missing_raises_not_found(tenant_service, tenant_id):
    with pytest.raises(NotFoundError) as exc:
        await tenant_service.get_tenant(tenant_id)
    assert exc.value.code == "tenant_not_found"
    assert exc.value.message == "Tenant not found"


async def test_list_tenants_newest_first(tenant_service):
    first = await tenant_service.create_tenant(name="One", domain="one.test")
    second = await tenant_service.create_tenant(name="Two", domain="two.test")

    assert [t.id for t in await tenant_service.list_tenants()] == [second.id, first.id]


async def test_validate_tenant(tenant_service, repository):
    tenant = await tenant_service.create_tenant(name="Acme", domain="acme.test")

    assert await tenant_service.validate_tenant(str(tenant.id)) is True
    assert await tenant_service.validate_tenant(str(tenant.id).upper()) is True
    assert await tenant_service.validate_tenant(str(uuid4())) is False


async def test_validate_tenant_malformed_id_skips_lookup(tenant_service, repository):
    assert await tenant_service.validate_tenant("acme") is False
    assert await tenant_service.validate_tenant(None) is False
    assert repository.exists_calls == []
