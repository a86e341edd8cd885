import asyncio
from uuid import uuid4

import pytest

from src.tenancy.application.services import ResolverClosedError, TenantPoolResolver
from src.tenancy.domain.value_objects import tenant_schema_name
from tests.fakes import FakePoolFactory, FakeProvisioner

TENANT = "123e4567-e89b-12d3-a456-426614174000"


async def test_first_access_provisions_and_caches(resolver, provisioner, pool_factory):
    pool = await resolver.resolve(TENANT)

    assert provisioner.calls == ["tenant_123e4567_e89b_12d3_a456_426614174000"]
    assert pool.schema_name == tenant_schema_name(TENANT)
    assert resolver.get_cached(TENANT) is pool
    assert len(resolver) == 1


async def test_repeated_access_returns_cached_pool_without_ddl(resolver, provisioner, pool_factory):
    first = await resolver.resolve(TENANT)
    second = await resolver.resolve(TENANT)
    third = await resolver.resolve(TENANT.upper())

    assert first is second is third
    assert len(provisioner.calls) == 1
    assert len(pool_factory.created) == 1


async def test_uuid_and_string_ids_share_one_pool(resolver):
    tenant_uuid = uuid4()
    a = await resolver.resolve(tenant_uuid)
    b = await resolver.resolve(str(tenant_uuid))
    assert a is b


async def test_concurrent_first_access_builds_once():
    gate = asyncio.Event()
    provisioner = FakeProvisioner(gate=gate)
    factory = FakePoolFactory()
    resolver = TenantPoolResolver(provisioner, factory)

    tasks = [asyncio.create_task(resolver.resolve(TENANT)) for _ in range(10)]
    await asyncio.sleep(0)
    gate.set()
    pools = await asyncio.gather(*tasks)

    assert len(provisioner.calls) == 1
    assert len(factory.created) == 1
    assert all(p is pools[0] for p in pools)


async def test_distinct_tenants_build_independently(resolver, provisioner):
    other = str(uuid4())
    a, b = await asyncio.gather(resolver.resolve(TENANT), resolver.resolve(other))

    assert a is not b
    assert sorted(provisioner.calls) == sorted([tenant_schema_name(TENANT), tenant_schema_name(other)])
    assert resolver.cached_tenant_ids() == sorted([TENANT, other])


async def test_concurrent_callers_all_see_the_failure():
    gate = asyncio.Event()
    resolver = TenantPoolResolver(FakeProvisioner(gate=gate, failures=1), FakePoolFactory())

    tasks = [asyncio.create_task(resolver.resolve(TENANT)) for _ in range(5)]
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert resolver.get_cached(TENANT) is None


async def test_provisioning_failure_leaves_no_entry_and_retries():
    provisioner = FakeProvisioner(failures=1)
    factory = FakePoolFactory()
    resolver = TenantPoolResolver(provisioner, factory)

    with pytest.raises(RuntimeError, match="boom"):
        await resolver.resolve(TENANT)
    assert len(resolver) == 0
    assert factory.created == []

    pool = await resolver.resolve(TENANT)
    assert resolver.get_cached(TENANT) is pool
    assert len(provisioner.calls) == 2


async def test_pool_factory_failure_leaves_no_entry():
    provisioner = FakeProvisioner()
    resolver = TenantPoolResolver(provisioner, FakePoolFactory(failures=1))

    with pytest.raises(ConnectionRefusedError):
        await resolver.resolve(TENANT)
    assert resolver.get_cached(TENANT) is None

    await resolver.resolve(TENANT)
    assert len(resolver) == 1


async def test_cancelled_waiter_does_not_cancel_shared_build():
    gate = asyncio.Event()
    provisioner = FakeProvisioner(gate=gate)
    resolver = TenantPoolResolver(provisioner, FakePoolFactory())

    impatient = asyncio.create_task(resolver.resolve(TENANT))
    patient = asyncio.create_task(resolver.resolve(TENANT))
    await asyncio.sleep(0)
    impatient.cancel()
    gate.set()

    pool = await patient
    with pytest.raises(asyncio.CancelledError):
        await impatient
    assert resolver.get_cached(TENANT) is pool
    assert len(provisioner.calls) == 1


async def test_invalid_tenant_id_is_rejected_before_provisioning(resolver, provisioner):
    with pytest.raises(ValueError):
        await resolver.resolve("acme; drop schema public")
    assert provisioner.calls == []


async def test_close_disposes_all_pools(resolver, pool_factory):
    await resolver.resolve(TENANT)
    await resolver.resolve(str(uuid4()))

    await resolver.close()

    assert resolver.closed
    assert len(resolver) == 0
    assert all(p.disposed for p in pool_factory.created)


async def test_resolve_after_close_raises(resolver):
    await resolver.close()
    with pytest.raises(ResolverClosedError):
        await resolver.resolve(TENANT)


async def test_close_cancels_pending_build():
    gate = asyncio.Event()
    factory = FakePoolFactory()
    resolver = TenantPoolResolver(FakeProvisioner(gate=gate), factory)

    waiter = asyncio.create_task(resolver.resolve(TENANT))
    await asyncio.sleep(0)
    await resolver.close()

    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert factory.created == []
    assert len(resolver) == 0
