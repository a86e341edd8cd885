import os

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.dependencies import AppContainer
from src.main import create_app
from src.tenancy.application.services import TenantPoolResolver, TenantService
from tests.fakes import (
    FakeHealthCheck,
    FakePoolFactory,
    FakeProvisioner,
    InMemoryTenantRepository,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, ENV="dev", TESTING=True, LOG_FORMAT="console", LOG_LEVEL="WARNING")


@pytest.fixture
def repository() -> InMemoryTenantRepository:
    return InMemoryTenantRepository()


@pytest.fixture
def provisioner() -> FakeProvisioner:
    return FakeProvisioner()


@pytest.fixture
def pool_factory() -> FakePoolFactory:
    return FakePoolFactory()


@pytest.fixture
def resolver(provisioner, pool_factory) -> TenantPoolResolver:
    return TenantPoolResolver(provisioner, pool_factory)


@pytest.fixture
def tenant_service(repository, resolver) -> TenantService:
    return TenantService(repository=repository, pool_resolver=resolver)


@pytest.fixture
def health_check() -> FakeHealthCheck:
    return FakeHealthCheck()


@pytest.fixture
def container(settings, tenant_service, resolver, health_check) -> AppContainer:
    return AppContainer(
        settings=settings,
        tenant_service=tenant_service,
        pool_resolver=resolver,
        health_check=health_check,
    )


@pytest.fixture
def client(settings, container):
    app = create_app(settings, container=container)
    with TestClient(app) as c:
        yield c


def require_test_db():
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set; skipping DB-dependent tests")
    return url
