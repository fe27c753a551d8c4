from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sqlgate.api.deps import get_registry
from sqlgate.core.pool import DatabaseRegistry
from sqlgate.main import app
from tests.utils.database import make_config, make_registry


@pytest.fixture
def registry(tmp_path: Path) -> Generator[DatabaseRegistry, None, None]:
    """Registry serving one database, ``test``, with table t(v INT)."""
    reg = make_registry(make_config(tmp_path))
    yield reg
    reg.close()


@pytest.fixture
def make_client() -> Generator[Callable[[DatabaseRegistry], TestClient], None, None]:
    """Return a factory: TestClient whose app serves the given registry."""
    registries: list[DatabaseRegistry] = []

    def _make(reg: DatabaseRegistry) -> TestClient:
        registries.append(reg)
        app.dependency_overrides[get_registry] = lambda: reg
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
    for reg in registries:
        reg.close()


@pytest.fixture
def client(
    registry: DatabaseRegistry, make_client: Callable[[DatabaseRegistry], TestClient]
) -> TestClient:
    return make_client(registry)
