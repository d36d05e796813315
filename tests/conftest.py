"""
Test configuration and fixtures.
"""

from collections.abc import Generator
from typing import Any

import pytest

from redis_mock_adapter import FakeRedisAdapter, FunctionOverrideRegistry, RedisClient, default_adapter


class QuitRecorder:
    """Stands in for the store's `quit`, recording how it was called."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, client: Any, *args: Any, **kwargs: Any) -> str:
        self.calls.append((client, args, kwargs))
        return "OK"


@pytest.fixture
def registry() -> FunctionOverrideRegistry:
    return FunctionOverrideRegistry()


@pytest.fixture
def adapter(registry: FunctionOverrideRegistry) -> FakeRedisAdapter:
    return FakeRedisAdapter(registry=registry)


@pytest.fixture
def client(adapter: FakeRedisAdapter) -> RedisClient:
    return adapter.create_client()


@pytest.fixture
def quit_recorder(adapter: FakeRedisAdapter) -> QuitRecorder:
    recorder = QuitRecorder()

    def quit(self: Any, *args: Any, **kwargs: Any) -> str:
        return recorder(self, *args, **kwargs)

    adapter.set_client_function("quit", quit)

    return recorder


@pytest.fixture
def clean_default_adapter() -> Generator[None, None, None]:
    default_adapter.registry.clear()
    yield
    default_adapter.registry.clear()
