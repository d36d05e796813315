import logging
from typing import Any

import pytest
from fakeredis import FakeRedis
from redis.exceptions import ResponseError
from typing_extensions import override

import redis_mock_adapter
from redis_mock_adapter import (
    ADAPTEE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    BaseClientAdapter,
    FakeRedisAdapter,
    FunctionOverride,
    FunctionOverrideRegistry,
    MalformedMovedError,
    RedisClient,
    ReplyError,
)
from redis_mock_adapter.client import build_client_class
from redis_mock_adapter.types import REQUIRED_CLIENT_FUNCTIONS


def get_messages_from_caplog(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [record.message for record in caplog.records]


def test_constants():
    assert ADAPTEE == "fakeredis"
    assert DEFAULT_HOST == "localhost"
    assert DEFAULT_PORT == 6379
    assert ReplyError is ResponseError


def test_adapter_attributes(adapter: FakeRedisAdapter):
    assert adapter.adaptee == ADAPTEE
    assert adapter.store_class is FakeRedis
    assert adapter.default_host == DEFAULT_HOST
    assert adapter.default_port == DEFAULT_PORT
    assert adapter.reply_error is ReplyError
    assert issubclass(adapter.client_class, FakeRedis)
    assert adapter.client_class.__name__ == "AdaptedFakeRedis"


def test_create_client_stores_options(adapter: FakeRedisAdapter):
    client = adapter.create_client({"host": "h", "port": 1234})

    assert client.get_options() == {"host": "h", "port": 1234}
    assert client.resolve_host_and_port() == ("h", 1234)


def test_create_client_without_options(adapter: FakeRedisAdapter):
    client = adapter.create_client()

    assert client.get_options() is None
    assert client.resolve_host_and_port() == ("localhost", 6379)


def test_create_client_with_empty_options(adapter: FakeRedisAdapter):
    client = adapter.create_client({})

    assert client.get_options() == {}
    assert client.resolve_host_and_port() == ("localhost", 6379)


def test_create_client_with_partial_options(adapter: FakeRedisAdapter):
    assert adapter.create_client({"host": "h"}).resolve_host_and_port() == ("h", 6379)
    assert adapter.create_client({"port": 7000}).resolve_host_and_port() == ("localhost", 7000)


def test_create_client_passes_other_options_to_store(adapter: FakeRedisAdapter):
    client = adapter.create_client({"decode_responses": True})  # pyright: ignore[reportArgumentType]

    _ = client.set("test", "value")  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]

    assert client.get("test") == "value"  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]


def test_created_client_is_a_working_store(client: Any):
    assert isinstance(client, FakeRedis)
    assert client.ping() is True

    _ = client.set("test", "value")

    assert client.get("test") == b"value"


def test_created_client_starts_open(client: RedisClient):
    assert client.is_closing() is False
    assert client.manually_closing is False


def test_created_client_satisfies_protocol(client: RedisClient):
    assert isinstance(client, RedisClient)


def test_get_adapter(adapter: FakeRedisAdapter, client: RedisClient):
    assert client.get_adapter() is adapter


def test_supports_required_client_functions(adapter: FakeRedisAdapter):
    for name in REQUIRED_CLIENT_FUNCTIONS:
        assert adapter.supports(name), name

    assert adapter.supports("quit")
    assert not adapter.supports("not_a_client_function")


def test_building_adapter_logs_missing_end(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.INFO):
        _ = FakeRedisAdapter()

    assert get_messages_from_caplog(caplog) == ["Adding missing `end` function to `fakeredis` client"]


class StoreWithEnd(FakeRedis):
    def end(self, *args: Any, **kwargs: Any) -> str:
        return "store end"


class StoreWithEndAdapter(BaseClientAdapter):
    @property
    @override
    def adaptee(self) -> str:
        return "store-with-end"

    @property
    @override
    def store_class(self) -> type[Any]:
        return StoreWithEnd


def test_build_client_class_keeps_store_functions(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.INFO):
        client_class = build_client_class(store_class=StoreWithEnd, adaptee="store-with-end")

    assert client_class.end is StoreWithEnd.end
    assert "end" not in vars(client_class)
    assert "get_options" in vars(client_class)
    assert get_messages_from_caplog(caplog) == []


def test_adapter_for_store_with_end():
    adapter = StoreWithEndAdapter()
    client: Any = adapter.create_client()

    assert client.end(True) == "store end"
    assert client.is_closing() is False
    assert client.get_adapter() is adapter


def test_adapters_do_not_share_registries():
    first = FakeRedisAdapter()
    second = FakeRedisAdapter()

    def ping(self: Any) -> str:
        return "first"

    first.set_client_function("ping", ping)

    assert first.create_client().ping() == "first"  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]
    assert second.create_client().ping() is True  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]


def test_adapters_can_share_a_registry(registry: FunctionOverrideRegistry):
    first = FakeRedisAdapter(registry=registry)
    second = FakeRedisAdapter(registry=registry)

    def ping(self: Any) -> str:
        return "shared"

    first.set_client_function("ping", ping)

    assert second.create_client().ping() == "shared"  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]


def test_get_client_function(adapter: FakeRedisAdapter):
    def ping(self: Any) -> str:
        return "pong"

    assert adapter.get_client_function("ping") is FakeRedis.ping
    assert adapter.get_client_function("not_a_client_function") is None

    adapter.set_client_function("ping", ping)
    assert adapter.get_client_function("ping") is ping

    adapter.delete_client_function("ping")
    assert adapter.get_client_function("ping") is FakeRedis.ping


def test_set_client_function_with_explicit_alias(adapter: FakeRedisAdapter):
    adapter.set_client_function("fetch", FunctionOverride.alias("get"))

    client: Any = adapter.create_client()
    _ = client.set("test", "value")

    assert client.get_function("fetch") is FakeRedis.get
    assert client.fetch("test") == b"value"


def test_store_errors_pass_through(adapter: FakeRedisAdapter, client: Any):
    _ = client.set("test", "value")

    with pytest.raises(ResponseError) as exc_info:
        _ = client.lpush("test", "item")

    assert isinstance(exc_info.value, adapter.reply_error)
    assert adapter.is_moved_error(exc_info.value) is False


def test_adapter_moved_error_helpers(adapter: FakeRedisAdapter):
    error = ReplyError("MOVED 14190 127.0.0.1:6379")

    assert adapter.is_moved_error(error) is True
    assert adapter.resolve_host_and_port_from_moved_error(error) == ("127.0.0.1", "6379")

    with pytest.raises(MalformedMovedError):
        _ = adapter.resolve_host_and_port_from_moved_error(ReplyError("ERR something else"))


@pytest.mark.usefixtures("clean_default_adapter")
def test_module_functions_use_default_adapter():
    def ping(self: Any) -> str:
        return "default"

    redis_mock_adapter.set_client_function("ping", ping)

    assert redis_mock_adapter.get_client_function("ping") is ping

    client: Any = redis_mock_adapter.create_client({"host": "h", "port": 1234})

    assert client.get_adapter() is redis_mock_adapter.default_adapter
    assert client.ping() == "default"
    assert client.resolve_host_and_port() == ("h", 1234)

    redis_mock_adapter.delete_client_function("ping")

    assert redis_mock_adapter.get_client_function("ping") is FakeRedis.ping
    assert redis_mock_adapter.create_client().ping() is True  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]
    assert client.ping() == "default"


def test_module_moved_error_functions():
    error = {"message": "MOVED 14190 127.0.0.1:6379"}

    assert redis_mock_adapter.is_moved_error(error) is True
    assert redis_mock_adapter.resolve_host_and_port_from_moved_error(error) == ("127.0.0.1", "6379")
