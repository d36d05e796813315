"""Redis Mock Adapter - Makes a fakeredis client look like a real Redis client in tests."""

from .adapter import (
    BaseClientAdapter,
    FakeRedisAdapter,
    create_client,
    default_adapter,
    delete_client_function,
    get_client_function,
    is_moved_error,
    resolve_host_and_port_from_moved_error,
    set_client_function,
)
from .constants import ADAPTEE, DEFAULT_HOST, DEFAULT_PORT, ReplyError
from .errors import InvalidOverrideError, MalformedMovedError, RedisMockAdapterError
from .registry import FunctionOverrideRegistry
from .types import ClientOptions, FunctionOverride, RedisClient

__all__ = [
    "ADAPTEE",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "BaseClientAdapter",
    "ClientOptions",
    "FakeRedisAdapter",
    "FunctionOverride",
    "FunctionOverrideRegistry",
    "InvalidOverrideError",
    "MalformedMovedError",
    "RedisClient",
    "RedisMockAdapterError",
    "ReplyError",
    "create_client",
    "default_adapter",
    "delete_client_function",
    "get_client_function",
    "is_moved_error",
    "resolve_host_and_port_from_moved_error",
    "set_client_function",
]
