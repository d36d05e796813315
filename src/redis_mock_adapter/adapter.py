import logging
from abc import ABC, abstractmethod
from typing import Any

from fakeredis import FakeRedis
from typing_extensions import override

from redis_mock_adapter import moved
from redis_mock_adapter.client import adapt_client, build_client_class, capture_builtin_functions, has_client_function, install_function
from redis_mock_adapter.constants import ADAPTEE, DEFAULT_HOST, DEFAULT_PORT, ReplyError
from redis_mock_adapter.registry import FunctionOverrideRegistry, to_function_override
from redis_mock_adapter.types import ClientFunction, ClientOptions, FunctionOverride, RedisClient

logger = logging.getLogger(__name__)


class BaseClientAdapter(ABC):
    """Abstract base class for adapters that make a mock store look like a Redis client.

    When using this ABC, your implementation will:
    1. Name the store it adapts with `adaptee`
    2. Return the store class with `store_class`

    The adapter subclasses the store once, supplying the client functions the store is missing, and captures the
    subclass's built-in functions at that point. Client function overrides are kept in a FunctionOverrideRegistry
    and replayed onto each client the adapter builds.
    """

    default_host: str = DEFAULT_HOST
    default_port: int = DEFAULT_PORT
    reply_error: type[Exception] = ReplyError

    def __init__(self, registry: FunctionOverrideRegistry | None = None) -> None:
        """Initialize the adapter.

        Args:
            registry: The override registry to use. Defaults to a new, empty registry.
        """
        self.registry: FunctionOverrideRegistry = registry if registry is not None else FunctionOverrideRegistry()
        self.client_class: type[Any] = build_client_class(store_class=self.store_class, adaptee=self.adaptee)
        self.builtin_functions: dict[str, ClientFunction] = capture_builtin_functions(client_class=self.client_class)

    @property
    @abstractmethod
    def adaptee(self) -> str:
        """The name of the store being adapted."""
        ...

    @property
    @abstractmethod
    def store_class(self) -> type[Any]:
        """The store class clients are built from."""
        ...

    def create_client(self, options: ClientOptions | None = None) -> RedisClient:
        """Create a new client.

        Args:
            options: The options to construct the client with. Defaults to the default host and port.

        Returns:
            A store instance exposing the full client surface, with every recorded override applied.
        """
        client: Any = self.client_class(**(options or {}))

        adapt_client(client=client, adapter=self, options=options)

        functions: dict[str, ClientFunction] = self.registry.materialize(builtins=self.builtin_functions)

        for name, function in functions.items():
            install_function(client=client, name=name, function=function)

        logger.debug("Created %s client with %d overridden functions", self.adaptee, len(functions))

        return client

    def supports(self, name: str) -> bool:
        """Return True if clients built by this adapter provide `name`."""
        return has_client_function(client_class=self.client_class, name=name)

    def to_function_override(self, name: str, function: ClientFunction | FunctionOverride) -> FunctionOverride:
        return to_function_override(name=name, function=function, builtins=self.builtin_functions)

    def get_client_function(self, name: str) -> ClientFunction | None:
        """Return the function clients built from now on will use for `name`."""
        return self.registry.resolve(name=name, builtins=self.builtin_functions)

    def set_client_function(self, name: str, function: ClientFunction | FunctionOverride) -> None:
        """Override `name` on every client built from now on. Existing clients are not changed."""
        self.registry.set_function(name=name, override=self.to_function_override(name=name, function=function))

    def delete_client_function(self, name: str) -> None:
        """Remove any override of `name` from every client built from now on. Existing clients are not changed."""
        self.registry.delete_function(name=name)

    def is_moved_error(self, error: Any) -> bool:
        return moved.is_moved_error(error)

    def resolve_host_and_port_from_moved_error(self, error: Any) -> tuple[str, str]:
        return moved.resolve_host_and_port_from_moved_error(error, adaptee=self.adaptee)


class FakeRedisAdapter(BaseClientAdapter):
    """Adapter for `fakeredis.FakeRedis` clients."""

    @property
    @override
    def adaptee(self) -> str:
        return ADAPTEE

    @property
    @override
    def store_class(self) -> type[Any]:
        return FakeRedis


default_adapter: FakeRedisAdapter = FakeRedisAdapter()


def create_client(options: ClientOptions | None = None) -> RedisClient:
    return default_adapter.create_client(options=options)


def get_client_function(name: str) -> ClientFunction | None:
    return default_adapter.get_client_function(name=name)


def set_client_function(name: str, function: ClientFunction | FunctionOverride) -> None:
    default_adapter.set_client_function(name=name, function=function)


def delete_client_function(name: str) -> None:
    default_adapter.delete_client_function(name=name)


def is_moved_error(error: Any) -> bool:
    return default_adapter.is_moved_error(error)


def resolve_host_and_port_from_moved_error(error: Any) -> tuple[str, str]:
    return default_adapter.resolve_host_and_port_from_moved_error(error)
