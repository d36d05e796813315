from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, TypedDict, runtime_checkable

from redis_mock_adapter.errors import InvalidOverrideError

if TYPE_CHECKING:
    from redis_mock_adapter.adapter import BaseClientAdapter

ClientFunction = Callable[..., Any]
EventListener = Callable[..., Any]


class ClientOptions(TypedDict, total=False):
    """Options used to construct a client. Keys other than host and port are passed to the store unchanged."""

    host: str
    port: int


class OverrideActionType(str, Enum):
    SET = "set"
    DELETE = "delete"


@dataclass(frozen=True)
class FunctionOverride:
    """The value recorded for a client function slot.

    A fixed override always uses `function`. An alias override uses whatever the slot named by `alias_of`
    resolves to when a client is built.
    """

    function: ClientFunction | None = field(default=None)
    alias_of: str | None = field(default=None)

    @classmethod
    def fixed(cls, function: ClientFunction) -> "FunctionOverride":
        return cls(function=function)

    @classmethod
    def alias(cls, name: str) -> "FunctionOverride":
        if not name:
            raise InvalidOverrideError(name=name, value=name, message="An alias override must name a client function.")

        return cls(alias_of=name)

    @property
    def is_alias(self) -> bool:
        return self.alias_of is not None


@dataclass(frozen=True)
class OverrideAction:
    """A single entry in the function override log."""

    action: OverrideActionType
    name: str
    override: FunctionOverride | None = None


@runtime_checkable
class RedisClient(Protocol):
    """Protocol defining the client surface that adapted clients expose on top of the store."""

    manually_closing: bool

    def end(self, *args: Any, **kwargs: Any) -> Any:
        """Close the client, dropping a leading flush flag."""
        ...

    def quit(self, *args: Any, **kwargs: Any) -> Any:
        """Ask the store to close the connection."""
        ...

    def get_adapter(self) -> "BaseClientAdapter":
        """Return the adapter that built this client."""
        ...

    def get_options(self) -> ClientOptions | None:
        """Return the options this client was constructed with."""
        ...

    def is_closing(self) -> bool:
        """Return True once the client has been asked to close."""
        ...

    def resolve_host_and_port(self) -> tuple[str, int | str]:
        """Return the host and port of this client, falling back to the defaults."""
        ...

    def add_event_listeners(
        self,
        on_connect: EventListener | None = None,
        on_ready: EventListener | None = None,
        on_reconnecting: EventListener | None = None,
        on_error: EventListener | None = None,
        on_client_error: EventListener | None = None,
        on_end: EventListener | None = None,
        on_close: EventListener | None = None,
    ) -> None:
        """Subscribe the given callables to the client lifecycle events."""
        ...

    def on(self, event: str, listener: EventListener) -> "RedisClient":
        """Subscribe a listener to an event."""
        ...

    def off(self, event: str, listener: EventListener) -> "RedisClient":
        """Unsubscribe a listener from an event."""
        ...

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of an event, returning True if there were any."""
        ...

    def listeners(self, event: str) -> list[EventListener]:
        """List the listeners of an event."""
        ...

    def get_function(self, name: str) -> ClientFunction | None:
        """Return the active implementation of a client function."""
        ...

    def set_function(self, name: str, function: "ClientFunction | FunctionOverride") -> None:
        """Override a client function on this client and on clients created afterward."""
        ...

    def delete_function(self, name: str) -> None:
        """Remove an override from this client and from clients created afterward."""
        ...


REQUIRED_CLIENT_FUNCTIONS: tuple[str, ...] = (
    "end",
    "get_adapter",
    "get_options",
    "is_closing",
    "resolve_host_and_port",
    "add_event_listeners",
    "on",
    "off",
    "emit",
    "listeners",
    "get_function",
    "set_function",
    "delete_function",
)
