"""
Functions supplied to the adapted client class.

The store is subclassed rather than patched: `build_client_class` checks each required client function against the
store class and adds only the ones it is missing, so every client built from the subclass exposes the full client
surface while the store's own commands stay untouched.
"""

import inspect
import logging
from types import MethodType
from typing import TYPE_CHECKING, Any

from redis_mock_adapter.constants import ADAPTEE, CLIENT_EVENTS, DEFAULT_HOST, DEFAULT_PORT
from redis_mock_adapter.events import ClientEvents
from redis_mock_adapter.types import REQUIRED_CLIENT_FUNCTIONS, ClientFunction, ClientOptions, EventListener, FunctionOverride

if TYPE_CHECKING:
    from redis_mock_adapter.adapter import BaseClientAdapter

logger = logging.getLogger(__name__)


class ClientAdapterMixin:
    """Client functions the adapter supplies when the store does not implement them."""

    _adapter: "BaseClientAdapter"
    _options: ClientOptions | None
    _events: ClientEvents
    _function_overrides: dict[str, ClientFunction]
    manually_closing: bool

    def end(self, *args: Any, **kwargs: Any) -> Any:
        """Close the client through `quit`.

        `quit` takes no flush flag, so a leading non-callable argument is dropped. A callback passed as the first
        argument is forwarded with everything else unchanged.
        """
        if not (args and callable(args[0])):
            args = args[1:]

        self.manually_closing = True

        return self.quit(*args, **kwargs)  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]

    def get_adapter(self) -> "BaseClientAdapter":
        return self._adapter

    def get_options(self) -> ClientOptions | None:
        """Return the options passed to `create_client`, or None if none were passed. See `resolve_host_and_port` for defaults."""
        return self._options

    def is_closing(self) -> bool:
        return self.manually_closing

    def resolve_host_and_port(self) -> tuple[str, int | str]:
        if self._options is None:
            return (DEFAULT_HOST, DEFAULT_PORT)

        return (self._options.get("host") or DEFAULT_HOST, self._options.get("port") or DEFAULT_PORT)

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
        listeners = (on_connect, on_ready, on_reconnecting, on_error, on_client_error, on_end, on_close)

        for event, listener in zip(CLIENT_EVENTS, listeners):
            if callable(listener):
                _ = self.on(event, listener)

    def on(self, event: str, listener: EventListener) -> "ClientAdapterMixin":
        self._events.subscribe(event=event, listener=listener)
        return self

    def emit(self, event: str, *args: Any) -> bool:
        return self._events.publish(event, *args)

    def off(self, event: str, listener: EventListener) -> "ClientAdapterMixin":
        _ = self._events.unsubscribe(event=event, listener=listener)
        return self

    def listeners(self, event: str) -> list[EventListener]:
        return self._events.listeners(event=event)

    def get_function(self, name: str) -> ClientFunction | None:
        if name in self._function_overrides:
            return self._function_overrides[name]

        return self._adapter.builtin_functions.get(name)

    def set_function(self, name: str, function: ClientFunction | FunctionOverride) -> None:
        """Override `name` on this client and on every client the adapter builds afterward."""
        override: FunctionOverride = self._adapter.to_function_override(name=name, function=function)
        self._adapter.registry.set_function(name=name, override=override)

        resolved: ClientFunction | None = override.function

        if override.alias_of is not None:
            if override.alias_of != name and override.alias_of in self._function_overrides:
                resolved = self._function_overrides[override.alias_of]
            else:
                resolved = self._adapter.builtin_functions.get(override.alias_of)

        if resolved is not None:
            install_function(client=self, name=name, function=resolved)

    def delete_function(self, name: str) -> None:
        """Remove any override of `name` from this client and from every client the adapter builds afterward."""
        self._adapter.registry.delete_function(name=name)
        uninstall_function(client=self, name=name)


def has_client_function(client_class: type[Any], name: str) -> bool:
    return callable(getattr(client_class, name, None))


def build_client_class(store_class: type[Any], adaptee: str = ADAPTEE) -> type[Any]:
    """Subclass `store_class`, supplying the required client functions it does not implement."""
    supplied: dict[str, Any] = {}

    for name in REQUIRED_CLIENT_FUNCTIONS:
        if has_client_function(client_class=store_class, name=name):
            continue

        if name == "end":
            logger.info("Adding missing `end` function to `%s` client", adaptee)

        supplied[name] = vars(ClientAdapterMixin)[name]

    return type(f"Adapted{store_class.__name__}", (store_class,), supplied)


def capture_builtin_functions(client_class: type[Any]) -> dict[str, ClientFunction]:
    """Return the plain functions defined on `client_class` and its bases, keyed by name."""
    functions: dict[str, ClientFunction] = {}

    for klass in reversed(client_class.__mro__):
        for name, value in vars(klass).items():
            if name.startswith("__"):
                continue

            if inspect.isfunction(value):
                functions[name] = value

    return functions


def adapt_client(client: Any, adapter: "BaseClientAdapter", options: ClientOptions | None) -> None:
    """Initialise the state the supplied client functions rely on."""
    if getattr(client, "_options", None) is None:
        client._options = options

    client._adapter = adapter
    client._events = ClientEvents()
    client._function_overrides = {}
    client.manually_closing = False


def install_function(client: Any, name: str, function: ClientFunction) -> None:
    """Install `function` as `name` on a single client.

    Plain functions are bound to the client like methods; other callables are installed as they are.
    """
    client._function_overrides[name] = function

    setattr(client, name, MethodType(function, client) if inspect.isfunction(function) else function)


def uninstall_function(client: Any, name: str) -> None:
    """Remove an installed override of `name`. Attributes that are not overrides are left alone."""
    if name not in client._function_overrides:
        return

    del client._function_overrides[name]
    _ = vars(client).pop(name, None)
