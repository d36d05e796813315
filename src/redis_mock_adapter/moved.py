"""
Helpers for "moved" reply errors, which redirect a key to another host and port.

A moved error message has the shape `MOVED <slot> <host>:<port>`, e.g. `MOVED 14190 127.0.0.1:6379`.
"""

from collections.abc import Mapping
from typing import Any

from redis_mock_adapter.constants import ADAPTEE, MOVED_ERROR_PREFIX
from redis_mock_adapter.errors import MalformedMovedError


def get_error_message(error: Any) -> str | None:
    """Return the message of an exception, a mapping with a "message" key or an object with a `message` attribute."""
    message: Any

    if isinstance(error, BaseException):
        message = str(error)
    elif isinstance(error, Mapping):
        message = error.get("message")  # pyright: ignore[reportUnknownMemberType]
    else:
        message = getattr(error, "message", None)

    return message if isinstance(message, str) else None


def is_moved_error(error: Any) -> bool:
    """Return True if the error says the key was moved to a new host and port."""
    message: str | None = get_error_message(error)
    return message is not None and message.startswith(MOVED_ERROR_PREFIX)


def resolve_host_and_port_from_moved_error(error: Any, adaptee: str = ADAPTEE) -> tuple[str, str]:
    """Extract the new host and port from a moved error.

    Args:
        error: An error raised by a client that indicates the key has moved.
        adaptee: The name of the store that raised the error, used in the failure message.

    Returns:
        The host and port, both as strings.

    Raises:
        MalformedMovedError: If the error is not a moved error or its address has no port.
    """
    message: str | None = get_error_message(error)

    if message is None or not message.startswith(MOVED_ERROR_PREFIX):
        raise MalformedMovedError(adaptee=adaptee, error=error)

    address: str = message[message.rfind(" ") + 1 :]

    host, separator, port = address.rpartition(":")

    if not separator:
        raise MalformedMovedError(adaptee=adaptee, error=error)

    return (host, port)
