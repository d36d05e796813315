ExtraInfoType = dict[str, str | int | float | bool | None]


class RedisMockAdapterError(Exception):
    """Base exception for all Redis mock adapter errors."""

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        message_parts: list[str] = []

        if message:
            message_parts.append(message)

        if extra_info:
            extra_info_str = ";".join(f"{k}: {v}" for k, v in extra_info.items())
            if message:
                extra_info_str = "(" + extra_info_str + ")"

            message_parts.append(extra_info_str)

        super().__init__(": ".join(message_parts))


class MalformedMovedError(RedisMockAdapterError):
    """Raised when a "moved" host and port is requested from an error that is not a moved reply error."""

    def __init__(self, adaptee: str, error: object):
        super().__init__(
            message=f'Unexpected {adaptee} client "moved" ReplyError',
            extra_info={"error": repr(error)},
        )


class InvalidOverrideError(RedisMockAdapterError):
    """Raised when a client function override is neither a callable nor a FunctionOverride."""

    def __init__(self, name: str, value: object, message: str | None = None):
        super().__init__(
            message=message or "A client function override must be callable or a FunctionOverride.",
            extra_info={"name": name, "type": type(value).__name__},
        )
