import logging
import threading
from collections.abc import Mapping

from redis_mock_adapter.errors import InvalidOverrideError
from redis_mock_adapter.types import ClientFunction, FunctionOverride, OverrideAction, OverrideActionType

logger = logging.getLogger(__name__)


def to_function_override(name: str, function: ClientFunction | FunctionOverride, builtins: Mapping[str, ClientFunction]) -> FunctionOverride:
    """Convert a value passed to `set_function` into a FunctionOverride.

    A callable that is one of the built-in client functions becomes an alias to the slot it came from, so that
    clients resolve it against that slot when they are built. Any other callable becomes a fixed override.

    Args:
        name: The client function slot being overridden.
        function: A callable or an explicit FunctionOverride.
        builtins: The built-in client functions, keyed by slot.

    Raises:
        InvalidOverrideError: If the value is not callable, or is an alias to a slot with no built-in function,
            or is an alias that also carries a function.
    """
    if isinstance(function, FunctionOverride):
        override = function
    elif not callable(function):
        raise InvalidOverrideError(name=name, value=function)
    elif builtins.get(name) is function:
        override = FunctionOverride.alias(name)
    else:
        override = next(
            (FunctionOverride.alias(builtin_name) for builtin_name, builtin in builtins.items() if builtin is function),
            FunctionOverride.fixed(function),
        )

    if override.alias_of is not None and override.alias_of not in builtins:
        raise InvalidOverrideError(name=name, value=override.alias_of, message="An alias override must name a built-in client function.")

    if override.is_alias and override.function is not None:
        raise InvalidOverrideError(name=name, value=override.function, message="An alias override cannot also carry a function.")

    if not override.is_alias and not callable(override.function):
        raise InvalidOverrideError(name=name, value=override.function)

    return override


def resolve_override(name: str, overrides: Mapping[str, FunctionOverride], builtins: Mapping[str, ClientFunction]) -> ClientFunction | None:
    """Resolve the function a slot uses given a table of overrides.

    Aliases take the override of their target slot when there is one and the target's built-in otherwise. Alias
    chains are followed; a slot seen twice resolves to its built-in.
    """
    current: FunctionOverride | None = overrides.get(name)
    seen: set[str] = {name}

    while current is not None and current.alias_of is not None:
        target: str = current.alias_of

        if target in seen or target not in overrides:
            return builtins.get(target)

        seen.add(target)
        current = overrides[target]

    if current is None:
        return builtins.get(name)

    return current.function


class FunctionOverrideRegistry:
    """Ordered log of client function overrides.

    Overrides only reach clients built after they are recorded: each new client replays the whole log in order, so
    a later action for a slot supersedes earlier ones. Clients that already exist are not changed.

    The log, the active overrides and the deleted slots are guarded by a single lock.
    """

    def __init__(self) -> None:
        self._actions: list[OverrideAction] = []
        self._active: dict[str, FunctionOverride] = {}
        self._deleted: set[str] = set()
        self._lock = threading.RLock()

    @property
    def actions(self) -> list[OverrideAction]:
        with self._lock:
            return list(self._actions)

    @property
    def active(self) -> dict[str, FunctionOverride]:
        with self._lock:
            return dict(self._active)

    def set_function(self, name: str, override: FunctionOverride) -> None:
        with self._lock:
            self._actions.append(OverrideAction(action=OverrideActionType.SET, name=name, override=override))
            self._active[name] = override
            self._deleted.discard(name)

        logger.debug("Recorded override of client function %r (alias of %r)", name, override.alias_of)

    def delete_function(self, name: str) -> None:
        with self._lock:
            self._actions.append(OverrideAction(action=OverrideActionType.DELETE, name=name))
            _ = self._active.pop(name, None)
            self._deleted.add(name)

        logger.debug("Recorded deletion of client function %r", name)

    def get_override(self, name: str) -> FunctionOverride | None:
        with self._lock:
            return self._active.get(name)

    def is_deleted(self, name: str) -> bool:
        with self._lock:
            return name in self._deleted

    def resolve(self, name: str, builtins: Mapping[str, ClientFunction]) -> ClientFunction | None:
        """Return the function a newly built client would use for `name`."""
        with self._lock:
            return resolve_override(name=name, overrides=self._active, builtins=builtins)

    def materialize(self, builtins: Mapping[str, ClientFunction]) -> dict[str, ClientFunction]:
        """Replay the log and return the overridden functions a new client should carry."""
        replayed: dict[str, FunctionOverride] = {}

        with self._lock:
            action_count: int = len(self._actions)

            for entry in self._actions:
                if entry.action is OverrideActionType.SET and entry.override is not None:
                    replayed[entry.name] = entry.override
                else:
                    _ = replayed.pop(entry.name, None)

        functions: dict[str, ClientFunction] = {}

        for name in replayed:
            if (function := resolve_override(name=name, overrides=replayed, builtins=builtins)) is not None:
                functions[name] = function

        logger.debug("Replayed %d override actions into %d client functions", action_count, len(functions))

        return functions

    def clear(self) -> None:
        with self._lock:
            self._actions.clear()
            self._active.clear()
            self._deleted.clear()
