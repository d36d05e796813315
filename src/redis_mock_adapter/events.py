from collections import defaultdict

from redis_mock_adapter.types import EventListener


class ClientEvents:
    """Listener table for client lifecycle events.

    The store has no event stream of its own, so adapted clients carry one of these. It only calls the listeners
    of events that are emitted on it.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event: str, listener: EventListener) -> None:
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def unsubscribe(self, event: str, listener: EventListener) -> bool:
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)
            return True

        return False

    def publish(self, event: str, *args: object) -> bool:
        """Call every listener of `event` with `args`, returning True if there were any."""
        listeners: list[EventListener] = list(self._listeners[event])

        for listener in listeners:
            _ = listener(*args)

        return bool(listeners)

    def listeners(self, event: str) -> list[EventListener]:
        return list(self._listeners[event])
