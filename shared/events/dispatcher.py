"""
Synchronous, explicitly wired event dispatcher.

Listeners are registered by event type in one place (see
``services.scheduler.src.bootstrap.build_event_dispatcher``) rather than
discovered at runtime.
"""
import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List, Type

logger = logging.getLogger(__name__)

Listener = Callable[[object], None]


class EventDispatcher:
    """Calls every listener registered for an event's type, in registration order."""

    def __init__(self):
        self._listeners: DefaultDict[Type, List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: Type, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def listeners_for(self, event_type: Type) -> List[Listener]:
        return list(self._listeners.get(event_type, []))

    def dispatch(self, event: object) -> None:
        """
        Deliver ``event`` to its listeners.

        A listener exception propagates to the emitter so it can treat the
        emission as failed; listeners after the failing one are not called.
        """
        listeners = self.listeners_for(type(event))
        if not listeners:
            logger.debug(f"No listeners registered for {type(event).__name__}")
        for listener in listeners:
            listener(event)
