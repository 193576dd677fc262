"""
Event bus for round notifications.

Transitions, the engine and the table report what happened to a round
(the opening deal, each card, busts, the dealer's draws, the result) to one
shared emitter. A listener that raises is logged and skipped; the round
that emitted the event carries on.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, Union
import logging
import threading

logger = logging.getLogger("twentyone.events")

EventKey = Union[str, Enum]


def _event_name(event_type: EventKey) -> str:
    if isinstance(event_type, Enum):
        return event_type.name
    return event_type


class EventEmitter:
    """
    Dispatches round events to listeners.

    Listeners registered with :meth:`on` receive the event data; listeners
    registered with :meth:`on_any` receive an ``(event_name, data)`` tuple.
    An ``EngineEventType`` member and its name address the same listeners.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)
        self._global_listeners: List[Callable] = []
        self._listener_lock = threading.RLock()

    def on(self, event_type: EventKey, callback: Callable) -> None:
        """Call ``callback(data)`` each time ``event_type`` is emitted."""
        with self._listener_lock:
            self._listeners[_event_name(event_type)].append(callback)

    def on_any(self, callback: Callable) -> None:
        """Call ``callback((event_name, data))`` for every event."""
        with self._listener_lock:
            self._global_listeners.append(callback)

    def emit(self, event_type: EventKey, data: Dict[str, Any]) -> None:
        """
        Deliver an event to its listeners, then to the catch-all listeners.

        Args:
            event_type: An ``EngineEventType`` or its name
            data: Event payload
        """
        name = _event_name(event_type)

        with self._listener_lock:
            calls: List[Tuple[Callable, Any]] = [
                (callback, data) for callback in self._listeners.get(name, ())
            ]
            calls.extend(
                (callback, (name, data)) for callback in self._global_listeners
            )

        # Listeners may emit or subscribe themselves, so run them unlocked
        for callback, payload in calls:
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in event handler for {name}: {e}", exc_info=True)


class EventBus:
    """Process-wide holder of the shared :class:`EventEmitter`."""

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Events emitted over the life of a round, in the order a round can
    produce them: ROUND_STARTED, then CARD_DEALT / PLAYER_ACTION /
    HAND_BUSTED for hits, DEALER_ACTION for the dealer's play, and finally
    ROUND_ENDED. SHUFFLE comes from the engine; GAME_CREATED and
    ACTION_REJECTED come from the table.
    """

    ROUND_STARTED = "round_started"
    CARD_DEALT = "card_dealt"
    PLAYER_ACTION = "player_action"
    HAND_BUSTED = "hand_busted"
    DEALER_ACTION = "dealer_action"
    ROUND_ENDED = "round_ended"
    SHUFFLE = "shuffle"
    GAME_CREATED = "game_created"
    ACTION_REJECTED = "action_rejected"
