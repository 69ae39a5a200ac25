"""Grid events and rule messages, dispatched to listeners owned by a solve session."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Flag
from typing import Callable, Dict, List, Optional

import numpy as np


class EventType(Flag):
    """Kinds of grid events. Members can be or'ed to register for several."""
    INIT = 1
    CHANGE = 2
    SOLVED = 4


@dataclass
class GridEvent:
    """
    State of a grid when an event fires.

    ``candidates[r, c, v]`` is ``v + 1`` if value ``v + 1`` is still possible
    in cell (r, c), 0 otherwise. ``resolved`` counts the cells reduced to a
    single value.
    """
    grid_id: int
    candidates: np.ndarray
    resolved: int

    @property
    def size(self) -> int:
        return self.candidates.shape[0]

    def values(self) -> np.ndarray:
        """Resolved value of each cell, 0 where several candidates remain."""
        single = np.count_nonzero(self.candidates, axis=2) == 1
        return np.where(single, self.candidates.max(axis=2), 0)

    @classmethod
    def from_values(cls, grid_id: int, values: np.ndarray) -> GridEvent:
        """Event for a plain integer grid: a filled cell has its value as only candidate, an empty one has none."""
        values = np.asarray(values, dtype=np.int64)
        n = values.shape[0]
        candidates = np.zeros((n, n, n), dtype=np.int64)
        rows, cols = np.nonzero(values)
        candidates[rows, cols, values[rows, cols] - 1] = values[rows, cols]
        return cls(grid_id=grid_id, candidates=candidates, resolved=len(rows))


@dataclass
class Message:
    """Human-readable explanation of a rule; verbosity 0 is always shown."""
    grid_id: int
    text: str
    verbosity: int


GridHandler = Callable[[GridEvent], None]
MessageHandler = Callable[[Message], None]


class SolveSession:
    """
    Listener collections for one or more solve calls.

    Handlers are called synchronously in registration order. Registering the
    same handler twice for an event type has no effect.
    """

    def __init__(self):
        self._grid_handlers: Dict[EventType, List[GridHandler]] = {
            EventType.INIT: [],
            EventType.CHANGE: [],
            EventType.SOLVED: [],
        }
        self._message_handlers: List[MessageHandler] = []

    def add_grid_handler(self, event_types: EventType, handler: GridHandler) -> None:
        for event_type, handlers in self._grid_handlers.items():
            if event_type & event_types and handler not in handlers:
                handlers.append(handler)

    def remove_grid_handler(self, event_types: EventType, handler: Optional[GridHandler] = None) -> None:
        """Remove ``handler`` from the given event types, or every handler if None."""
        for event_type, handlers in self._grid_handlers.items():
            if event_type & event_types:
                handlers[:] = [h for h in handlers if handler is not None and h != handler]

    def add_message_handler(self, handler: MessageHandler) -> None:
        if handler not in self._message_handlers:
            self._message_handlers.append(handler)

    def remove_message_handler(self, handler: Optional[MessageHandler] = None) -> None:
        self._message_handlers[:] = [
            h for h in self._message_handlers if handler is not None and h != handler
        ]

    def clear(self) -> None:
        """Remove all handlers."""
        self.remove_grid_handler(EventType.INIT | EventType.CHANGE | EventType.SOLVED)
        self.remove_message_handler()

    @property
    def wants_messages(self) -> bool:
        return bool(self._message_handlers)

    def wants(self, event_type: EventType) -> bool:
        return bool(self._grid_handlers[event_type])

    def emit_grid(self, event_type: EventType, event: GridEvent) -> None:
        for handler in list(self._grid_handlers[event_type]):
            handler(event)

    def emit_message(self, grid_id: int, text: str, verbosity: int = 0) -> None:
        if not self._message_handlers:
            return
        message = Message(grid_id=grid_id, text=text, verbosity=verbosity)
        for handler in list(self._message_handlers):
            handler(message)
