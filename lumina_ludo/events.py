from __future__ import annotations

from abc import abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Protocol

from loguru import logger

from .config import config
from .types import Color, EventKind


@dataclass(slots=True, frozen=True)
class GameEvent:
    kind: EventKind
    player_index: int
    sender: str  # display name of the player the event is about
    color: Optional[Color]
    text: str
    data: Dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    """Receiver for observational engine events."""

    @abstractmethod
    def emit(self, event: GameEvent) -> None:
        pass


class LoggingSink:
    """Writes every event to the loguru logger."""

    def __init__(self, level: str = "INFO") -> None:
        self.level = level

    def emit(self, event: GameEvent) -> None:
        logger.log(self.level, f"[{event.kind.value}] {event.sender}: {event.text}")


class EventLog:
    """Bounded chat-style log of recent events, newest last."""

    def __init__(self, maxlen: int = config.EVENT_LOG_SIZE) -> None:
        self._events: Deque[GameEvent] = deque(maxlen=maxlen)

    def emit(self, event: GameEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> List[GameEvent]:
        return list(self._events)

    def of_kind(self, kind: EventKind) -> List[GameEvent]:
        return [e for e in self._events if e.kind is kind]

    def lines(self) -> List[str]:
        return [f"{e.sender}: {e.text}" for e in self._events]

    def clear(self) -> None:
        self._events.clear()


class CompositeSink:
    """Fans one event out to several sinks."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = list(sinks)

    def add(self, sink: EventSink) -> None:
        self.sinks.append(sink)

    def emit(self, event: GameEvent) -> None:
        for sink in self.sinks:
            sink.emit(event)
