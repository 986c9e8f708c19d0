from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class MessageLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class UserMessage:
    text: str
    level: MessageLevel = MessageLevel.INFO


class MessageChannel:
    """
    One-shot notifications from view-models to whatever renders them.
    Messages are delivered to subscribers immediately and also queued
    until drained, so a UI that attaches late still sees them once.
    """

    def __init__(self) -> None:
        self._pending: deque[UserMessage] = deque()
        self._subscribers: list[Callable[[UserMessage], None]] = []

    def subscribe(self, callback: Callable[[UserMessage], None]) -> None:
        self._subscribers.append(callback)

    def emit(self, text: str, level: MessageLevel = MessageLevel.INFO) -> UserMessage:
        message = UserMessage(text=text, level=level)
        self._pending.append(message)
        for callback in self._subscribers:
            callback(message)
        return message

    def drain(self) -> list[UserMessage]:
        messages = list(self._pending)
        self._pending.clear()
        return messages
