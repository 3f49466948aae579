"""An event handler that greets a person by name and age."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_NAME_KEY = "what is your name?"
_AGE_KEY = "How old are you?"


@dataclass(frozen=True)
class Event:
    """Incoming event: a person's name and age."""

    name: str = ""
    age: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Event:
        return cls(str(payload.get(_NAME_KEY, "")), int(payload.get(_AGE_KEY, 0)))

    def to_dict(self) -> dict[str, Any]:
        return {_NAME_KEY: self.name, _AGE_KEY: self.age}


@dataclass(frozen=True)
class Response:
    """Outgoing answer."""

    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"Answer:": self.message}


def handle_lambda_event(event: Event | Mapping[str, Any]) -> Response:
    """Answer an event with a sentence about the person's age."""
    if isinstance(event, Mapping):
        event = Event.from_dict(event)
    return Response(f"{event.name} is {event.age} years old!")