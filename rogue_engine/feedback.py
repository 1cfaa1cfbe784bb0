"""
Emoji Rogue Combat Engine: Feedback Stream
Transient floating text and VFX cues for the presentation layer.
Each event carries an expiry on the virtual clock and is pruned after it.
"""

from __future__ import annotations
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .config import EngineConfig
from .models import CardTheme


class FeedbackKind(Enum):
    FLOATING_TEXT = "floating_text"
    VFX = "vfx"
    SHAKE = "shake"
    FLASH = "flash"


# Colours the renderer uses for floating numbers
DAMAGE_COLOR = "red"
HEAL_COLOR = "green"
BLOCK_COLOR = "blue"
ENERGY_COLOR = "yellow"
STATUS_COLOR = "purple"
INFO_COLOR = "white"


@dataclass
class FeedbackEvent:
    event_id: int
    kind: FeedbackKind
    target_id: str
    created_at: int
    expires_at: int
    text: str = ""
    color: str = INFO_COLOR
    theme: Optional[CardTheme] = None
    origin: Optional[tuple[float, float]] = None   # Screen point a projectile leaves from

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "kind": self.kind.value,
            "target_id": self.target_id,
            "text": self.text,
            "color": self.color,
            "theme": self.theme.value if self.theme else None,
            "origin": list(self.origin) if self.origin else None,
            "expires_at": self.expires_at,
        }


class FeedbackFeed:
    def __init__(self, clock: Callable[[], int], config: Optional[EngineConfig] = None):
        self._clock = clock
        self.config = config or EngineConfig()
        self._events: list[FeedbackEvent] = []
        self._ids = itertools.count(1)

    def _lifetime(self, kind: FeedbackKind) -> int:
        if kind == FeedbackKind.FLOATING_TEXT:
            return self.config.floating_text_ms
        if kind == FeedbackKind.SHAKE:
            return self.config.shake_ms
        return self.config.vfx_ms

    def emit(self, kind: FeedbackKind, target_id: str, text: str = "", color: str = INFO_COLOR,
             theme: Optional[CardTheme] = None,
             origin: Optional[tuple[float, float]] = None) -> FeedbackEvent:
        now = self._clock()
        event = FeedbackEvent(
            event_id=next(self._ids),
            kind=kind,
            target_id=target_id,
            created_at=now,
            expires_at=now + self._lifetime(kind),
            text=text,
            color=color,
            theme=theme,
            origin=origin,
        )
        self._events.append(event)
        return event

    def text(self, target_id: str, text: str, color: str = INFO_COLOR) -> FeedbackEvent:
        return self.emit(FeedbackKind.FLOATING_TEXT, target_id, text=text, color=color)

    def active(self, now: Optional[int] = None) -> list[FeedbackEvent]:
        """Prune expired events and return what is still on screen."""
        if now is None:
            now = self._clock()
        self._events = [e for e in self._events if e.expires_at > now]
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()
