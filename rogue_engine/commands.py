"""
Input commands. The input layer enqueues these; the engine drains the
queue synchronously and dispatches each one to the matching action.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union


Origin = tuple[float, float]


@dataclass(frozen=True)
class SelectCharacter:
    character_id: str


@dataclass(frozen=True)
class PlayCard:
    card_id: str
    target_id: Optional[str] = None
    origin: Origin = (0.0, 0.0)


@dataclass(frozen=True)
class PlayCardBatch:
    card_ids: tuple[str, ...]
    target_id: Optional[str] = None
    origin: Origin = (0.0, 0.0)


@dataclass(frozen=True)
class UseSkill:
    skill_id: str
    target_id: Optional[str] = None
    origin: Origin = (0.0, 0.0)


@dataclass(frozen=True)
class EndTurn:
    pass


@dataclass(frozen=True)
class ChooseRewardCard:
    index: int


@dataclass(frozen=True)
class ChooseRewardSkill:
    pass


@dataclass(frozen=True)
class SkipReward:
    pass


@dataclass(frozen=True)
class Restart:
    pass


Command = Union[
    SelectCharacter, PlayCard, PlayCardBatch, UseSkill, EndTurn,
    ChooseRewardCard, ChooseRewardSkill, SkipReward, Restart,
]
