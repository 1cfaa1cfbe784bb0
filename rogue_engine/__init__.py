"""Emoji Rogue Combat Engine"""

from .config import EngineConfig
from .engine import CombatEngine
from .models import GamePhase, GameState
from .profile_agent import OpenAIProfileGenerator, PresetProfileGenerator
from .progress import ProgressStore
from .scheduler import Scheduler

__all__ = [
    'CombatEngine', 'EngineConfig', 'GamePhase', 'GameState',
    'OpenAIProfileGenerator', 'PresetProfileGenerator', 'ProgressStore',
    'Scheduler',
]
