"""
Services package for the Charades game

Contains service classes that sit between the game engine and the
Socket.IO / REST adapters.
"""

from .validation_service import ValidationService
from .game_store import GameStore
from .history_service import HistoryService

__all__ = [
    'ValidationService',
    'GameStore',
    'HistoryService'
]
