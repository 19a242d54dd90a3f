"""
Session Events

Every mutation of a game session is expressed as one of these events and
applied by the reducer in charades.game_reducer. Events carry all the
randomness they need (shuffled word orders) so the reducer stays pure.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from charades.core.game_phases import Team, TurnEndReason
from charades.models import Player


@dataclass(frozen=True)
class AddPlayer:
    team: Team
    player: Player


@dataclass(frozen=True)
class RemovePlayer:
    team: Team
    player_id: str


@dataclass(frozen=True)
class MovePlayer:
    player_id: str
    from_team: Team
    to_team: Team


@dataclass(frozen=True)
class ReplaceRoster:
    """Replace both rosters at once (prefill from a previous game)."""
    blue: Tuple[Player, ...]
    red: Tuple[Player, ...]


@dataclass(frozen=True)
class StartGame:
    words: Tuple[str, ...]
    deck_id: Optional[str] = None


@dataclass(frozen=True)
class StartTimer:
    pass


@dataclass(frozen=True)
class StopTimer:
    pass


@dataclass(frozen=True)
class Tick:
    seconds: int = 1


@dataclass(frozen=True)
class MarkWord:
    correct: bool
    word: Optional[str] = None


@dataclass(frozen=True)
class EndTurn:
    reason: TurnEndReason


@dataclass(frozen=True)
class ToggleReview:
    word: Optional[str] = None
    index: Optional[int] = None  # position in the review list; needed when a word repeats


@dataclass(frozen=True)
class CommitReview:
    pass


@dataclass(frozen=True)
class AdvanceTurn:
    pass


@dataclass(frozen=True)
class EndRound:
    next_queue: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EndGame:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass
