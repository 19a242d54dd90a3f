"""
Data structures for the Charades game engine.

All records are immutable; the reducer produces new instances instead of
mutating existing ones.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any, Tuple
import uuid

from charades.core.game_phases import Team


def new_player_id() -> str:
    """Generate a unique player identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Player:
    """A participant on one of the two teams."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}


@dataclass(frozen=True)
class TeamState:
    """Roster (in rotation order) and cumulative score of one team."""
    players: Tuple[Player, ...] = ()
    score: int = 0

    def find(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'players': [p.to_dict() for p in self.players],
            'score': self.score
        }


@dataclass(frozen=True)
class RoundOutcome:
    """Finalized record of one round: judged words and a score snapshot."""
    round_number: int
    correct_words: Tuple[str, ...]
    incorrect_words: Tuple[str, ...]
    team_scores: Dict[str, int]

    @property
    def judged_count(self) -> int:
        return len(self.correct_words) + len(self.incorrect_words)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'round_number': self.round_number,
            'correct_words': list(self.correct_words),
            'incorrect_words': list(self.incorrect_words),
            'team_scores': dict(self.team_scores)
        }


@dataclass(frozen=True)
class GameSummary:
    """Final aggregate of a completed game."""
    rounds: Tuple[RoundOutcome, ...]
    score_blue: int
    score_red: int
    players: Tuple[Tuple[str, Team], ...]
    deck_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def winner(self) -> Optional[Team]:
        """Team with the strictly higher score, or None on a tie."""
        if self.score_blue > self.score_red:
            return Team.BLUE
        if self.score_red > self.score_blue:
            return Team.RED
        return None

    @property
    def total_words(self) -> int:
        return sum(r.judged_count for r in self.rounds)

    @property
    def total_correct(self) -> int:
        return sum(len(r.correct_words) for r in self.rounds)

    @property
    def accuracy_percent(self) -> int:
        if self.total_words == 0:
            return 0
        return int(round(self.total_correct * 100 / self.total_words))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        winner = self.winner
        return {
            'timestamp': self.timestamp.isoformat(),
            'deck_id': self.deck_id,
            'winner': winner.value if winner else None,
            'score_blue': self.score_blue,
            'score_red': self.score_red,
            'total_words': self.total_words,
            'total_correct': self.total_correct,
            'accuracy_percent': self.accuracy_percent,
            'players': [{'name': name, 'team': team.value} for name, team in self.players],
            'rounds': [r.to_dict() for r in self.rounds]
        }


@dataclass(frozen=True)
class ReviewEntry:
    """A word judged during the turn under review."""
    word: str
    is_correct: bool
    original_state: bool

    @property
    def changed(self) -> bool:
        return self.is_correct != self.original_state


def review_partition(entries: Tuple[ReviewEntry, ...]) -> Tuple[List[str], List[str]]:
    """Split review entries into (correct, incorrect) word lists, preserving order."""
    correct = [e.word for e in entries if e.is_correct]
    incorrect = [e.word for e in entries if not e.is_correct]
    return correct, incorrect
