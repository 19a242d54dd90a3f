"""
Game Phase Enumeration

Defines the lifecycle states, team identities and round rules used
throughout the application.
"""

from enum import Enum


class GamePhase(Enum):
    """Game lifecycle enumeration."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class TurnPhase(Enum):
    """State of the active turn within a round."""
    READY = "ready"        # player selected, timer not started yet
    PLAYING = "playing"    # timer started at least once, words being judged
    REVIEW = "review"      # turn ended, judged words open for review


class Team(Enum):
    """The two fixed team identities."""
    BLUE = "blue"
    RED = "red"

    @property
    def other(self) -> "Team":
        return Team.RED if self is Team.BLUE else Team.BLUE


class TurnEndReason(Enum):
    """Why a turn ended."""
    TIME_EXPIRED = "time_expired"
    WORDS_EXHAUSTED = "words_exhausted"
    ENDED_BY_PLAYER = "ended_by_player"


class RoundRule(Enum):
    """Clue-giving constraint bound to each round number."""
    FREE_CLUES = 1
    ONE_WORD = 2
    MIME_ONLY = 3

    @property
    def description(self) -> str:
        return _RULE_DESCRIPTIONS[self]

    @classmethod
    def for_round(cls, round_number: int) -> "RoundRule":
        return cls(round_number)


_RULE_DESCRIPTIONS = {
    RoundRule.FREE_CLUES: "Any clue is allowed except synonyms of the word",
    RoundRule.ONE_WORD: "Only a single word may be given as a clue",
    RoundRule.MIME_ONLY: "Mime only, no words or sounds",
}
