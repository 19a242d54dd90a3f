"""
Game Session for the Charades game

Explicitly constructed, single-writer session object. Every public method
translates a user intent into an event, runs it through the reducer and
swaps in the resulting state. Shuffling happens here so the reducer stays
deterministic.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from charades.core import events as ev
from charades.core.game_phases import GamePhase, RoundRule, Team, TurnEndReason, TurnPhase
from charades.game_reducer import (
    DEFAULT_SKIP_PENALTY, TOTAL_ROUNDS, SessionState, build_summary,
    current_player, is_game_complete, next_player, reduce, review_index
)
from charades.models import GameSummary, Player, ReviewEntry, RoundOutcome, new_player_id
from charades.services.validation_service import ValidationService
from charades.turn_timer import DEFAULT_TURN_DURATION, TurnTimer

logger = logging.getLogger(__name__)

TeamLike = Union[Team, str]


@dataclass(frozen=True)
class JudgeResult:
    """Outcome of judging one word."""
    accepted: bool
    turn_ended: bool
    round_complete: bool


@dataclass(frozen=True)
class TurnEndResult:
    """What the caller should do after a turn ends."""
    reason: Optional[TurnEndReason]
    round_complete: bool
    game_complete: bool


class GameSession:
    """A single game of charades: two teams, one deck, three rounds."""

    def __init__(self, session_id: str = "local",
                 turn_duration: int = DEFAULT_TURN_DURATION,
                 skip_penalty_seconds: int = DEFAULT_SKIP_PENALTY,
                 validation_service: Optional[ValidationService] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize an empty session in the NOT_STARTED state.

        Args:
            session_id: Identifier used in logs and by the session manager
            turn_duration: Seconds per turn
            skip_penalty_seconds: Seconds lost per skipped word in round 1
            validation_service: Validator for player names and word lists
            rng: Random source used for shuffling (injectable for tests)
        """
        self.session_id = session_id
        self.validation_service = validation_service or ValidationService()
        self._rng = rng or random.Random()
        self._state = SessionState.initial(turn_duration, skip_penalty_seconds)

    # State access

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def current_round(self) -> int:
        return self._state.current_round

    @property
    def current_team(self) -> Team:
        return self._state.current_team

    @property
    def current_player_index(self) -> int:
        return self._state.current_player_index

    @property
    def turn_number(self) -> int:
        return self._state.turn_number

    @property
    def turn_phase(self) -> TurnPhase:
        return self._state.turn_phase

    @property
    def timer(self) -> TurnTimer:
        return self._state.timer

    @property
    def word_queue(self) -> Tuple[str, ...]:
        return self._state.word_queue

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def history(self) -> Tuple[RoundOutcome, ...]:
        return self._state.history

    @property
    def review_entries(self) -> Tuple[ReviewEntry, ...]:
        return self._state.review

    @property
    def round_rule(self) -> RoundRule:
        return RoundRule.for_round(self._state.current_round)

    def players(self, team: TeamLike) -> Tuple[Player, ...]:
        return self._state.teams[self._coerce_team(team)].players

    def score(self, team: TeamLike) -> int:
        return self._state.team_score(self._coerce_team(team))

    def current_player(self) -> Optional[Player]:
        return current_player(self._state)

    def next_player(self) -> Optional[Player]:
        return next_player(self._state)

    def current_word(self) -> Optional[str]:
        return self._state.current_word

    def is_round_complete(self) -> bool:
        return self._state.round_complete

    def is_game_complete(self) -> bool:
        """True once the final round is recorded or the game has ended."""
        return is_game_complete(self._state)

    # Team setup

    def add_player(self, team: TeamLike, name: str) -> Player:
        """
        Add a player to the end of a team's rotation.

        Args:
            team: Team identity or its string value
            name: Player display name

        Returns:
            The created Player

        Raises:
            ValidationError: If the name is empty, too long or already taken
            GameStateError: If a game is in progress
        """
        team = self._coerce_team(team)
        name = self.validation_service.validate_player_name(name)
        self.validation_service.validate_team_capacity(len(self.players(team)))
        player = Player(id=new_player_id(), name=name)
        self._dispatch(ev.AddPlayer(team=team, player=player))
        logger.info(f"Session {self.session_id}: added {name} to team {team.value}")
        return player

    def remove_player(self, team: TeamLike, player_id: str) -> None:
        self._dispatch(ev.RemovePlayer(team=self._coerce_team(team), player_id=player_id))

    def move_player(self, player_id: str, from_team: TeamLike, to_team: TeamLike) -> None:
        """Move a player to the end of the other team's rotation."""
        to_team = self._coerce_team(to_team)
        self.validation_service.validate_team_capacity(len(self.players(to_team)))
        self._dispatch(ev.MovePlayer(
            player_id=player_id,
            from_team=self._coerce_team(from_team),
            to_team=to_team
        ))

    def load_roster(self, blue_names: Iterable[str], red_names: Iterable[str]) -> None:
        """Replace both rosters with freshly created players (e.g. from the last game)."""
        blue = tuple(Player(id=new_player_id(), name=n) for n in blue_names)
        red = tuple(Player(id=new_player_id(), name=n) for n in red_names)
        self._dispatch(ev.ReplaceRoster(blue=blue, red=red))

    # Game lifecycle

    def start_game(self, words: Iterable[str], deck_id: Optional[str] = None) -> None:
        """
        Start a new game with the given word list.

        The words are shuffled once; later rounds reshuffle the same set.

        Raises:
            ValidationError: If there are no words or a team has no players
        """
        word_list = self.validation_service.validate_word_list(words)
        self._rng.shuffle(word_list)
        self._dispatch(ev.StartGame(words=tuple(word_list), deck_id=deck_id))
        logger.info(
            f"Session {self.session_id}: game started with {len(word_list)} words"
            f" (deck={deck_id})"
        )

    def start_timer(self) -> None:
        self._dispatch(ev.StartTimer())

    def stop_timer(self) -> None:
        self._dispatch(ev.StopTimer())

    def tick(self, seconds: int = 1) -> bool:
        """
        Advance the countdown by one scheduler tick.

        Returns:
            True if the timer is still running afterwards, False if it is
            stopped (including when this tick expired the turn)
        """
        before = self._state.turn_phase
        self._dispatch(ev.Tick(seconds=seconds))
        if before != TurnPhase.REVIEW and self._state.turn_phase == TurnPhase.REVIEW:
            logger.info(f"Session {self.session_id}: turn {self.turn_number} time expired")
        return self._state.timer.running

    def mark_correct(self, word: Optional[str] = None) -> JudgeResult:
        """Credit the presented word to the acting team and move to the next word."""
        return self._judge(word, correct=True)

    def mark_incorrect(self, word: Optional[str] = None) -> JudgeResult:
        """Skip the presented word; no score change (costs time in round 1)."""
        return self._judge(word, correct=False)

    def end_turn(self, reason: TurnEndReason = TurnEndReason.ENDED_BY_PLAYER) -> TurnEndResult:
        """Close the active turn and open its words for review."""
        self._dispatch(ev.EndTurn(reason=reason))
        return self.turn_status()

    def turn_status(self) -> TurnEndResult:
        state = self._state
        return TurnEndResult(
            reason=state.last_turn_end_reason,
            round_complete=state.round_complete,
            game_complete=state.round_complete and state.current_round >= TOTAL_ROUNDS,
        )

    def toggle_review(self, word: Optional[str] = None, index: Optional[int] = None) -> bool:
        """
        Flip a reviewed word between correct and incorrect.

        The entry is picked by its position in the review list when `index`
        is given (required to reach the later copies of a repeated word),
        otherwise by the first entry for `word`. The acting team's score
        follows the change immediately.

        Returns:
            The entry's new classification (True = correct)
        """
        event = ev.ToggleReview(word=word, index=index)
        self._dispatch(event)
        return self._state.review[review_index(self._state.review, event)].is_correct

    def commit_review(self) -> None:
        self._dispatch(ev.CommitReview())

    def advance_turn(self) -> bool:
        """
        Hand the turn to the next player.

        Returns:
            True if a next turn exists, False if no team can take a turn
            (the round should end)
        """
        self._dispatch(ev.AdvanceTurn())
        available = self._state.turn_available
        if not available:
            logger.warning(
                f"Session {self.session_id}: team {self.current_team.other.value} has no players,"
                f" round {self.current_round} cannot continue"
            )
        return available

    def end_round(self) -> RoundOutcome:
        """
        Record the current round and, unless it was the last, prepare the next.

        Returns:
            The recorded RoundOutcome
        """
        next_queue = list(self._state.all_words)
        self._rng.shuffle(next_queue)
        self._dispatch(ev.EndRound(next_queue=tuple(next_queue)))
        outcome = self._state.history[-1]
        logger.info(
            f"Session {self.session_id}: round {outcome.round_number} ended"
            f" ({len(outcome.correct_words)} correct, {len(outcome.incorrect_words)} incorrect)"
        )
        return outcome

    def end_game(self) -> GameSummary:
        """Finish the game and return its summary."""
        self._dispatch(ev.EndGame())
        summary = build_summary(self._state)
        winner = summary.winner
        logger.info(
            f"Session {self.session_id}: game ended, blue={summary.score_blue}"
            f" red={summary.score_red} winner={winner.value if winner else 'tie'}"
        )
        return summary

    def reset_game(self) -> None:
        self._dispatch(ev.ResetGame())

    # Internals

    def _judge(self, word: Optional[str], correct: bool) -> JudgeResult:
        before = self._state
        if before.phase == GamePhase.IN_PROGRESS and before.words_exhausted:
            logger.debug(f"Session {self.session_id}: judging ignored, no words left")
            return JudgeResult(accepted=False, turn_ended=True, round_complete=True)
        self._dispatch(ev.MarkWord(correct=correct, word=word))
        after = self._state
        return JudgeResult(
            accepted=True,
            turn_ended=after.turn_phase == TurnPhase.REVIEW,
            round_complete=after.round_complete,
        )

    def _dispatch(self, event) -> SessionState:
        self._state = reduce(self._state, event)
        return self._state

    def _coerce_team(self, team: TeamLike) -> Team:
        return self.validation_service.validate_team(team)

    def snapshot(self) -> Dict:
        """Plain-data view of the session for logging and presenters."""
        state = self._state
        return {
            'session_id': self.session_id,
            'phase': state.phase.value,
            'round': state.current_round,
            'current_team': state.current_team.value,
            'current_player_index': state.current_player_index,
            'turn_number': state.turn_number,
            'turn_phase': state.turn_phase.value,
            'cursor': state.cursor,
            'words_total': len(state.word_queue),
            'scores': state.score_snapshot(),
        }

    def __repr__(self) -> str:
        return f"GameSession(id={self.session_id}, phase={self.phase.value}, round={self.current_round})"
