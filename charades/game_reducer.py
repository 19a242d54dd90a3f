"""
Game Reducer for the Charades engine

Applies session events to an immutable SessionState and returns the next
state. Invalid events raise ValidationError or GameStateError and leave the
caller's state untouched.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional, Tuple

from charades.core import events as ev
from charades.core.errors import ErrorCode, GameStateError, ValidationError
from charades.core.game_phases import GamePhase, Team, TurnEndReason, TurnPhase
from charades.models import (
    GameSummary, Player, ReviewEntry, RoundOutcome, TeamState, review_partition
)
from charades.turn_timer import DEFAULT_TURN_DURATION, TurnTimer

TOTAL_ROUNDS = 3
DEFAULT_SKIP_PENALTY = 5  # seconds, round 1 only


def _empty_teams() -> Dict[Team, TeamState]:
    return {Team.BLUE: TeamState(), Team.RED: TeamState()}


@dataclass(frozen=True)
class SessionState:
    """Complete snapshot of a game session."""
    phase: GamePhase = GamePhase.NOT_STARTED
    teams: Dict[Team, TeamState] = field(default_factory=_empty_teams)

    # Rotation
    current_round: int = 1
    current_team: Team = Team.BLUE
    current_player_index: int = 0
    turn_number: int = 0
    turn_phase: TurnPhase = TurnPhase.READY
    turn_available: bool = True
    last_turn_end_reason: Optional[TurnEndReason] = None

    # Timer
    timer: TurnTimer = field(default_factory=TurnTimer)
    skip_penalty_seconds: int = DEFAULT_SKIP_PENALTY

    # Words
    deck_id: Optional[str] = None
    all_words: Tuple[str, ...] = ()
    word_queue: Tuple[str, ...] = ()
    cursor: int = 0

    # Judging and history
    review: Tuple[ReviewEntry, ...] = ()
    review_team: Optional[Team] = None
    round_correct: Tuple[str, ...] = ()
    round_incorrect: Tuple[str, ...] = ()
    round_recorded: bool = False
    history: Tuple[RoundOutcome, ...] = ()

    @classmethod
    def initial(cls, turn_duration: int = DEFAULT_TURN_DURATION,
                skip_penalty_seconds: int = DEFAULT_SKIP_PENALTY) -> 'SessionState':
        return cls(timer=TurnTimer.fresh(turn_duration), skip_penalty_seconds=skip_penalty_seconds)

    @property
    def words_remaining(self) -> int:
        return max(0, len(self.word_queue) - self.cursor)

    @property
    def words_exhausted(self) -> bool:
        return self.cursor >= len(self.word_queue)

    @property
    def round_complete(self) -> bool:
        """The round may end: words ran out or no team can take a turn."""
        return self.phase == GamePhase.IN_PROGRESS and (
            self.words_exhausted or not self.turn_available
        )

    @property
    def current_word(self) -> Optional[str]:
        if self.phase != GamePhase.IN_PROGRESS or self.words_exhausted:
            return None
        return self.word_queue[self.cursor]

    def team_score(self, team: Team) -> int:
        return self.teams[team].score

    def score_snapshot(self) -> Dict[str, int]:
        return {team.value: self.teams[team].score for team in Team}


# Guards

def _require_in_progress(state: SessionState) -> None:
    if state.phase == GamePhase.NOT_STARTED:
        raise GameStateError(ErrorCode.GAME_NOT_STARTED, "No game is in progress")
    if state.phase == GamePhase.ENDED:
        raise GameStateError(ErrorCode.GAME_ALREADY_ENDED, "The game has already ended")


def _require_setup(state: SessionState) -> None:
    if state.phase == GamePhase.IN_PROGRESS:
        raise GameStateError(
            ErrorCode.GAME_IN_PROGRESS,
            "Teams cannot be changed while a game is in progress"
        )


def _with_team(state: SessionState, team: Team, team_state: TeamState) -> SessionState:
    teams = dict(state.teams)
    teams[team] = team_state
    return replace(state, teams=teams)


def _add_score(state: SessionState, team: Team, delta: int) -> SessionState:
    current = state.teams[team]
    return _with_team(state, team, replace(current, score=max(0, current.score + delta)))


# Roster

def _add_player(state: SessionState, event: ev.AddPlayer) -> SessionState:
    _require_setup(state)
    wanted = event.player.name.casefold()
    for team_state in state.teams.values():
        if any(p.name.casefold() == wanted for p in team_state.players):
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TAKEN,
                f"A player named '{event.player.name}' already exists",
                {"name": event.player.name}
            )
    team_state = state.teams[event.team]
    return _with_team(state, event.team, replace(team_state, players=team_state.players + (event.player,)))


def _remove_player(state: SessionState, event: ev.RemovePlayer) -> SessionState:
    _require_setup(state)
    team_state = state.teams[event.team]
    if team_state.find(event.player_id) is None:
        raise ValidationError(
            ErrorCode.PLAYER_NOT_FOUND,
            "Player not found on that team",
            {"player_id": event.player_id, "team": event.team.value}
        )
    players = tuple(p for p in team_state.players if p.id != event.player_id)
    return _with_team(state, event.team, replace(team_state, players=players))


def _move_player(state: SessionState, event: ev.MovePlayer) -> SessionState:
    _require_setup(state)
    if event.from_team == event.to_team:
        raise ValidationError(ErrorCode.INVALID_TEAM, "Source and destination teams must differ")
    source = state.teams[event.from_team]
    player = source.find(event.player_id)
    if player is None:
        raise ValidationError(
            ErrorCode.PLAYER_NOT_FOUND,
            "Player not found on that team",
            {"player_id": event.player_id, "team": event.from_team.value}
        )
    target = state.teams[event.to_team]
    teams = dict(state.teams)
    teams[event.from_team] = replace(source, players=tuple(p for p in source.players if p.id != player.id))
    teams[event.to_team] = replace(target, players=target.players + (player,))
    return replace(state, teams=teams)


def _replace_roster(state: SessionState, event: ev.ReplaceRoster) -> SessionState:
    _require_setup(state)
    return replace(state, teams={
        Team.BLUE: TeamState(players=tuple(event.blue)),
        Team.RED: TeamState(players=tuple(event.red)),
    })


# Game lifecycle

def _start_game(state: SessionState, event: ev.StartGame) -> SessionState:
    _require_setup(state)
    if not event.words:
        raise ValidationError(ErrorCode.NO_WORDS, "At least one word is required to start a game")
    for team in Team:
        if not state.teams[team].players:
            raise ValidationError(
                ErrorCode.EMPTY_TEAM,
                f"Team {team.value} needs at least one player",
                {"team": team.value}
            )

    words = tuple(event.words)
    teams = {team: TeamState(players=state.teams[team].players) for team in Team}
    return replace(
        SessionState.initial(state.timer.duration, state.skip_penalty_seconds),
        phase=GamePhase.IN_PROGRESS,
        teams=teams,
        turn_number=1,
        deck_id=event.deck_id,
        all_words=words,
        word_queue=words,
    )


def _end_game(state: SessionState, event: ev.EndGame) -> SessionState:
    _require_in_progress(state)
    if state.current_round < TOTAL_ROUNDS:
        raise GameStateError(
            ErrorCode.FINAL_ROUND_NOT_REACHED,
            f"The game can only end after round {TOTAL_ROUNDS}",
            {"current_round": state.current_round}
        )
    if not state.round_recorded:
        state = _record_round(_commit_review(state, ev.CommitReview()))
    return replace(
        state,
        phase=GamePhase.ENDED,
        timer=state.timer.stop(),
        turn_phase=TurnPhase.REVIEW,
    )


def _reset_game(state: SessionState, event: ev.ResetGame) -> SessionState:
    return SessionState.initial(state.timer.duration, state.skip_penalty_seconds)


# Timer

def _start_timer(state: SessionState, event: ev.StartTimer) -> SessionState:
    _require_in_progress(state)
    if state.turn_phase == TurnPhase.REVIEW or state.round_recorded or not state.turn_available:
        raise GameStateError(ErrorCode.TURN_NOT_ACTIVE, "There is no active turn to time")
    if state.words_exhausted:
        raise GameStateError(ErrorCode.TURN_NOT_ACTIVE, "All words of this round have been played")
    if state.timer.expired:
        raise GameStateError(ErrorCode.TIMER_EXPIRED, "The turn timer has already expired")
    return replace(state, timer=state.timer.start(), turn_phase=TurnPhase.PLAYING)


def _stop_timer(state: SessionState, event: ev.StopTimer) -> SessionState:
    _require_in_progress(state)
    return replace(state, timer=state.timer.stop())


def _tick(state: SessionState, event: ev.Tick) -> SessionState:
    _require_in_progress(state)
    if not state.timer.running:
        return state
    state = replace(state, timer=state.timer.tick(event.seconds))
    if state.timer.expired:
        return _end_turn(state, ev.EndTurn(TurnEndReason.TIME_EXPIRED))
    return state


# Turns and judging

def _mark_word(state: SessionState, event: ev.MarkWord) -> SessionState:
    _require_in_progress(state)
    if state.words_exhausted:
        # Nothing left to judge; the round is complete.
        return state
    if state.turn_phase == TurnPhase.REVIEW:
        raise GameStateError(ErrorCode.TURN_NOT_ACTIVE, "The turn has already ended")
    if not state.timer.running:
        raise GameStateError(ErrorCode.TIMER_NOT_RUNNING, "Start the timer before judging words")

    presented = state.word_queue[state.cursor]
    if event.word is not None and event.word != presented:
        raise GameStateError(
            ErrorCode.WORD_MISMATCH,
            "That word is not the one currently presented",
            {"expected": presented, "received": event.word}
        )

    entry = ReviewEntry(word=presented, is_correct=event.correct, original_state=event.correct)
    state = replace(
        state,
        review=state.review + (entry,),
        review_team=state.current_team,
        cursor=state.cursor + 1,
    )
    if event.correct:
        state = _add_score(state, state.current_team, 1)
    elif state.current_round == 1 and state.skip_penalty_seconds > 0:
        state = replace(state, timer=state.timer.penalize(state.skip_penalty_seconds))

    if state.words_exhausted:
        return _end_turn(state, ev.EndTurn(TurnEndReason.WORDS_EXHAUSTED))
    if state.timer.expired:
        return _end_turn(state, ev.EndTurn(TurnEndReason.TIME_EXPIRED))
    return state


def _end_turn(state: SessionState, event: ev.EndTurn) -> SessionState:
    _require_in_progress(state)
    if state.turn_phase == TurnPhase.REVIEW:
        raise GameStateError(ErrorCode.TURN_NOT_ACTIVE, "The turn has already ended")
    return replace(
        state,
        timer=state.timer.stop(),
        turn_phase=TurnPhase.REVIEW,
        last_turn_end_reason=event.reason,
    )


def _toggle_review(state: SessionState, event: ev.ToggleReview) -> SessionState:
    _require_in_progress(state)
    if state.turn_phase != TurnPhase.REVIEW:
        raise GameStateError(ErrorCode.REVIEW_NOT_OPEN, "Words can only be reviewed after the turn ends")
    index = review_index(state.review, event)
    entry = state.review[index]
    flipped = replace(entry, is_correct=not entry.is_correct)
    review = state.review[:index] + (flipped,) + state.review[index + 1:]
    state = replace(state, review=review)
    team = state.review_team or state.current_team
    return _add_score(state, team, 1 if flipped.is_correct else -1)


def review_index(review, event: ev.ToggleReview) -> int:
    """Position of the entry to flip: `event.index` when given, else the first entry for `event.word`."""
    if event.index is not None:
        if not 0 <= event.index < len(review):
            raise ValidationError(
                ErrorCode.WORD_NOT_IN_REVIEW,
                "No word was judged at that position during this turn",
                {"index": event.index}
            )
        if event.word is not None and review[event.index].word != event.word:
            raise ValidationError(
                ErrorCode.WORD_MISMATCH,
                "The word at that position does not match",
                {"index": event.index, "word": event.word}
            )
        return event.index

    for index, entry in enumerate(review):
        if entry.word == event.word:
            return index
    raise ValidationError(
        ErrorCode.WORD_NOT_IN_REVIEW,
        "That word was not judged during this turn",
        {"word": event.word}
    )


def _commit_review(state: SessionState, event: ev.CommitReview) -> SessionState:
    _require_in_progress(state)
    if not state.review:
        return state
    correct, incorrect = review_partition(state.review)
    return replace(
        state,
        round_correct=state.round_correct + tuple(correct),
        round_incorrect=state.round_incorrect + tuple(incorrect),
        review=(),
        review_team=None,
    )


def _advance_turn(state: SessionState, event: ev.AdvanceTurn) -> SessionState:
    _require_in_progress(state)
    if state.round_recorded:
        raise GameStateError(ErrorCode.ROUND_ALREADY_RECORDED, "The final round has already been recorded")
    state = _commit_review(state, ev.CommitReview())
    state = replace(state, timer=state.timer.reset())

    next_index = state.current_player_index + 1
    if next_index < len(state.teams[state.current_team].players):
        return _begin_turn(state, state.current_team, next_index)

    next_team = state.current_team.other
    if not state.teams[next_team].players:
        return replace(state, turn_available=False)
    return _begin_turn(state, next_team, 0)


def _begin_turn(state: SessionState, team: Team, index: int) -> SessionState:
    return replace(
        state,
        current_team=team,
        current_player_index=index,
        turn_number=state.turn_number + 1,
        turn_phase=TurnPhase.READY,
        turn_available=True,
        last_turn_end_reason=None,
        timer=state.timer.reset(),
    )


# Rounds

def _record_round(state: SessionState) -> SessionState:
    outcome = RoundOutcome(
        round_number=state.current_round,
        correct_words=state.round_correct,
        incorrect_words=state.round_incorrect,
        team_scores=state.score_snapshot(),
    )
    return replace(state, history=state.history + (outcome,), round_recorded=True)


def _end_round(state: SessionState, event: ev.EndRound) -> SessionState:
    _require_in_progress(state)
    if state.round_recorded:
        raise GameStateError(ErrorCode.ROUND_ALREADY_RECORDED, "This round has already been recorded")
    if not state.round_complete:
        raise GameStateError(
            ErrorCode.ROUND_NOT_COMPLETE,
            "The round still has words to play",
            {"words_remaining": state.words_remaining}
        )

    state = _record_round(_commit_review(state, ev.CommitReview()))
    if state.current_round >= TOTAL_ROUNDS:
        return replace(state, timer=state.timer.stop(), turn_phase=TurnPhase.REVIEW)

    next_queue = tuple(event.next_queue) or state.all_words
    if Counter(next_queue) != Counter(state.all_words):
        raise ValueError("Next round queue must contain exactly the game's words")
    state = replace(
        state,
        current_round=state.current_round + 1,
        word_queue=next_queue,
        cursor=0,
        round_correct=(),
        round_incorrect=(),
        round_recorded=False,
    )
    return _begin_turn(state, Team.BLUE, 0)


_HANDLERS: Dict[type, Callable] = {
    ev.AddPlayer: _add_player,
    ev.RemovePlayer: _remove_player,
    ev.MovePlayer: _move_player,
    ev.ReplaceRoster: _replace_roster,
    ev.StartGame: _start_game,
    ev.StartTimer: _start_timer,
    ev.StopTimer: _stop_timer,
    ev.Tick: _tick,
    ev.MarkWord: _mark_word,
    ev.EndTurn: _end_turn,
    ev.ToggleReview: _toggle_review,
    ev.CommitReview: _commit_review,
    ev.AdvanceTurn: _advance_turn,
    ev.EndRound: _end_round,
    ev.EndGame: _end_game,
    ev.ResetGame: _reset_game,
}


def reduce(state: SessionState, event) -> SessionState:
    """
    Apply one event to a session state.

    Args:
        state: Current session state
        event: One of the event classes in charades.core.events

    Returns:
        The next session state

    Raises:
        ValidationError: If the event carries invalid data
        GameStateError: If the event is not valid in the current lifecycle state
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown session event: {type(event).__name__}")
    return handler(state, event)


def build_summary(state: SessionState) -> GameSummary:
    """Aggregate a finished session into a GameSummary."""
    players = tuple(
        (player.name, team)
        for team in Team
        for player in state.teams[team].players
    )
    return GameSummary(
        rounds=state.history,
        score_blue=state.team_score(Team.BLUE),
        score_red=state.team_score(Team.RED),
        players=players,
        deck_id=state.deck_id,
    )


def current_player(state: SessionState) -> Optional[Player]:
    players = state.teams[state.current_team].players
    if 0 <= state.current_player_index < len(players):
        return players[state.current_player_index]
    return None


def next_player(state: SessionState) -> Optional[Player]:
    """Preview who plays after the current turn, using the same rotation rule."""
    players = state.teams[state.current_team].players
    next_index = state.current_player_index + 1
    if next_index < len(players):
        return players[next_index]
    other = state.teams[state.current_team.other].players
    return other[0] if other else None


def is_game_complete(state: SessionState) -> bool:
    """True once the final round is recorded or the game has ended."""
    if state.phase == GamePhase.ENDED:
        return True
    return state.current_round >= TOTAL_ROUNDS and state.round_recorded
