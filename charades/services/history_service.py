"""
History Service - Turns finished games into persistence records and reads
statistics back out of the game store.
"""

from typing import Any, Dict, List, Optional

from charades.models import GameSummary
from charades.services.base_service import BaseService


class HistoryService(BaseService):
    """Bridge between game summaries and the GameStore."""

    def __init__(self, game_store, config: Optional[Dict[str, Any]] = None):
        self.game_store = game_store
        super().__init__(config)

    def _initialize(self) -> None:
        self._default_limit = self.get_config_value('recent_games_limit', 10)

    def build_record(self, summary: GameSummary) -> Dict[str, Any]:
        """
        Build the persistence record for a finished game.

        Args:
            summary: Final GameSummary

        Returns:
            Record with timestamp, deck_id, winner, scores, totals,
            accuracy_percent and players
        """
        winner = summary.winner
        return {
            'timestamp': summary.timestamp.isoformat(),
            'deck_id': summary.deck_id,
            'winner': winner.value if winner else None,
            'score_blue': summary.score_blue,
            'score_red': summary.score_red,
            'total_words': summary.total_words,
            'total_correct': summary.total_correct,
            'accuracy_percent': summary.accuracy_percent,
            'players': [{'name': name, 'team': team.value} for name, team in summary.players],
        }

    def record_game(self, summary: GameSummary) -> int:
        record = self.build_record(summary)
        game_id = self.game_store.save_game(record)
        self.log_info(
            f"Recorded game {game_id}: blue={summary.score_blue} red={summary.score_red}",
            game_id=game_id
        )
        return game_id

    def get_statistics(self) -> Dict[str, Any]:
        return self.game_store.get_statistics()

    def get_recent_games(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if limit is None:
            limit = self._default_limit
        return self.game_store.get_recent_games(limit)

    def get_last_game_players(self) -> Optional[Dict[str, List[str]]]:
        return self.game_store.get_last_game_players()
