"""
Game Store - In-memory persistence for completed games.

Records are plain dictionaries (the shape built by HistoryService) keyed by
an auto-incrementing id. All access is serialized by a single lock.
"""

import copy
import threading
from typing import Any, Dict, List, Optional

from charades.services.base_service import BaseService


class GameStore(BaseService):
    """Thread-safe store of completed game records."""

    def _initialize(self) -> None:
        self._lock = threading.Lock()
        self._games: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1

    def save_game(self, record: Dict[str, Any]) -> int:
        """
        Persist a game record.

        Args:
            record: Game summary record

        Returns:
            The id assigned to the record

        Raises:
            ValueError: If the record is not a dictionary
        """
        if not isinstance(record, dict):
            raise ValueError("Game record must be a dictionary")

        with self._lock:
            game_id = self._next_id
            self._next_id += 1
            stored = copy.deepcopy(record)
            stored['id'] = game_id
            self._games[game_id] = stored

        self.log_info(f"Saved game {game_id}", game_id=game_id)
        return game_id

    def get_game(self, game_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._games.get(game_id)
            return copy.deepcopy(record) if record else None

    def get_recent_games(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recently saved games first."""
        if limit <= 0:
            return []
        with self._lock:
            ids = sorted(self._games.keys(), reverse=True)[:limit]
            return [copy.deepcopy(self._games[i]) for i in ids]

    def get_game_count(self) -> int:
        with self._lock:
            return len(self._games)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Aggregate statistics over every stored game.

        Returns:
            Dict with total_games, total_words, average_accuracy,
            games_won_by_blue, games_won_by_red and ties
        """
        with self._lock:
            games = list(self._games.values())

        total_games = len(games)
        average_accuracy = 0.0
        if total_games:
            average_accuracy = round(
                sum(g.get('accuracy_percent', 0) for g in games) / total_games, 1
            )

        return {
            'total_games': total_games,
            'total_words': sum(g.get('total_words', 0) for g in games),
            'average_accuracy': average_accuracy,
            'games_won_by_blue': sum(1 for g in games if g.get('winner') == 'blue'),
            'games_won_by_red': sum(1 for g in games if g.get('winner') == 'red'),
            'ties': sum(1 for g in games if g.get('winner') is None),
        }

    def get_last_game_players(self) -> Optional[Dict[str, List[str]]]:
        """
        Rosters of the most recently saved game.

        Returns:
            {'blue': [names], 'red': [names]} or None if no game was saved
        """
        with self._lock:
            if not self._games:
                return None
            last = self._games[max(self._games.keys())]
            players = list(last.get('players', []))

        rosters: Dict[str, List[str]] = {'blue': [], 'red': []}
        for player in players:
            team = player.get('team')
            if team in rosters:
                rosters[team].append(player.get('name'))
        return rosters

    def clear(self) -> None:
        with self._lock:
            self._games.clear()
            self._next_id = 1

    def _cleanup(self) -> None:
        self.clear()
