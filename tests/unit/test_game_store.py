"""
Unit tests for GameStore.
"""

import threading

import pytest

from charades.services.game_store import GameStore


def _record(winner='blue', accuracy=80, total_words=10, players=None):
    return {
        'winner': winner,
        'accuracy_percent': accuracy,
        'total_words': total_words,
        'players': players or [{'name': 'Alice', 'team': 'blue'}, {'name': 'Carol', 'team': 'red'}],
    }


class TestGameStore:
    """Saving and reading completed games."""

    def setup_method(self):
        self.store = GameStore()

    def test_save_assigns_incrementing_ids(self):
        assert self.store.save_game(_record()) == 1
        assert self.store.save_game(_record()) == 2
        assert self.store.get_game_count() == 2

    def test_save_rejects_non_dict(self):
        with pytest.raises(ValueError):
            self.store.save_game(['not', 'a', 'record'])

    def test_stored_record_is_isolated_from_caller(self):
        record = _record()
        game_id = self.store.save_game(record)
        record['players'].append({'name': 'Mallory', 'team': 'red'})

        stored = self.store.get_game(game_id)
        assert stored['id'] == game_id
        assert len(stored['players']) == 2

        stored['winner'] = 'red'
        assert self.store.get_game(game_id)['winner'] == 'blue'

    def test_get_unknown_game(self):
        assert self.store.get_game(99) is None

    def test_recent_games_newest_first(self):
        for accuracy in (10, 20, 30):
            self.store.save_game(_record(accuracy=accuracy))
        recent = self.store.get_recent_games(2)
        assert [g['accuracy_percent'] for g in recent] == [30, 20]
        assert self.store.get_recent_games(0) == []

    def test_statistics_empty(self):
        assert self.store.get_statistics() == {
            'total_games': 0,
            'total_words': 0,
            'average_accuracy': 0.0,
            'games_won_by_blue': 0,
            'games_won_by_red': 0,
            'ties': 0,
        }

    def test_statistics(self):
        self.store.save_game(_record(winner='blue', accuracy=100, total_words=9))
        self.store.save_game(_record(winner='red', accuracy=50, total_words=6))
        self.store.save_game(_record(winner=None, accuracy=67, total_words=3))

        stats = self.store.get_statistics()
        assert stats['total_games'] == 3
        assert stats['total_words'] == 18
        assert stats['average_accuracy'] == 72.3
        assert stats['games_won_by_blue'] == 1
        assert stats['games_won_by_red'] == 1
        assert stats['ties'] == 1

    def test_last_game_players(self):
        assert self.store.get_last_game_players() is None
        self.store.save_game(_record())
        self.store.save_game(_record(players=[
            {'name': 'Bob', 'team': 'red'},
            {'name': 'Dave', 'team': 'blue'},
            {'name': 'Erin', 'team': 'red'},
        ]))
        assert self.store.get_last_game_players() == {'blue': ['Dave'], 'red': ['Bob', 'Erin']}

    def test_clear_resets_ids(self):
        self.store.save_game(_record())
        self.store.clear()
        assert self.store.get_game_count() == 0
        assert self.store.save_game(_record()) == 1

    def test_shutdown_clears_store(self):
        self.store.save_game(_record())
        self.store.shutdown()
        assert self.store.is_shutdown
        assert self.store.get_game_count() == 0

    def test_concurrent_saves_get_unique_ids(self):
        ids = []
        lock = threading.Lock()

        def save_many():
            for _ in range(20):
                game_id = self.store.save_game(_record())
                with lock:
                    ids.append(game_id)

        threads = [threading.Thread(target=save_many) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(ids) == list(range(1, 101))
