"""
Unit tests for DeckManager.
"""

import os

import pytest
import yaml

from charades.deck_manager import ContentValidationError, Deck, DeckManager

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

VALID_YAML = """
decks:
  - id: animals
    name: Animals
    words: [elephant, " giraffe ", penguin]
  - id: food
    name: Food
    words: [pizza]
"""


class TestDeckManagerLoading:
    """Loading decks from YAML files."""

    def _write(self, tmp_path, content):
        path = tmp_path / "decks.yaml"
        path.write_text(content, encoding='utf-8')
        return str(path)

    def test_load_valid_file(self, tmp_path):
        manager = DeckManager(self._write(tmp_path, VALID_YAML))
        manager.load_decks_from_yaml()

        assert manager.is_loaded()
        assert manager.get_deck_count() == 2
        assert [d.id for d in manager.list_decks()] == ['animals', 'food']
        assert manager.get_words('animals') == ['elephant', 'giraffe', 'penguin']

    def test_missing_file(self, tmp_path):
        manager = DeckManager(str(tmp_path / "missing.yaml"))
        with pytest.raises(FileNotFoundError):
            manager.load_decks_from_yaml()
        assert not manager.is_loaded()

    def test_malformed_yaml(self, tmp_path):
        manager = DeckManager(self._write(tmp_path, "decks: [unclosed"))
        with pytest.raises(yaml.YAMLError):
            manager.load_decks_from_yaml()

    def test_bundled_decks_file_is_valid(self):
        manager = DeckManager(os.path.join(REPO_ROOT, 'decks.yaml'))
        manager.load_decks_from_yaml()
        assert manager.get_deck_count() >= 1
        for deck in manager.list_decks():
            assert deck.words


class TestDeckValidation:

    def setup_method(self):
        self.manager = DeckManager()

    @pytest.mark.parametrize('data,message', [
        ([], "root must be a dictionary"),
        ({}, "must contain 'decks'"),
        ({'decks': {}}, "must be a list"),
        ({'decks': []}, "cannot be empty"),
        ({'decks': ['animals']}, "must be a dictionary"),
        ({'decks': [{'id': 'a', 'name': 'A'}]}, "missing required fields"),
        ({'decks': [{'id': 'a', 'name': 'A', 'words': 'cat'}]}, "'words' must be a list"),
        ({'decks': [{'id': 'a', 'name': 'A', 'words': []}]}, "'words' list cannot be empty"),
        ({'decks': [{'id': 'a', 'name': 'A', 'words': [3]}]}, "must be a string"),
        ({'decks': [{'id': 'a', 'name': 'A', 'words': ['  ']}]}, "cannot be empty"),
        ({'decks': [{'id': ' ', 'name': 'A', 'words': ['cat']}]}, "field 'id' cannot be empty"),
    ])
    def test_invalid_structure(self, data, message):
        with pytest.raises(ContentValidationError, match=message):
            self.manager.load_decks_from_data(data)
        assert not self.manager.is_loaded()

    def test_duplicate_ids(self):
        data = {'decks': [
            {'id': 'a', 'name': 'A', 'words': ['cat']},
            {'id': 'a ', 'name': 'B', 'words': ['dog']},
        ]}
        with pytest.raises(ContentValidationError, match="Duplicate deck IDs"):
            self.manager.load_decks_from_data(data)


class TestDeckAccess:

    def setup_method(self):
        self.manager = DeckManager()
        self.manager.load_decks_from_data(yaml.safe_load(VALID_YAML))

    def test_access_before_load(self):
        manager = DeckManager()
        assert manager.get_deck_count() == 0
        with pytest.raises(RuntimeError):
            manager.list_decks()

    def test_get_unknown_deck(self):
        assert self.manager.get_deck('cars') is None
        with pytest.raises(KeyError):
            self.manager.get_words('cars')

    def test_get_words_returns_copy(self):
        words = self.manager.get_words('food')
        words.append('tacos')
        assert self.manager.get_words('food') == ['pizza']

    def test_deck_to_dict(self):
        deck = Deck(id='food', name='Food', words=['pizza', 'tacos'])
        assert deck.to_dict() == {'id': 'food', 'name': 'Food', 'word_count': 2}
        assert deck.to_dict(include_words=True)['words'] == ['pizza', 'tacos']
