"""
Deck Manager for the Charades game

Handles loading and validation of the YAML file containing the word decks
players choose from before a game.
"""

import yaml
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)


@dataclass
class Deck:
    """A named collection of words used as the guessing pool."""
    id: str
    name: str
    words: List[str] = field(default_factory=list)

    def to_dict(self, include_words: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'name': self.name,
            'word_count': len(self.words)
        }
        if include_words:
            data['words'] = list(self.words)
        return data


class ContentValidationError(Exception):
    """Raised when YAML content validation fails."""
    pass


class DeckManager:
    """Manages loading and validation of word decks from YAML files."""

    def __init__(self, yaml_file_path: str = "decks.yaml"):
        """
        Initialize DeckManager with path to YAML file.

        Args:
            yaml_file_path: Path to the YAML file containing the decks
        """
        self.yaml_file_path = yaml_file_path
        self.decks: Dict[str, Deck] = {}
        self._loaded = False

    def load_decks_from_yaml(self) -> None:
        """
        Load decks from the YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ContentValidationError: If YAML structure is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        try:
            with open(self.yaml_file_path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file)

            self.load_decks_from_data(data)
            logger.info(f"Successfully loaded {len(self.decks)} decks from {self.yaml_file_path}")

        except FileNotFoundError:
            logger.error(f"YAML file not found: {self.yaml_file_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            raise
        except ContentValidationError as e:
            logger.error(f"Content validation error: {e}")
            raise

    def load_decks_from_data(self, data: Any) -> None:
        """Validate and load already-parsed deck data."""
        self.validate_yaml_structure(data)
        self.decks = self._parse_decks(data)
        self._loaded = True

    def validate_yaml_structure(self, data: Any) -> None:
        """
        Validate the structure of loaded YAML data.

        Args:
            data: Parsed YAML data to validate

        Raises:
            ContentValidationError: If structure is invalid
        """
        if not isinstance(data, dict):
            raise ContentValidationError("YAML root must be a dictionary")

        if 'decks' not in data:
            raise ContentValidationError("YAML must contain 'decks' key")

        decks = data['decks']
        if not isinstance(decks, list):
            raise ContentValidationError("'decks' must be a list")

        if len(decks) == 0:
            raise ContentValidationError("'decks' list cannot be empty")

        required_fields = {'id', 'name', 'words'}

        for i, deck_item in enumerate(decks):
            if not isinstance(deck_item, dict):
                raise ContentValidationError(f"Deck item {i} must be a dictionary")

            missing_fields = required_fields - set(deck_item.keys())
            if missing_fields:
                raise ContentValidationError(
                    f"Deck item {i} missing required fields: {missing_fields}"
                )

            words = deck_item['words']
            if not isinstance(words, list):
                raise ContentValidationError(f"Deck item {i} 'words' must be a list")
            if len(words) == 0:
                raise ContentValidationError(f"Deck item {i} 'words' list cannot be empty")
            for j, word in enumerate(words):
                if not isinstance(word, str):
                    raise ContentValidationError(f"Deck item {i} word {j} must be a string")
                if not word.strip():
                    raise ContentValidationError(f"Deck item {i} word {j} cannot be empty")

            for field_name in ['id', 'name']:
                value = deck_item[field_name]
                if not isinstance(value, str):
                    raise ContentValidationError(
                        f"Deck item {i} field '{field_name}' must be a string"
                    )
                if not value.strip():
                    raise ContentValidationError(
                        f"Deck item {i} field '{field_name}' cannot be empty"
                    )

        ids = [item['id'].strip() for item in decks]
        if len(ids) != len(set(ids)):
            raise ContentValidationError("Duplicate deck IDs found")

    def _parse_decks(self, data: Dict[str, Any]) -> Dict[str, Deck]:
        decks = {}
        for item in data['decks']:
            deck = Deck(
                id=item['id'].strip(),
                name=item['name'].strip(),
                words=[w.strip() for w in item['words']]
            )
            decks[deck.id] = deck
        return decks

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("No decks loaded. Call load_decks_from_yaml() first.")

    def list_decks(self) -> List[Deck]:
        """
        Get all loaded decks in file order.

        Raises:
            RuntimeError: If no decks are loaded
        """
        self._require_loaded()
        return list(self.decks.values())

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        """
        Get a specific deck by its ID.

        Args:
            deck_id: The ID of the deck to retrieve

        Returns:
            Deck if found, None otherwise
        """
        self._require_loaded()
        return self.decks.get(deck_id)

    def get_words(self, deck_id: str) -> List[str]:
        """
        Get a copy of a deck's words, in file order.

        Raises:
            KeyError: If the deck does not exist
        """
        deck = self.get_deck(deck_id)
        if deck is None:
            raise KeyError(deck_id)
        return list(deck.words)

    def is_loaded(self) -> bool:
        """Check if decks have been loaded."""
        return self._loaded

    def get_deck_count(self) -> int:
        """Get the number of loaded decks."""
        return len(self.decks) if self._loaded else 0
