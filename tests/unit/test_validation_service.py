"""
Unit tests for ValidationService.
"""

import pytest

from charades.core.errors import ErrorCode, ValidationError
from charades.core.game_phases import Team
from charades.services.validation_service import ValidationService
from config_factory import override_config


class TestValidationService:
    """Input validation and sanitization."""

    def setup_method(self):
        self.validator = ValidationService()

    def test_session_id_is_stripped_and_lowercased(self):
        assert self.validator.validate_session_id('  Game-Night_1 ') == 'game-night_1'

    @pytest.mark.parametrize('session_id', [None, '', '   ', 42])
    def test_missing_session_id(self, session_id):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_session_id(session_id)
        assert exc_info.value.code == ErrorCode.MISSING_SESSION_ID

    def test_session_id_rejects_special_characters(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_session_id('game night!')
        assert exc_info.value.code == ErrorCode.INVALID_DATA

    def test_session_id_length_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_session_id('a' * 51)
        assert exc_info.value.details['max_length'] == 50

    def test_player_name_collapses_whitespace(self):
        assert self.validator.validate_player_name('  Mary   Ann ') == 'Mary Ann'

    def test_player_name_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_player_name('x' * 21)
        assert exc_info.value.code == ErrorCode.PLAYER_NAME_TOO_LONG

    def test_player_name_limit_follows_configuration(self):
        override_config('max_player_name_length', 5)
        with pytest.raises(ValidationError):
            self.validator.validate_player_name('Alexander')

    @pytest.mark.parametrize('raw,expected', [
        ('blue', Team.BLUE),
        (' RED ', Team.RED),
        (Team.BLUE, Team.BLUE),
    ])
    def test_validate_team(self, raw, expected):
        assert self.validator.validate_team(raw) is expected

    @pytest.mark.parametrize('raw', ['green', '', None, 3])
    def test_invalid_team(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_team(raw)
        assert exc_info.value.code == ErrorCode.INVALID_TEAM

    def test_team_capacity(self):
        self.validator.validate_team_capacity(9)
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_team_capacity(10)
        assert exc_info.value.code == ErrorCode.TEAM_FULL

    def test_word_list_is_copied_and_stripped(self):
        words = [' sol ', 'luna']
        cleaned = self.validator.validate_word_list(words)
        assert cleaned == ['sol', 'luna']
        assert cleaned is not words

    @pytest.mark.parametrize('words', [None, [], 'sol'])
    def test_no_words(self, words):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_word_list(words)
        assert exc_info.value.code == ErrorCode.NO_WORDS

    def test_invalid_word_reports_index(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_word_list(['sol', None])
        assert exc_info.value.code == ErrorCode.INVALID_WORD
        assert exc_info.value.details == {'index': 1}

    def test_request_data_must_be_dict(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_request_data(['session_id'])
        assert exc_info.value.code == ErrorCode.INVALID_DATA

    def test_request_data_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_request_data({}, ['session_id'])
        assert exc_info.value.code == ErrorCode.MISSING_SESSION_ID

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate_request_data({'session_id': 'x'}, ['session_id', 'team'])
        assert exc_info.value.code == ErrorCode.MISSING_DATA
