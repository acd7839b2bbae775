# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Unit tests for input resolution and validation.
"""

import pytest

from cardarchiver.config import build_config, get_input, load_config, parse_days_old
from cardarchiver.constants import DEFAULT_CLOSING_MESSAGE, GRAPHQL_TIMEOUT_SECONDS
from cardarchiver.errors import ConfigurationError


@pytest.fixture
def inputs():
    return {
        'access-token': 'fake_github_token',
        'column-to-archive': 'Done',
        'repository-owner': 'acme',
        'repository': 'widgets',
        'project-name': 'Roadmap',
        'days-old': '30',
    }


class TestBuildConfig:
    def test_builds_from_inputs(self, inputs):
        config = build_config(inputs)

        assert config.access_token == 'fake_github_token'
        assert config.column_to_archive == 'Done'
        assert config.repository_full_name == 'acme/widgets'
        assert config.project_name == 'Roadmap'
        assert config.days_old == 30
        assert config.timeout == GRAPHQL_TIMEOUT_SECONDS
        assert not config.dry_run and not config.strict

    @pytest.mark.parametrize('message', [None, '', '   '])
    def test_default_closing_message(self, inputs, message):
        inputs['closing-message'] = message

        assert build_config(inputs).closing_message == DEFAULT_CLOSING_MESSAGE

    def test_custom_closing_message(self, inputs):
        inputs['closing-message'] = 'Closed for inactivity.'

        assert build_config(inputs).closing_message == 'Closed for inactivity.'

    @pytest.mark.parametrize(
        'name', ['access-token', 'column-to-archive', 'repository-owner', 'repository', 'project-name', 'days-old']
    )
    def test_missing_required_input(self, inputs, name):
        inputs[name] = ''

        with pytest.raises(ConfigurationError, match=name):
            build_config(inputs)

    def test_lists_every_missing_input(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_config({})

        assert 'access-token' in str(exc_info.value)
        assert 'days-old' in str(exc_info.value)

    @pytest.mark.parametrize('timeout', [0, -5])
    def test_timeout_must_be_positive(self, inputs, timeout):
        with pytest.raises(ConfigurationError):
            build_config(inputs, timeout=timeout)

    def test_token_is_not_in_repr(self, inputs):
        assert 'fake_github_token' not in repr(build_config(inputs))


class TestParseDaysOld:
    @pytest.mark.parametrize('raw, expected', [('30', 30), (' 7 ', 7), ('0', 0)])
    def test_whole_numbers(self, raw, expected):
        assert parse_days_old(raw) == expected

    @pytest.mark.parametrize('raw', ['abc', '2.5', '30 days', '', '-1', '3_0', '٣٠', '+30'])
    def test_rejects_malformed(self, raw):
        with pytest.raises(ConfigurationError):
            parse_days_old(raw)

    def test_negative_has_specific_message(self):
        with pytest.raises(ConfigurationError, match='cannot be negative'):
            parse_days_old('-3')


class TestGetInput:
    def test_action_style_name(self):
        assert get_input('column-to-archive', {'INPUT_COLUMN-TO-ARCHIVE': ' Done '}) == 'Done'

    def test_underscore_name(self):
        assert get_input('column-to-archive', {'INPUT_COLUMN_TO_ARCHIVE': 'Done'}) == 'Done'

    def test_hyphen_form_wins(self):
        environ = {'INPUT_DAYS-OLD': '10', 'INPUT_DAYS_OLD': '20'}

        assert get_input('days-old', environ) == '10'

    def test_missing(self):
        assert get_input('days-old', {}) == ''


class TestLoadConfig:
    def test_overrides_take_precedence(self):
        environ = {
            'INPUT_ACCESS-TOKEN': 'env_token',
            'INPUT_COLUMN-TO-ARCHIVE': 'Done',
            'INPUT_REPOSITORY-OWNER': 'acme',
            'INPUT_REPOSITORY': 'widgets',
            'INPUT_PROJECT-NAME': 'Roadmap',
            'INPUT_DAYS-OLD': '30',
        }

        config = load_config({'days-old': '14', 'column-to-archive': None}, environ=environ, dry_run=True)

        assert config.access_token == 'env_token'
        assert config.days_old == 14
        assert config.column_to_archive == 'Done'
        assert config.dry_run

    def test_missing_inputs_raise(self):
        with pytest.raises(ConfigurationError):
            load_config({}, environ={})
