"""Tests for loader constants"""

import pytest
from expression_matrix.core.types import LoaderState, Stage


class TestLoaderState:
    """Test LoaderState constants and transitions."""

    def test_state_constants_exist(self):
        """Test that all state constants are defined."""
        assert LoaderState.IDLE == 'idle'
        assert LoaderState.FETCHING == 'fetching'
        assert LoaderState.PARSING == 'parsing'
        assert LoaderState.COMPLETED == 'completed'
        assert LoaderState.FAILED == 'failed'

    def test_all_states(self):
        """Test that all_states() returns all state constants."""
        assert len(LoaderState.all_states()) == 5

    def test_is_valid(self):
        """Test is_valid() accepts only defined states."""
        for state in LoaderState.all_states():
            assert LoaderState.is_valid(state)
        assert not LoaderState.is_valid('cancelled')
        assert not LoaderState.is_valid('IDLE')

    @pytest.mark.parametrize('current, target', [
        (LoaderState.IDLE, LoaderState.FETCHING),
        (LoaderState.FETCHING, LoaderState.PARSING),
        (LoaderState.FETCHING, LoaderState.FAILED),
        (LoaderState.PARSING, LoaderState.COMPLETED),
        (LoaderState.PARSING, LoaderState.FAILED),
    ])
    def test_legal_transitions(self, current, target):
        """Test the happy path and failure edges are allowed."""
        assert LoaderState.can_transition(current, target)

    @pytest.mark.parametrize('current, target', [
        (LoaderState.IDLE, LoaderState.PARSING),
        (LoaderState.IDLE, LoaderState.COMPLETED),
        (LoaderState.FETCHING, LoaderState.COMPLETED),
        (LoaderState.COMPLETED, LoaderState.FETCHING),
        (LoaderState.FAILED, LoaderState.FETCHING),
        (LoaderState.COMPLETED, LoaderState.FAILED),
    ])
    def test_illegal_transitions(self, current, target):
        """Test skipping stages or leaving a terminal state is not allowed."""
        assert not LoaderState.can_transition(current, target)

    def test_terminal_states(self):
        """Test completed and failed are terminal."""
        assert LoaderState.TERMINAL == {LoaderState.COMPLETED, LoaderState.FAILED}


class TestStage:
    """Test Stage constants."""

    def test_stage_constants(self):
        assert Stage.FETCH == 'fetch'
        assert Stage.PARSE == 'parse'
        assert Stage.ASSEMBLE == 'assemble'
