"""
Constants for the dataset loading pipeline.

Defines the loader state machine and the pipeline stages that errors are
tagged with.
"""


class LoaderState:
    """States of a single DatasetLoader.read invocation.

    idle -> fetching -> parsing -> completed
                  \\          \\
                   -> failed   -> failed

    Every invocation starts in IDLE and ends in exactly one terminal state.
    """

    IDLE = 'idle'
    FETCHING = 'fetching'
    PARSING = 'parsing'
    COMPLETED = 'completed'
    FAILED = 'failed'

    TERMINAL = frozenset([COMPLETED, FAILED])

    TRANSITIONS = {
        IDLE: frozenset([FETCHING]),
        FETCHING: frozenset([PARSING, FAILED]),
        PARSING: frozenset([COMPLETED, FAILED]),
        COMPLETED: frozenset(),
        FAILED: frozenset(),
    }

    @classmethod
    def all_states(cls):
        """Return all valid states."""
        return [
            cls.IDLE,
            cls.FETCHING,
            cls.PARSING,
            cls.COMPLETED,
            cls.FAILED,
        ]

    @classmethod
    def is_valid(cls, state: str) -> bool:
        """Check if a state is valid."""
        return state in cls.all_states()

    @classmethod
    def can_transition(cls, current: str, target: str) -> bool:
        """Check whether current -> target is a legal transition."""
        return target in cls.TRANSITIONS.get(current, frozenset())


class Stage:
    """Pipeline stages named by loader errors."""

    FETCH = 'fetch'
    PARSE = 'parse'
    ASSEMBLE = 'assemble'


class PayloadKind:
    """Raw payload formats produced by the fetcher, keyed to readers."""

    SERIES_MATRIX = 'series_matrix'
    GDS_SOFT = 'gds_soft'
