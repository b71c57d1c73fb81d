class ScoreboardError(Exception):
    """Base class for scoreboard failures. None of them are fatal."""


class ValidationError(ScoreboardError):
    """Malformed user input: bad id, non-numeric score, unknown direction."""


class PersistenceError(ScoreboardError):
    """The backing store could not be read or written."""


class StateError(ScoreboardError):
    """An operation was requested in a phase that does not allow it."""
