class ChouetteError(Exception):
    """Base class for chouette session and roster errors."""


class InvalidStateError(ChouetteError):
    """Raised when an operation is not permitted in the current session mode."""


class InvalidSeatingError(ChouetteError):
    """Raised when a seating is missing a required seat or repeats a player."""


class DuplicateSeatError(InvalidSeatingError):
    """Raised when a player would occupy more than one seat."""


class UnbalancedScoreError(ChouetteError):
    """Raised when entered scores do not balance or a Team member has no entry."""


class NotSeatedError(ChouetteError):
    """Raised when an operation references a player absent from the session."""


class StorageFailure(ChouetteError):
    """Raised when the session or roster could not be read or written."""


class PlayerNotFoundError(ChouetteError):
    """Raised when a roster lookup misses."""


class PlayerNameError(ChouetteError):
    """Raised when a player name is empty or already taken."""


class InvalidScoreError(ChouetteError, ValueError):
    """Raised when an entered score is not an integer or not an allowed value."""
