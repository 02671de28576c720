"""Exception hierarchy for the squaredle solver."""


class SquaredleError(Exception):
    """Base exception for solver failures."""


class LexiconLoadError(SquaredleError):
    """Raised when the word list cannot be read, fetched or decoded."""


class LexiconNotReady(SquaredleError):
    """Raised when a lexicon is requested before loading has finished."""
