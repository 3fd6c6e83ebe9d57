"""Exception hierarchy shared by every layer."""


class OpenWordsError(Exception):
    """Base class for all OpenWords errors."""


class InvalidGrade(OpenWordsError, ValueError):
    """A review score outside the 0..5 range."""

    def __init__(self, score: object):
        super().__init__(f"grade must be an integer in 0..5, got {score!r}")
        self.score = score


class InvalidSnapshot(OpenWordsError, ValueError):
    """A frontmatter snapshot that is missing fields or holds non-numeric values.

    Raised by snapshot parsing and always absorbed by the registry, which treats
    the word as absent.
    """


class CardOutOfScope(OpenWordsError):
    """The card is not part of the pool for the requested study mode."""

    def __init__(self, name: str, mode: str):
        super().__init__(f"{name!r} is not in the {mode!r} pool; grade skipped")
        self.name = name
        self.mode = mode


class CardNotFound(OpenWordsError, KeyError):
    """The backing note for a word does not exist."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"no note found for {self.name!r}"
