"""OpenWords: spaced-repetition vocabulary study over an Obsidian vault."""

from openwords.consts import VERSION

__version__ = VERSION
