"""
Ports (interfaces) for the external collaborators of the study core.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol


class SnapshotSource(ABC):
    """
    Port for reading per-word frontmatter snapshots.

    Implementations:
        - VaultStore: one markdown note per word inside an Obsidian vault.
    """

    @abstractmethod
    def get_snapshot(self, name: str) -> dict[str, Any] | None:
        """
        Fetch the current snapshot for a word.

        Returns:
            A mapping with the canonical snapshot keys (efactor scaled by 100),
            or None when the note exists but carries no usable frontmatter.

        Raises:
            CardNotFound: If no note backs this name.
        """

    @abstractmethod
    def read_all(self) -> dict[str, dict[str, Any] | None]:
        """Snapshot every word in scope, keyed by name. Used for full rescans."""


class PersistSink(ABC):
    """Port for writing updated scheduling fields back to storage."""

    @abstractmethod
    def write_fields(self, name: str, fields: Mapping[str, Any]) -> None:
        """
        Merge the given canonical fields into the word's stored record.

        Raises:
            CardNotFound: If no note backs this name.
        """


class WordStore(SnapshotSource, PersistSink, ABC):
    """A store that is both snapshot source and persist sink."""


class Lemmatizer(Protocol):
    """Pure token -> lemma function. An empty result means "no lemma"."""

    def __call__(self, token: str) -> str: ...
