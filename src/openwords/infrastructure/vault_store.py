"""
Vault store: one markdown note per word, scheduling state in YAML frontmatter.

Implements both the SnapshotSource and PersistSink ports over a folder of an
Obsidian vault. The note's file stem is the word name.
"""

import logging
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

from openwords.domain.errors import CardNotFound
from openwords.domain.models import (
    SNAPSHOT_DUE_DATE,
    SNAPSHOT_EFACTOR,
    SNAPSHOT_INTERVAL,
    SNAPSHOT_MASTERED,
    SNAPSHOT_PATH,
    SNAPSHOT_REPETITION,
    SNAPSHOT_TAGS,
    FieldNames,
)
from openwords.domain.ports import WordStore
from openwords.infrastructure.utils.fs import iter_markdown_files
from openwords.infrastructure.utils.text import parse_frontmatter, update_frontmatter_fields


class VaultStore(WordStore):
    def __init__(self, words_dir: Path, field_names: FieldNames | None = None):
        self.words_dir = words_dir
        self.field_names = field_names or FieldNames()
        self.logger = logging.getLogger(__name__)
        self._paths: dict[str, Path] = {}

    # ---------- Naming ----------

    def contains_path(self, path: Path) -> bool:
        """Whether a changed file belongs to the word folder."""
        if path.suffix.lower() != ".md":
            return False
        try:
            path.resolve().relative_to(self.words_dir.resolve())
        except ValueError:
            return False
        return True

    @staticmethod
    def name_for(path: Path) -> str:
        return path.stem

    def path_for(self, name: str) -> Path:
        path = self._paths.get(name)
        if path is not None and path.exists():
            return path
        for candidate in iter_markdown_files(self.words_dir):
            if candidate.stem == name:
                self._paths[name] = candidate
                return candidate
        self._paths.pop(name, None)
        raise CardNotFound(name)

    # ---------- SnapshotSource ----------

    def read_all(self) -> dict[str, dict[str, Any] | None]:
        snapshots: dict[str, dict[str, Any] | None] = {}
        self._paths.clear()

        if not self.words_dir.exists():
            self.logger.warning(f"[vault] Word folder {self.words_dir} does not exist")
            return snapshots

        for md_path in iter_markdown_files(self.words_dir):
            name = self.name_for(md_path)
            if name in self._paths:
                self.logger.warning(
                    f"[vault] Duplicate word {name!r}: {md_path} shadows {self._paths[name]}"
                )
            self._paths[name] = md_path
            try:
                snapshots[name] = self._read_snapshot(md_path)
            except (OSError, UnicodeDecodeError) as e:
                self.logger.warning(f"Failed to read {md_path}: {e}")
                snapshots[name] = None

        if not snapshots:
            self.logger.info(f"[vault] No markdown files under {self.words_dir}")
        return snapshots

    def get_snapshot(self, name: str) -> dict[str, Any] | None:
        path = self.path_for(name)
        try:
            return self._read_snapshot(path)
        except FileNotFoundError:
            self._paths.pop(name, None)
            raise CardNotFound(name) from None

    def _read_snapshot(self, md_path: Path) -> dict[str, Any] | None:
        text = md_path.read_text(encoding="utf-8")
        meta, _ = parse_frontmatter(text)
        if not meta:
            return None
        if "__yaml_error__" in meta:
            self.logger.debug(f"[vault] Bad YAML in {md_path.name}: {meta['__yaml_error__']}")
            return None

        keys = self.field_names
        return {
            SNAPSHOT_PATH: str(md_path),
            SNAPSHOT_TAGS: meta.get(keys.tags),
            SNAPSHOT_MASTERED: meta.get(keys.mastered),
            SNAPSHOT_DUE_DATE: meta.get(keys.due_date),
            SNAPSHOT_INTERVAL: meta.get(keys.interval),
            SNAPSHOT_EFACTOR: meta.get(keys.efactor),
            SNAPSHOT_REPETITION: meta.get(keys.repetition),
        }

    # ---------- PersistSink ----------

    def write_fields(self, name: str, fields: Mapping[str, Any]) -> None:
        path = self.path_for(name)
        keys = self.field_names
        key_map = {
            SNAPSHOT_DUE_DATE: keys.due_date,
            SNAPSHOT_INTERVAL: keys.interval,
            SNAPSHOT_EFACTOR: keys.efactor,
            SNAPSHOT_REPETITION: keys.repetition,
            SNAPSHOT_MASTERED: keys.mastered,
        }

        updates: dict[str, Any] = {}
        for field, value in fields.items():
            if field not in key_map:
                raise ValueError(f"field {field!r} cannot be written to a word note")
            if field == SNAPSHOT_DUE_DATE and isinstance(value, str):
                # Stored as a bare YAML date, as Obsidian writes it
                value = date.fromisoformat(value)
            updates[key_map[field]] = value

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._paths.pop(name, None)
            raise CardNotFound(name) from None

        new_text = update_frontmatter_fields(text, updates)
        if new_text != text:
            path.write_text(new_text, encoding="utf-8")
            self.logger.debug(f"[write] {path}: updated {', '.join(updates)}")
