from pathlib import Path

import pytest


@pytest.fixture
def mock_vault(tmp_path):
    """Creates a temporary directory structure mimicking a vault."""
    d = tmp_path / "MyVault"
    d.mkdir()
    (d / "Words").mkdir()
    return d


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for key in ("OPENWORDS_VAULT_ROOT", "OPENWORDS_FOLDER_PATH", "OPENWORDS_ENABLED_TAGS"):
        monkeypatch.delenv(key, raising=False)
    return home


def write_word(
    folder: Path,
    name: str,
    *,
    tags=("L1",),
    due="2024-01-01",
    interval=0,
    efactor=250,
    repetition=0,
    mastered=None,
    body="Meaning goes here.\n",
) -> Path:
    """Write a word note with scheduling frontmatter."""
    lines = ["---"]
    if tags is not None:
        lines.append("tags:")
        lines.extend(f"  - {t}" for t in tags)
    if due is not None:
        lines.append(f"due_date: {due}")
    if interval is not None:
        lines.append(f"interval: {interval}")
    if efactor is not None:
        lines.append(f"efactor: {efactor}")
    if repetition is not None:
        lines.append(f"repetition: {repetition}")
    if mastered is not None:
        lines.append(f"mastered: {'true' if mastered else 'false'}")
    lines.append("---")
    path = folder / f"{name}.md"
    path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
    return path


@pytest.fixture
def word_writer():
    return write_word
