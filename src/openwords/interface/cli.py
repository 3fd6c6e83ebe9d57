"""OpenWords CLI: scan, inspect, grade and annotate a vocabulary vault."""

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from openwords.application.config import resolve_config
from openwords.application.factory import get_study_service
from openwords.domain.errors import CardNotFound, CardOutOfScope, InvalidGrade
from openwords.interface._common import _resolve_with_overrides

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="openwords: spaced-repetition vocabulary study for Obsidian vaults.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage openwords configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

VaultOption = Annotated[
    Path | None,
    typer.Option("--vault", help="Vault root. Defaults to 'vault_root' in config, or CWD."),
]
FolderOption = Annotated[
    str | None, typer.Option("--folder", help="Word folder relative to the vault root.")
]
TagOption = Annotated[
    list[str] | None,
    typer.Option("--tag", "-t", help="Enabled tag. Repeat for several; overrides config."),
]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for openwords."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


STUDY_MODES = ("new", "due", "review")


def _check_mode(mode: str) -> None:
    if mode not in STUDY_MODES:
        typer.secho(f"Unknown mode {mode!r}; use new or due.", fg="red")
        raise typer.Exit(2)


def _service(vault: Path | None, folder: str | None, tags: list[str] | None):
    config = _resolve_with_overrides(vault_root=vault, folder_path=folder, enabled_tags=tags)
    if config.verbose > 1:
        logging.getLogger().setLevel(logging.DEBUG)
    return get_study_service(config)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def scan(vault: VaultOption = None, folder: FolderOption = None, tag: TagOption = None):
    """[bold green]Scan[/bold green] the word folder and report what was found."""
    service = _service(vault, folder, tag)
    counts = service.counts()
    typer.echo(
        f"Tracked: {counts.total}  Enabled: {counts.total - counts.disabled}"
        f"  Mastered: {counts.mastered}"
    )


@app.command()
def status(
    vault: VaultOption = None,
    folder: FolderOption = None,
    tag: TagOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show pool sizes: new, review, due today, mastered, disabled, total."""
    service = _service(vault, folder, tag)
    counts = service.counts()

    if json_output:
        typer.echo(json.dumps(dataclasses.asdict(counts), indent=2))
        return

    typer.echo(f"New:       {counts.new}")
    typer.echo(f"Review:    {counts.review}")
    typer.echo(f"Due today: {counts.due_today}")
    typer.echo(f"Mastered:  {counts.mastered}")
    typer.echo(f"Disabled:  {counts.disabled}")
    typer.echo(f"Total:     {counts.total}")


@app.command("next")
def next_card(
    mode: Annotated[str, typer.Argument(help="Study mode: new or due.")] = "due",
    vault: VaultOption = None,
    folder: FolderOption = None,
    tag: TagOption = None,
):
    """Print the word the sampler would present next."""
    _check_mode(mode)
    service = _service(vault, folder, tag)
    card = service.next_card(mode)
    if card is None:
        typer.secho("Nothing to study.", fg="yellow")
        return
    typer.echo(card.front)


@app.command("grade")
def grade_cmd(
    word: Annotated[str, typer.Argument(help="Word (note name) to grade.")],
    score: Annotated[int, typer.Argument(help="Grade 0..5; below 3 is a lapse.")],
    mode: Annotated[str, typer.Option(help="Pool the word is studied from: new or due.")] = "due",
    vault: VaultOption = None,
    folder: FolderOption = None,
    tag: TagOption = None,
):
    """Grade one word and write its next schedule back to the note."""
    _check_mode(mode)
    service = _service(vault, folder, tag)
    try:
        result = service.grade_card(word, score, mode)
    except (InvalidGrade, CardOutOfScope, CardNotFound) as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    typer.echo(
        f"{word}: efactor {result.efactor:.2f}  repetition {result.repetition}"
        f"  interval {result.interval}  due {result.due_date.isoformat()}"
    )


@app.command()
def annotate(
    path: Annotated[Path, typer.Argument(help="Markdown file to annotate.")],
    write: Annotated[
        bool, typer.Option("--write", "-w", help="Rewrite the file instead of printing.")
    ] = False,
    vault: VaultOption = None,
    folder: FolderOption = None,
    tag: TagOption = None,
):
    """Link weakly known words in a note and unlink words already learned."""
    if not path.is_file():
        typer.secho(f"File not found: {path}", fg="red")
        raise typer.Exit(1)

    service = _service(vault, folder, tag)
    # newline="" keeps CRLF endings as they are
    with open(path, encoding="utf-8", newline="") as f:
        text = f.read()
    updated = service.annotate(text)

    if not write:
        typer.echo(updated, nl=False)
        return

    if updated != text:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)
        typer.secho(f"Annotated {path.name}", fg="green")
    else:
        typer.echo(f"{path.name} already up to date")


@app.command()
def reset(
    vault: VaultOption = None,
    folder: FolderOption = None,
    tag: TagOption = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Reset every enabled word to a fresh schedule due today."""
    service = _service(vault, folder, tag)
    counts = service.counts()
    enabled = counts.total - counts.disabled
    if enabled == 0:
        typer.secho("No enabled words to reset.", fg="yellow")
        return

    if not force:
        typer.confirm(f"Reset {enabled} words? This discards their progress.", abort=True)

    count = service.reset_enabled()
    typer.secho(f"Reset {count} words.", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
