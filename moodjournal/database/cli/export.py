"""
Export Commands
----------------

Commands:
    - json: Export entries and tags to one JSON file
    - markdown: Export one Markdown file per entry
"""
from pathlib import Path

import click

from moodjournal.core.exceptions import AuthenticationError, DatabaseError
from moodjournal.core.logging_manager import handle_cli_error
from moodjournal.core.paths import EXPORT_DIR
from . import get_db


@click.group()
@click.pass_context
def export(ctx: click.Context) -> None:
    """Export journal data."""
    pass


@export.command("json")
@click.argument(
    "output",
    type=click.Path(dir_okay=False),
    default=str(EXPORT_DIR / "journal.json"),
)
@click.pass_context
def export_json(ctx, output):
    """Export entries and tags to OUTPUT."""
    try:
        path = get_db(ctx).export_json(Path(output))
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "export_json", {"output": output})
        return

    click.echo(f"✅ Exported to {path}")


@export.command("markdown")
@click.argument(
    "output_dir",
    type=click.Path(file_okay=False),
    default=str(EXPORT_DIR / "markdown"),
)
@click.pass_context
def export_markdown(ctx, output_dir):
    """Export one Markdown file per entry under OUTPUT_DIR."""
    try:
        written = get_db(ctx).export_markdown(Path(output_dir))
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "export_markdown", {"output_dir": output_dir})
        return

    click.echo(f"✅ Exported {len(written)} entries to {output_dir}")
