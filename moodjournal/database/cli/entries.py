"""
Entry Commands
---------------

Writing, browsing and deleting journal entries.

Commands:
    - write: Create or update an entry
    - show: Display the entry of one day
    - list: List entries (paginated, optionally filtered)
    - search: Find entries by text
    - delete: Remove an entry by id
"""
import sys

import click

from moodjournal.core.exceptions import AuthenticationError, DatabaseError, ValidationError
from moodjournal.core.logging_manager import handle_cli_error
from moodjournal.database.models import Mood
from moodjournal.database.results import DeleteResult, SaveStatus
from . import get_db

STATUS_ICONS = {
    SaveStatus.CREATED: "✅",
    SaveStatus.UPDATED: "✏️ ",
    SaveStatus.CONFLICT: "⚠️ ",
    SaveStatus.VALIDATION_ERROR: "❌",
    SaveStatus.NOT_FOUND: "❓",
}


def _format_line(entry) -> str:
    moods = ", ".join(m.value for m in entry.moods)
    title = f" {entry.title}" if entry.title else ""
    tags = f"  [{', '.join(entry.tag_names)}]" if entry.tags else ""
    return (
        f"  #{entry.id:<4} {entry.date_formatted}{title}  "
        f"({moods}; {entry.word_count} words){tags}"
    )


def _echo_entries(entries) -> None:
    if not entries:
        click.echo("No entries found")
        return
    for entry in entries:
        click.echo(_format_line(entry))


@click.group()
@click.pass_context
def entry(ctx: click.Context) -> None:
    """Write and browse journal entries."""
    pass


@entry.command("write")
@click.option("--date", "entry_date", default=None, help="Entry date (YYYY-MM-DD, default: today)")
@click.option("--title", default="", help="Entry title")
@click.option("--content", default=None, help="Entry text")
@click.option(
    "--file",
    "content_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read entry text from a file ('-' for stdin)",
)
@click.option(
    "--mood",
    required=True,
    type=click.Choice(Mood.choices(), case_sensitive=False),
    help="Primary mood",
)
@click.option(
    "--secondary",
    multiple=True,
    type=click.Choice(Mood.choices(), case_sensitive=False),
    help="Secondary mood (up to two)",
)
@click.option("--tag", "tag_names", multiple=True, help="Tag name (repeatable)")
@click.option("--id", "entry_id", type=int, default=None, help="Update this entry instead of creating one")
@click.pass_context
def write(ctx, entry_date, title, content, content_file, mood, secondary, tag_names, entry_id):
    """Create an entry, or update one with --id."""
    if content_file is not None:
        content = content_file.read()

    try:
        db = get_db(ctx)
        result = db.save_entry(
            {
                "id": entry_id,
                "date": entry_date or db.clock.today(),
                "title": title,
                "content": content,
                "primary_mood": mood,
                "secondary_moods": list(secondary),
                "tags": list(tag_names),
            }
        )
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "write_entry", {"date": entry_date, "entry_id": entry_id})
        return

    icon = STATUS_ICONS[result.status]
    if result.ok:
        saved = result.entry
        click.echo(
            f"{icon} Entry {result.status.value}: #{saved.id} {saved.date_formatted} "
            f"({saved.word_count} words)"
        )
    else:
        click.echo(f"{icon} {result.status.value}: {result.reason}", err=True)
        sys.exit(1)


@entry.command("show")
@click.argument("entry_date")
@click.pass_context
def show(ctx, entry_date):
    """Display the entry for ENTRY_DATE (YYYY-MM-DD)."""
    try:
        db = get_db(ctx)
        found = db.get_entry_by_date(entry_date)
    except (DatabaseError, ValidationError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "show_entry", {"date": entry_date})
        return

    if not found:
        click.echo(f"❌ No entry found for {entry_date}", err=True)
        sys.exit(1)

    click.echo(f"\n📅 {found.date_formatted}  #{found.id}")
    if found.title:
        click.echo(f"📝 {found.title}")
    click.echo(f"🙂 {found.primary_mood.value}")
    if found.secondary_moods:
        click.echo(f"   also: {', '.join(m.value for m in found.secondary_moods)}")
    if found.tags:
        click.echo(f"🏷️  Tags: {', '.join(found.tag_names)}")
    click.echo(f"📊 {found.word_count} words, {found.reading_time:.1f} min read\n")
    click.echo(found.content)


@entry.command("list")
@click.option("--page", default=1, show_default=True, help="Page number")
@click.option("--page-size", default=20, show_default=True, help="Entries per page")
@click.option("--start", default=None, help="First date (YYYY-MM-DD)")
@click.option("--end", default=None, help="Last date (YYYY-MM-DD)")
@click.option("--mood", default=None, help="Only entries with this mood")
@click.option("--tag", "tag_names", multiple=True, help="Only entries with any of these tags")
@click.pass_context
def list_entries(ctx, page, page_size, start, end, mood, tag_names):
    """List entries, newest first."""
    try:
        db = get_db(ctx)
        if start or end or mood or tag_names:
            entries = db.filter_entries(
                start=start, end=end, mood=mood, tags=list(tag_names)
            )
        else:
            entries = db.get_entries_page(page, page_size)
            total = db.count_entries()
            click.echo(f"📚 {total} entries (page {page})")
    except (DatabaseError, ValidationError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "list_entries")
        return

    _echo_entries(entries)


@entry.command("search")
@click.argument("term")
@click.pass_context
def search(ctx, term):
    """Find entries whose title or text contains TERM."""
    try:
        entries = get_db(ctx).search_entries(term)
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "search_entries", {"term": term})
        return

    click.echo(f"🔎 {len(entries)} matches for '{term}'")
    _echo_entries(entries)


@entry.command("delete")
@click.argument("entry_id", type=int)
@click.confirmation_option(prompt="Delete this entry?")
@click.pass_context
def delete(ctx, entry_id):
    """Delete entry ENTRY_ID."""
    try:
        result = get_db(ctx).delete_entry(entry_id)
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "delete_entry", {"entry_id": entry_id})
        return

    if result is DeleteResult.DELETED:
        click.echo(f"🗑️  Deleted entry #{entry_id}")
    else:
        click.echo(f"❓ No entry #{entry_id}", err=True)
        sys.exit(1)
