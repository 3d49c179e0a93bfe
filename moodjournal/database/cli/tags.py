"""
Tag Commands
-------------

Tag catalog browsing and usage-counter maintenance.

Commands:
    - list: Show tags with their usage
    - delete: Remove a tag from the catalog and from every entry
    - verify: Report tags whose stored usage disagrees with the entries
    - rebuild: Recompute usage counters from the entries
"""
import sys

import click

from moodjournal.core.exceptions import AuthenticationError, DatabaseError
from moodjournal.core.logging_manager import handle_cli_error
from . import get_db


@click.group()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """Browse and maintain tags."""
    pass


@tags.command("list")
@click.option("--by-usage", is_flag=True, help="Most used first")
@click.pass_context
def list_tags(ctx, by_usage):
    """List the current profile's tags."""
    try:
        rows = get_db(ctx).get_tags(order_by="usage_count" if by_usage else "name")
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "list_tags")
        return

    if not rows:
        click.echo("No tags")
        return
    for tag in rows:
        click.echo(f"  {tag.name:<20} {tag.usage_count:>4}  {tag.color}")


@tags.command("delete")
@click.argument("name")
@click.confirmation_option(prompt="Remove this tag from every entry?")
@click.pass_context
def delete_tag(ctx, name):
    """Delete tag NAME (case-insensitive)."""
    try:
        removed = get_db(ctx).delete_tag(name)
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "delete_tag", {"tag": name})
        return

    if removed:
        click.echo(f"🗑️  Deleted tag '{name}'")
    else:
        click.echo(f"❓ No tag '{name}'", err=True)
        sys.exit(1)


@tags.command("verify")
@click.pass_context
def verify(ctx):
    """Check stored usage counters against the entries."""
    try:
        mismatches = get_db(ctx).verify_tag_usage()
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "verify_tag_usage")
        return

    if not mismatches:
        click.echo("✅ All tag usage counters are consistent")
        return

    click.echo(f"⚠️  {len(mismatches)} tag(s) out of sync:")
    for name, (stored, actual) in sorted(mismatches.items()):
        click.echo(f"  {name}: stored {stored}, actual {actual}")
    sys.exit(1)


@tags.command("rebuild")
@click.pass_context
def rebuild(ctx):
    """Recompute usage counters from the entries."""
    try:
        changed = get_db(ctx).rebuild_tag_usage()
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "rebuild_tag_usage")
        return

    click.echo(f"🔧 Rebuilt usage counters ({changed} changed)")
