"""
Statistics Commands
--------------------

Dashboard statistics for the current profile.

Commands:
    - stats: Mood, tag and word-count summary
    - streak: Current and longest writing streaks
"""
import json

import click

from moodjournal.core.exceptions import AuthenticationError, DatabaseError
from moodjournal.core.logging_manager import handle_cli_error
from . import get_db


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the full snapshot as JSON")
@click.pass_context
def stats(ctx, as_json):
    """Show journal statistics."""
    try:
        snapshot = get_db(ctx).build_analytics()
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "stats")
        return

    if as_json:
        click.echo(json.dumps(snapshot.to_dict(), indent=2, default=str))
        return

    click.echo("📊 Journal statistics")
    click.echo(f"  Entries:        {snapshot.total_entries}")
    click.echo(f"  Total words:    {snapshot.total_words}")
    click.echo(f"  Average words:  {snapshot.average_word_count}")
    click.echo(f"  Current streak: {snapshot.streaks.current_streak}")

    if snapshot.frequent_moods:
        click.echo("\n🙂 Frequent moods")
        for stat in snapshot.frequent_moods:
            click.echo(f"  {stat.mood:<12} {stat.count:>4}  {stat.percentage:.2f}%")

    if any(snapshot.valence_breakdown.values()):
        click.echo("\n⚖️  Valence")
        for valence, count in snapshot.valence_breakdown.items():
            click.echo(f"  {valence:<12} {count:>4}")

    if snapshot.most_used_tags:
        click.echo("\n🏷️  Most used tags")
        for stat in snapshot.most_used_tags:
            click.echo(f"  {stat.name:<12} {stat.count:>4}")


@click.command()
@click.pass_context
def streak(ctx):
    """Show writing streaks."""
    try:
        streaks = get_db(ctx).get_streaks()
    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "streak")
        return

    click.echo(f"🔥 Current streak: {streaks.current_streak} day(s)")
    click.echo(f"🏆 Longest streak: {streaks.longest_streak} day(s)")
    click.echo(f"📅 Days written:   {streaks.total_entries}")
    click.echo(f"🕳️  Missed days:    {streaks.missed_days}")
