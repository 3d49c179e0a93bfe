"""
Setup & Initialization Commands
--------------------------------

Database initialization and seeding commands.

Commands:
    - init: Create the database (or migrate an existing one)
    - seed: Insert starter tags for the current profile
"""
import click

from moodjournal.core.logging_manager import handle_cli_error
from moodjournal.core.exceptions import AuthenticationError, DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database schema and bring it to the latest revision."""
    try:
        click.echo("🚀 Initializing moodjournal database...")
        db = get_db(ctx)
        db.initialize_schema()

        history = db.get_migration_history()
        click.echo(f"🗄️  Database: {db.db_path}")
        click.echo(f"📌 Revision: {history['current_revision']}")
        click.echo("✅ Database initialized!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.pass_context
def seed(ctx):
    """Insert the starter tags for the current profile (only if it has none)."""
    try:
        db = get_db(ctx)
        created = db.seed_user()

        if created:
            click.echo(f"🏷️  Created {created} starter tags")
        else:
            click.echo("ℹ️  Profile already has tags, nothing seeded")

    except (DatabaseError, AuthenticationError) as e:
        handle_cli_error(ctx, e, "seed", {"user_id": ctx.obj["user_id"]})
