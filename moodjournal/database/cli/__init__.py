#!/usr/bin/env python3
"""
moodjournal Database CLI
------------------------

Command-line interface for the journal database.

This module provides the main CLI group and shared context setup
for all database commands.

Command Structure:
    - Setup & Initialization (init, seed)
    - Entries (entry write|show|list|search|delete)
    - Tags (tags list|delete|verify|rebuild)
    - Statistics (stats, streak)
    - Export (export json|markdown)

Usage:
    # Get general help
    journaldb --help

    # Write today's entry for user 1
    journaldb --user 1 entry write --mood calm --content "A quiet day."

    # Get help for a specific command
    journaldb entry list --help
"""
import logging
from pathlib import Path

import click

from moodjournal.core.context import StaticAuthContext
from moodjournal.core.paths import DB_PATH, LOG_DIR, SEEDS_PATH
from moodjournal.core.seeds import load_seeds
from moodjournal.database import JournalDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--seeds",
    "seeds_path",
    type=click.Path(),
    default=str(SEEDS_PATH),
    help="Path to the seed YAML file (moods and starter tags)",
)
@click.option(
    "--user",
    "user_id",
    type=int,
    default=1,
    show_default=True,
    envvar="MOODJOURNAL_USER",
    help="Profile id to act as",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, seeds_path, user_id, verbose):
    """moodjournal Database Management CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["seeds_path"] = Path(seeds_path)
    ctx.obj["user_id"] = user_id
    ctx.obj["verbose"] = verbose


def get_db(ctx) -> JournalDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        db = JournalDB(
            db_path=ctx.obj["db_path"],
            log_dir=ctx.obj["log_dir"],
            auth=StaticAuthContext(ctx.obj["user_id"]),
            seeds=load_seeds(ctx.obj["seeds_path"]),
        )
        ctx.obj["db"] = db
        ctx.obj["logger"] = db.logger
        ctx.call_on_close(db.close)
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, seed  # noqa: E402
from .entries import entry  # noqa: E402
from .tags import tags  # noqa: E402
from .stats import stats, streak  # noqa: E402
from .export import export  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(seed)
cli.add_command(stats)
cli.add_command(streak)

# Register command groups
cli.add_command(entry)
cli.add_command(tags)
cli.add_command(export)


if __name__ == "__main__":
    cli(obj={})
