"""Command-line interface registration for the Flask application."""

from __future__ import annotations

import click
from flask import Flask
from flask.cli import with_appcontext

from marketplace.core.extensions import db


@click.command("create-schema")
@click.option("--drop", is_flag=True, help="Drop existing tables first.")
@with_appcontext
def create_schema(drop: bool) -> None:
    """Create all tables directly from the models (local SQLite, demos).

    Use ``flask db upgrade`` for databases managed through migrations.
    """
    if drop:
        db.drop_all()
        click.echo("Dropped all tables.")
    db.create_all()
    click.echo("Schema created.")


def init_app(app: Flask) -> None:
    """Register application-specific CLI commands.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        schema command.
    """
    app.cli.add_command(create_schema)
