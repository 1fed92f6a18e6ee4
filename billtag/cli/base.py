import click
from flask.cli import with_appcontext

from billtag.core.extensions import db


@click.command()
@with_appcontext
def initdb():
    """Create the application DB tables."""
    db.create_all()
    click.echo(f"Created DB tables using engine: {db.engine.url!r}")


@click.command()
@click.confirmation_option(prompt="Are you sure you want to drop the database?")
@with_appcontext
def dropdb():
    """Drop the application DB."""
    click.echo(f"Dropping DB using engine: {db.engine.url!r}")
    db.drop_all()
