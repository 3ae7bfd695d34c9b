import click
from flask import current_app
from flask.cli import with_appcontext


@click.command("ensure-indexes")
@with_appcontext
def ensure_indexes_command():
    """Create the unique and sort indexes for every resource collection."""
    registry = current_app.extensions["resources"]
    for name in registry.ensure_indexes():
        click.echo(f"Indexes ensured for {name}")


def register_commands(app):
    app.cli.add_command(ensure_indexes_command)
