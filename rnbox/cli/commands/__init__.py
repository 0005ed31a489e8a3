"""CLI command modules."""

import typer

from .artifacts import artifacts_app
from .e2e import register_commands as register_e2e_commands


def register_all_commands(app: typer.Typer) -> None:
    register_e2e_commands(app)
    app.add_typer(artifacts_app, name="artifacts")
