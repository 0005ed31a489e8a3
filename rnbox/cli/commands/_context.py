"""Access to the settings stored on the typer context."""

from typing import TYPE_CHECKING

import typer

from rnbox.config.settings import RnboxSettings, load_settings


if TYPE_CHECKING:
    from rnbox.cli.app import AppContext


def get_settings(ctx: typer.Context, **overrides: object) -> RnboxSettings:
    """Settings from the app context with non-None CLI overrides applied."""
    app_context: "AppContext | None" = ctx.obj
    settings = app_context.settings if app_context is not None else load_settings()
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update) if update else settings
