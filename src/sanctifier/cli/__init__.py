"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__

app = typer.Typer(
    name="sanctifier",
    help=f"Sanctifier {__version__} - static analysis for Soroban smart contracts",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .complexity import complexity as _complexity  # noqa: F401, E402
from .init import init as _init  # noqa: F401, E402
