import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from ember_nav.cli.definition import classify, definition
from ember_nav.cli.serve import serve_app
from ember_nav.config import get_log_level

app = typer.Typer(
    name="ember-nav",
    help="Ember navigation: go to definition in templates and scripts.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution details.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("definition")(definition)
app.command("classify")(classify)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
