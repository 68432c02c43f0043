"""WhyFi CLI."""

import logging
from typing import Annotated

import typer

from whyfi.cli.key import app as key_app
from whyfi.cli.network import app as network_app

app = typer.Typer(
    name="whyfi",
    help="WhyFi - figure out why your Wi-Fi sucks",
    no_args_is_help=True,
)

app.add_typer(key_app, name="key", help="OpenAI API key management")
app.registered_commands += network_app.registered_commands


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """WhyFi CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
