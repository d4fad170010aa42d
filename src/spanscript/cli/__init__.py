"""CLI entry point. Both `spanscript` and `spans` resolve here."""

from __future__ import annotations

import click

from spanscript.cli.auth import auth
from spanscript.cli.completions import completions
from spanscript.cli.connect import connect
from spanscript.cli.run import run, split_cmd
from spanscript.cli.schema import schema


@click.group()
@click.version_option(package_name="spanscript")
def main() -> None:
    """spanscript: run multi-statement SQL scripts against Cloud Spanner."""


main.add_command(auth)
main.add_command(connect)
main.add_command(schema)
main.add_command(run)
main.add_command(split_cmd)
main.add_command(completions)
