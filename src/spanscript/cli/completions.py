"""The `completions` command: list static keyword and function completions."""

from __future__ import annotations

import json

import click

from spanscript.completions import get_static_completions


@click.command("completions")
@click.option(
    "--format", "output_format", type=click.Choice(["json", "text"]), default="json",
)
def completions(output_format: str) -> None:
    """List keywords and built-in functions offered for completion."""
    items = sorted(get_static_completions().values(), key=lambda c: c.sort_text)
    if output_format == "json":
        click.echo(json.dumps([
            {
                "label": c.label,
                "detail": c.detail,
                "filterText": c.filter_text,
                "sortText": c.sort_text,
                "documentation": {"kind": "markdown", "value": c.documentation},
            }
            for c in items
        ], indent=2))
    else:
        for c in items:
            click.echo(c.label)
