"""The `auth` command group: sign in to Cloud Spanner and manage stored credentials."""

from __future__ import annotations

import click

from spanscript.auth import (
    load_credentials,
    remove_credentials,
    spanner_oauth_flow,
    store_credentials,
)

_PROVIDER = click.argument("provider", type=click.Choice(["spanner"]), default="spanner")


@click.group()
def auth() -> None:
    """Manage stored credentials (~/.spanscript/credentials)."""


@auth.command("spanner")
@click.option(
    "--client-secrets",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="client_secrets.json of a desktop OAuth client in your GCP project.",
)
def spanner_login(client_secrets: str) -> None:
    """Sign in with a Google account and store a refresh token for Spanner.

    Without stored credentials, key_file or Application Default Credentials
    are used instead.
    """
    click.echo("Opening browser for Google sign-in...")
    try:
        creds_data = spanner_oauth_flow(client_secrets)
    except ImportError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from e
    except Exception as e:
        click.echo(f"error: OAuth flow failed: {e}", err=True)
        raise SystemExit(1) from e

    click.echo(f"Credentials saved to {store_credentials('spanner', creds_data)}")
    click.echo(
        'Try it: spanscript run "SELECT 1" --db spanner:project=P,instance=I,database=D'
    )


@auth.command()
@_PROVIDER
def status(provider: str) -> None:
    """Show whether credentials are stored."""
    if load_credentials(provider) is None:
        click.echo(f"{provider}: no stored credentials (key_file or ADC will be used)")
    else:
        click.echo(f"{provider}: authenticated (stored OAuth credentials)")


@auth.command()
@_PROVIDER
def logout(provider: str) -> None:
    """Delete stored credentials."""
    removed = remove_credentials(provider)
    click.echo(f"{provider}: {'credentials removed' if removed else 'nothing to remove'}")
