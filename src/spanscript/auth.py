"""Spanner credentials: service-account key files, a browser OAuth flow and a local token store.

Stored credentials live in ~/.spanscript/credentials/<provider>.json, readable
by the owner only.
"""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path

_CREDENTIALS_DIR = Path.home() / ".spanscript" / "credentials"
_FILE_MODE = 0o600

SPANNER_SCOPES = [
    "https://www.googleapis.com/auth/spanner.admin",
    "https://www.googleapis.com/auth/spanner.data",
]

# Fields of an authorized_user credentials file.
_AUTHORIZED_USER_FIELDS = ("client_id", "client_secret", "refresh_token", "token_uri")


def _store_file(provider: str) -> Path:
    return _CREDENTIALS_DIR / f"{provider}.json"


def store_credentials(provider: str, creds_data: dict) -> Path:
    target = _store_file(provider)
    target.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
    with os.fdopen(fd, "w") as f:
        json.dump(creds_data, f, indent=2)
    os.chmod(target, _FILE_MODE)
    return target


def load_credentials(provider: str) -> dict | None:
    target = _store_file(provider)
    if not target.is_file():
        return None
    with target.open() as f:
        return json.load(f)


def remove_credentials(provider: str) -> bool:
    """Delete the stored credentials of ``provider``; False if there were none."""
    try:
        _store_file(provider).unlink()
    except FileNotFoundError:
        return False
    return True


def spanner_oauth_flow(client_secrets_file: str) -> dict:
    """Sign in through the browser and return authorized_user credentials to store.

    ``client_secrets_file`` is the client_secrets.json of a desktop OAuth
    client in the user's GCP project.
    """
    try:
        from google_auth_oauthlib.flow import InstalledAppFlow
    except ImportError as e:
        raise ImportError(
            "Signing in needs google-auth-oauthlib. "
            "Install with: pip install 'spanscript[spanner]'"
        ) from e

    flow = InstalledAppFlow.from_client_secrets_file(client_secrets_file, scopes=SPANNER_SCOPES)
    credentials = flow.run_local_server(port=0)
    return {
        "type": "authorized_user",
        **{name: getattr(credentials, name) for name in _AUTHORIZED_USER_FIELDS},
    }


def load_spanner_credentials(key_file: str | None = None):
    """Resolve Spanner credentials: key file, then stored OAuth token, then ADC.

    Returns None when nothing is found so the client library can apply its
    own defaults.
    """
    if key_file:
        from google.oauth2 import service_account

        return service_account.Credentials.from_service_account_file(
            key_file, scopes=SPANNER_SCOPES
        )

    stored = load_credentials("spanner")
    if stored is not None:
        from google.oauth2.credentials import Credentials

        # An incomplete token file falls through to ADC.
        with contextlib.suppress(ValueError):
            return Credentials.from_authorized_user_info(stored, scopes=SPANNER_SCOPES)

    import google.auth
    from google.auth.exceptions import DefaultCredentialsError

    try:
        credentials, _ = google.auth.default(scopes=SPANNER_SCOPES)
    except DefaultCredentialsError:
        return None
    return credentials
