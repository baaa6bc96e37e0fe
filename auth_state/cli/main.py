"""
Command-line interface for the auth-state manager.

Operates on the JSON token store configured by ``TOKEN_STORE_PATH`` (or the
``--store`` option). ``validate`` and ``logout`` go through the same manager
the application uses. ``status`` is a read-only view of the raw store
contents and never changes them.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from typer import Argument, Option
from typing_extensions import Annotated

from auth_state.application.exceptions import TokenStoreError
from auth_state.application.factory import build_auth_state_service
from auth_state.cli.status import build_session_report, render_report
from auth_state.config import settings
from auth_state.domain.token_validation import TokenValidationService, get_token_expiration_date
from auth_state.infrastructure import log_utils
from auth_state.infrastructure.token_storage import JsonFileTokenStore

StoreOption = Annotated[
    Optional[Path],
    Option("--store", help="Path to the JSON token store. Defaults to TOKEN_STORE_PATH."),
]

app = typer.Typer(
    name="auth-state",
    help="Inspect and manage a persisted OIDC client session.",
    add_completion=False,
)


def _resolve_store(store: Optional[Path]) -> JsonFileTokenStore:
    return JsonFileTokenStore(store or settings.TOKEN_STORE_PATH)


@app.command()
def status(store: StoreOption = None) -> None:
    """Show the persisted state and the presence and expiry of each token."""
    token_store = _resolve_store(store)
    try:
        report = build_session_report(
            token_store,
            encoding=settings.TOKEN_STORAGE_ENCODING,
            offset_seconds=settings.SILENT_RENEW_OFFSET_IN_SECONDS,
        )
    except TokenStoreError as exc:
        typer.echo(f"Token store unavailable: {exc}", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"store          {token_store.path}")
    typer.echo(render_report(report))


@app.command()
def validate(store: StoreOption = None) -> None:
    """
    Check whether the stored session is still authorized.

    Exits 0 when the persisted state is Authorized and the id token (or,
    without one, the access token) has not expired; exits 1 otherwise.
    """
    try:
        service = build_auth_state_service(token_store=_resolve_store(store))
        valid = service.validate_storage_auth_tokens()
    except TokenStoreError as exc:
        typer.echo(f"Token store unavailable: {exc}", err=True)
        raise typer.Exit(code=2)

    if valid:
        typer.echo("Session is authorized.")
        raise typer.Exit(code=0)
    typer.echo("Session is not authorized.")
    raise typer.Exit(code=1)


@app.command()
def logout(store: StoreOption = None) -> None:
    """Mark the session unauthorized and clear every stored token."""
    try:
        service = build_auth_state_service(token_store=_resolve_store(store))
        service.set_unauthorized_and_fire_event()
    except TokenStoreError as exc:
        typer.echo(f"Token store unavailable: {exc}", err=True)
        raise typer.Exit(code=2)
    log_utils.info("Session cleared via CLI logout.", tag="CLI")
    typer.echo("Session cleared.")


@app.command(name="inspect-token")
def inspect_token(
    token: Annotated[str, Argument(help="Encoded JWT to inspect.")],
    offset: Annotated[
        Optional[int],
        Option("--offset", min=0, help="Early-expiry offset in seconds. Defaults to SILENT_RENEW_OFFSET_IN_SECONDS."),
    ] = None,
) -> None:
    """Print a token's expiry and whether it counts as expired."""
    offset_seconds = settings.SILENT_RENEW_OFFSET_IN_SECONDS if offset is None else offset
    expires_at = get_token_expiration_date(token)
    if expires_at is None:
        typer.echo("No decodable exp claim; token is treated as expired.")
        raise typer.Exit(code=1)

    expired = TokenValidationService().is_token_expired(token, offset_seconds)
    now = datetime.now(timezone.utc)
    typer.echo(f"expires  {expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    typer.echo(f"offset   {offset_seconds}s")
    typer.echo(f"now      {now.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    typer.echo(f"expired  {'yes' if expired else 'no'}")
    raise typer.Exit(code=1 if expired else 0)


if __name__ == "__main__":  # pragma: no cover
    app()
