"""Command-line interface for the PAM vault API."""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install pam-client[cli]' to enable this command."
    ) from exc

from . import PAMClient
from .cli_schema import CLI_TABLE_VIEWS, TableView
from .config import ClientConfig
from .exceptions import PAMError

app = typer.Typer(help="Privileged access management vault CLI.", no_args_is_help=True)

accounts_app = typer.Typer(help="Account operations.")
platforms_app = typer.Typer(help="Platform operations.")
safes_app = typer.Typer(help="Safe operations.")
app.add_typer(accounts_app, name="accounts")
app.add_typer(platforms_app, name="platforms")
app.add_typer(safes_app, name="safes")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP activity to stderr."),
) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _build_client(
    identity_url: str | None,
    pcloud_url: str | None,
    client_id: str | None,
    client_secret: str | None,
    verify_ssl: bool,
    config_path: Path | None,
) -> PAMClient:
    if config_path:
        expanded = config_path.expanduser()
        if not expanded.exists():
            raise typer.BadParameter("Credentials file not found for --config option.")
        try:
            config = ClientConfig.from_toml(expanded)
        except (OSError, ValueError) as exc:
            raise typer.BadParameter(f"Unable to load credentials file: {exc}") from exc
        if not verify_ssl:
            config = replace(config, tls_skip_verify=True)
        return PAMClient(config)

    missing = [
        flag
        for flag, value in (
            ("--identity-url", identity_url),
            ("--pcloud-url", pcloud_url),
            ("--client-id", client_id),
            ("--client-secret", client_secret),
        )
        if not value
    ]
    if missing:
        raise typer.BadParameter(
            f"{', '.join(missing)} required unless --config points at a credentials file."
        )
    return PAMClient(
        ClientConfig(
            identity_tenant_url=identity_url or "",
            pcloud_url=pcloud_url or "",
            client_id=client_id or "",
            client_secret=client_secret or "",
            tls_skip_verify=not verify_ssl,
        )
    )


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


console = Console(force_terminal=False, color_system=None)


def _render_rich_table(view: TableView, rows: Sequence[Mapping[str, Any]]) -> None:
    table = Table(
        title=view.title,
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    for column in view.columns:
        table.add_column(column.header, justify=column.justify)
    ordered_rows = list(rows)
    if view.sort_key:
        ordered_rows.sort(key=view.sort_key)
    for row in ordered_rows:
        table.add_row(*(column.render(row) for column in view.columns))
    console.print(table)


def _present_output(payload: Any, *, view_id: str | None, json_output: bool) -> None:
    if json_output or view_id is None:
        _echo_json(payload)
        return
    view = CLI_TABLE_VIEWS.get(view_id)
    if not view:
        _echo_json(payload)
        return
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        _echo_json(payload)
        return
    rows = [item for item in payload if isinstance(item, Mapping)]
    if not rows:
        _echo_json(payload)
        return
    _render_rich_table(view, rows)


def _handle_error(exc: PAMError) -> None:
    if exc.status_code is not None:
        message = f"Request failed (status {exc.status_code}): {exc}"
    else:
        message = f"Request failed: {exc}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    # PAM_VERIFY_SSL accepts 1/0, true/false, yes/no, on/off.
    env_verify = os.getenv("PAM_VERIFY_SSL")
    default_verify = env_verify is None or env_verify.strip().lower() not in {
        "0",
        "false",
        "no",
        "off",
    }

    return {
        "identity_url": typer.Option(
            None,
            "--identity-url",
            envvar="PAM_IDENTITY_URL",
            help="Identity tenant base URL (issues platform tokens).",
        ),
        "pcloud_url": typer.Option(
            None,
            "--pcloud-url",
            envvar="PAM_PCLOUD_URL",
            help="Vault service base URL.",
        ),
        "client_id": typer.Option(
            None,
            "--client-id",
            "-u",
            envvar="PAM_CLIENT_ID",
            help="Service account user for the client-credentials grant.",
        ),
        "client_secret": typer.Option(
            None,
            "--client-secret",
            "-p",
            envvar="PAM_CLIENT_SECRET",
            help="Service account password.",
            hide_input=True,
        ),
        "verify_ssl": typer.Option(
            default_verify,
            "--verify/--no-verify",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "config_path": typer.Option(
            None,
            "--config",
            "-c",
            envvar="PAM_CONFIG",
            help="Path to a creds.toml file (idtenanturl, pcloudurl, user, pass).",
        ),
        "output_json": typer.Option(
            False,
            "--json",
            "-j",
            help="Return raw JSON instead of rendering a table.",
        ),
    }


_SHARED_OPTIONS = _shared_options()


@app.command("session")
def session_show(
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
) -> None:
    """Request a platform token and report its type and expiration."""

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            session = client.refresh_session()
        except PAMError as exc:
            _handle_error(exc)
            return

    _echo_json(
        {
            "tokenType": session.token_type,
            "expiration": session.expiration.isoformat(),
        }
    )


@platforms_app.command("list")
def platforms_list(
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List platforms with their required and optional properties."""

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            client.refresh_session()
            platforms = client.platforms.list()
        except PAMError as exc:
            _handle_error(exc)
            return
    _present_output(platforms, view_id="platforms.list", json_output=output_json)


@accounts_app.command("list")
def accounts_list(
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
    search: str | None = typer.Option(None, "--search", help="Keywords to search for."),
    search_type: str | None = typer.Option(
        None, "--search-type", help="contains (default on the server) or startswith."
    ),
    sort: str | None = typer.Option(None, "--sort", help="Property to sort by, e.g. 'name desc'."),
    filter_: str | None = typer.Option(
        None, "--filter", help="Filter expression, e.g. 'safeName eq mysafe1'."
    ),
    saved_filter: str | None = typer.Option(
        None, "--saved-filter", help="Named saved filter, e.g. Recently or Locked."
    ),
    offset: str | None = typer.Option(None, "--offset", help="Number of accounts to skip."),
    limit: str | None = typer.Option(None, "--limit", help="Page size, 0 - 1000."),
) -> None:
    """List accounts, optionally filtered and paged."""

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            client.refresh_session()
            result = client.accounts.list(
                search=search,
                search_type=search_type,
                sort=sort,
                filter=filter_,
                saved_filter=saved_filter,
                offset=offset,
                limit=limit,
            )
        except PAMError as exc:
            _handle_error(exc)
            return
    if output_json:
        _echo_json(result)
        return
    _present_output(result.get("value") or [], view_id="accounts.list", json_output=False)


@accounts_app.command("get")
def accounts_get(
    account_id: str = typer.Argument(..., help="Account identifier, e.g. 12_3."),
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
) -> None:
    """Show a single account."""

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            client.refresh_session()
            account = client.accounts.get(account_id)
        except PAMError as exc:
            _handle_error(exc)
            return
    _echo_json(account)


@safes_app.command("get")
def safes_get(
    safe_name: str = typer.Argument(..., help="Safe name."),
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
) -> None:
    """Show the details of a safe."""

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            client.refresh_session()
            safe = client.safes.get(safe_name)
        except PAMError as exc:
            _handle_error(exc)
            return
    _echo_json(safe)


@safes_app.command("add")
def safes_add(
    identity_url: str | None = _SHARED_OPTIONS["identity_url"],
    pcloud_url: str | None = _SHARED_OPTIONS["pcloud_url"],
    client_id: str | None = _SHARED_OPTIONS["client_id"],
    client_secret: str | None = _SHARED_OPTIONS["client_secret"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    config_path: Path | None = _SHARED_OPTIONS["config_path"],
    name: str = typer.Option(..., "--name", help="Safe name."),
    description: str | None = typer.Option(None, "--description", help="Safe description."),
    location: str | None = typer.Option(None, "--location", help="Vault location, default '\\'."),
    days_retention: int | None = typer.Option(
        None, "--days-retention", help="Days to retain old secret versions."
    ),
    versions_retention: int | None = typer.Option(
        None, "--versions-retention", help="Number of old secret versions to retain."
    ),
    managing_cpm: str | None = typer.Option(None, "--managing-cpm", help="Managing CPM user."),
    olac: bool = typer.Option(False, "--olac/--no-olac", help="Enable object level access."),
    auto_purge: bool = typer.Option(
        False, "--auto-purge/--no-auto-purge", help="Purge expired secret versions."
    ),
    existing_ok: bool = typer.Option(
        False,
        "--existing-ok/--fail-if-exists",
        help="Return the existing safe instead of failing when the name is taken.",
        show_default=True,
    ),
) -> None:
    """Create a safe."""

    payload: dict[str, Any] = {"safeName": name}
    if description:
        payload["description"] = description
    if location:
        payload["location"] = location
    if days_retention is not None:
        payload["numberOfDaysRetention"] = days_retention
    if versions_retention is not None:
        payload["numberOfVersionsRetention"] = versions_retention
    if managing_cpm:
        payload["managingCPM"] = managing_cpm
    if olac:
        payload["oLACEnabled"] = True
    if auto_purge:
        payload["autoPurgeEnabled"] = True

    with _build_client(
        identity_url=identity_url,
        pcloud_url=pcloud_url,
        client_id=client_id,
        client_secret=client_secret,
        verify_ssl=verify_ssl,
        config_path=config_path,
    ) as client:
        try:
            client.refresh_session()
            if existing_ok:
                result = client.safes.get_or_add(payload)
            else:
                result = client.safes.add(payload)
        except PAMError as exc:
            _handle_error(exc)
            return
    _echo_json(result)
