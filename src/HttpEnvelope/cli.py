"""Typer-based CLI for resolving templates, parsing MIME types, and issuing requests."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from HttpEnvelope.client import RestClient
from HttpEnvelope.errors import HttpEnvelopeError
from HttpEnvelope.logging_config import setup_logging
from HttpEnvelope.mime import parse_mime_type
from HttpEnvelope.paths import resolve_url
from HttpEnvelope.settings import LoggingSettings, get_settings

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="HttpEnvelope request builder and response inspector")


# ============================================================================
# Helpers
# ============================================================================


def _parse_pairs(values: Optional[List[str]], separator: str, label: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values or []:
        key, found, rest = value.partition(separator)
        if not found or not key.strip():
            raise typer.BadParameter(f"Expected NAME{separator}VALUE, got {value!r}", param_hint=label)
        pairs.append((key.strip(), rest.strip() if separator == ":" else rest))
    return pairs


def _fail(exc: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


# ============================================================================
# Commands
# ============================================================================


@app.command("resolve")
def resolve_command(
    template: str = typer.Argument(..., help="Path template or URL with :name placeholders"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="NAME=VALUE parameter"),
) -> None:
    """Resolve a path template without sending a request."""
    try:
        typer.echo(resolve_url(None, template, _parse_pairs(param, "=", "--param")))
    except (HttpEnvelopeError, ValueError, TypeError) as exc:
        _fail(exc)


@app.command("parse-mime")
def parse_mime_command(
    value: str = typer.Argument(..., help="Content-Type header value"),
) -> None:
    """Show the facets of a Content-Type value."""
    mime = parse_mime_type(value)
    table = Table(title="MIME type")
    table.add_column("Facet")
    table.add_column("Value")
    for facet, facet_value in mime.as_dict().items():
        table.add_row(facet, "" if facet_value is None else facet_value)
    console.print(table)


@app.command("request")
def request_command(
    method: str = typer.Argument(..., help="HTTP method"),
    template: str = typer.Argument(..., help="Path template or URL with :name placeholders"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="NAME=VALUE parameter"),
    header: Optional[List[str]] = typer.Option(None, "--header", "-H", help="'Name: value' header"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL for the template"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Raw request body"),
    raw: bool = typer.Option(
        False, "--raw/--decode", help="Print the rendered HTTP message or the decoded body"
    ),
    default_type: Optional[str] = typer.Option(
        None, "--default-type", help="Content type assumed when the response has none"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
) -> None:
    """Send a request and print the decoded body (or the raw message)."""
    settings = get_settings()
    setup_logging(
        LoggingSettings(
            level="DEBUG" if verbose else settings.logging.level,
            emit_json_logs=settings.logging.emit_json_logs,
        )
    )
    try:
        params = _parse_pairs(param, "=", "--param")
        headers = dict(_parse_pairs(header, ":", "--header"))
        with RestClient(base_url, settings=settings, logger=logging.getLogger("HttpEnvelope.cli")) as api:
            envelope = api.request(
                method,
                template,
                params,
                headers=headers,
                body=data.encode("utf-8") if data is not None else None,
            )
            if raw:
                typer.echo(str(envelope))
                return
            console.print(f"[bold]{envelope.status()}[/bold] {envelope.url('host') or ''}")
            typer.echo(json.dumps(envelope.decode(default_type), indent=2, ensure_ascii=False))
    except HttpEnvelopeError as exc:
        _fail(exc)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
