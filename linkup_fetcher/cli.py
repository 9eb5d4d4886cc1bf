"""Command-line entry point for the LinkUp fetcher."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import aiohttp
import click
from dotenv import load_dotenv

from . import __version__
from .auth import LinkupAuthenticator
from .config import LinkupConfig, ModuleManifest
from .credentials import FileCredentialStore
from .errors import LinkupClientError, LinkupConfigError
from .http import LinkupHttpClient
from .session import LinkupSession

_LOGGER = logging.getLogger(__name__)

# sysexits.h
EX_OK = 0
EX_UNAVAILABLE = 69
EX_CONFIG = 78


def _configure_logging(verbose: int, debug: bool) -> None:
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def prompt_verification_code(message: str) -> str:
    """Ask the user for the verification code sent by LinkedIn."""
    click.echo("Verification code required.", err=True)
    click.echo(f"LinkUp API response: `{message}`", err=True)
    while True:
        code = click.prompt(
            "Enter code", default="", show_default=False, err=True
        ).strip()
        if code:
            return code


def _emit(result: Any, *, limit: int | None, output: str) -> None:
    if isinstance(result, list):
        items = result if limit is None else result[:limit]
        if output == "json":
            click.echo(json.dumps(items, indent=2, ensure_ascii=False))
        else:
            for item in items:
                click.echo(json.dumps(item, ensure_ascii=False))
        return

    indent = 2 if output == "json" else None
    click.echo(json.dumps(result, indent=indent, ensure_ascii=False))


async def _run(
    config: LinkupConfig,
    urls: tuple[str, ...],
    *,
    limit: int | None,
    output: str,
) -> None:
    async with aiohttp.ClientSession() as http_session:
        http = LinkupHttpClient(
            http_session,
            config.api_key,
            base_url=config.api_base_url,
            timeout=config.timeout,
            connect_timeout=config.connect_timeout,
        )
        authenticator = LinkupAuthenticator(
            http,
            config.email,
            config.password,
            prompt_verification_code,
            country=config.country,
        )
        session = LinkupSession(
            http,
            authenticator,
            FileCredentialStore(config.token_store_path),
            country=config.country,
        )
        for url in urls:
            result = await session.fetch(url)
            _emit(result, limit=limit, output=output)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="linkup-fetcher")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(min=0),
    metavar="COUNT",
    help="The maximum number of resources to list.",
)
@click.option(
    "-o",
    "--output",
    type=click.Choice(["jsonl", "json"]),
    default="jsonl",
    show_default=True,
    help="The output format.",
)
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the module manifest.",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a .env file.",
)
@click.argument("urls", nargs=-1)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: int,
    debug: bool,
    limit: int | None,
    output: str,
    manifest_path: Path | None,
    env_file: Path | None,
    urls: tuple[str, ...],
) -> None:
    """Fetch LinkedIn profiles, companies, messages and connections via LinkUp."""
    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)
    _configure_logging(verbose, debug)

    if not urls:
        ctx.exit(EX_OK)

    try:
        manifest = ModuleManifest.read_manifest(manifest_path)
        config = LinkupConfig.from_manifest(manifest)
    except LinkupConfigError as err:
        _LOGGER.error("Failed to load configuration: %s", err)
        ctx.exit(EX_CONFIG)

    try:
        asyncio.run(_run(config, urls, limit=limit, output=output))
    except LinkupConfigError as err:
        _LOGGER.error("Configuration incomplete: %s", err)
        ctx.exit(EX_CONFIG)
    except LinkupClientError as err:
        _LOGGER.error("Request failed: %s", err)
        ctx.exit(EX_UNAVAILABLE)
    except click.Abort:
        _LOGGER.error("Verification code is required")
        ctx.exit(EX_UNAVAILABLE)
