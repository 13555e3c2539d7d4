# file: revlookup/cli.py
"""
revlookup CLI.

Commands:
  - lookup: parse a phone number and resolve it through the configured providers
  - import-area-codes: load a CSV of area codes into a SQLite lookup table
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
from pathlib import Path

import click
from phonenumbers import NumberParseException

from revlookup import __version__
from revlookup.config import ConfigurationError, RevLookupSettings, load_settings
from revlookup.contact import ContactRecord, PhoneNumber
from revlookup.core.parser import InvalidPhoneNumberError, MissingCountryError, parse_lookup_number
from revlookup.dispatcher import LookupDispatcher
from revlookup.factory import build_providers
from revlookup.logging_config import configure_logging
from revlookup.net.http import build_async_client
from revlookup.providers.base import LookupContext
from revlookup.providers.content_db import create_area_code_db

logger = logging.getLogger(__name__)


def _parse_providers_csv(value: str) -> list[str]:
    return [v.strip().lower() for v in value.split(",") if v.strip()]


async def lookup_async(
    number: PhoneNumber,
    *,
    settings: RevLookupSettings,
    providers: list[str] | None = None,
    concurrent: bool | None = None,
) -> ContactRecord | None:
    dispatcher = LookupDispatcher(
        build_providers(settings, providers),
        concurrent=settings.concurrent if concurrent is None else concurrent,
    )
    if not dispatcher.providers:
        logger.warning("No lookup providers are available")
        return None

    async with build_async_client(settings.http_config()) as client:
        return await dispatcher.resolve(LookupContext(client=client), number)


def _human_text(record: ContactRecord) -> str:
    lines: list[str] = []
    lines.append(f"Name: {record.display_name or ''}")
    for p in record.phone_numbers:
        lines.append(f"Phone ({p.type}): {p.number}")
    for a in record.addresses:
        address = a.formatted_address.replace("\n", ", ")
        lines.append(f"Address ({a.type}): {address}")
    for w in record.websites:
        lines.append(f"Website ({w.type}): {w.url}")
    if record.photo.kind != "none":
        lines.append(f"Photo: {record.photo.uri or record.photo.kind}")
    return "\n".join(lines) + "\n"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Reverse phone number lookup."""


@main.command("lookup")
@click.argument("number", type=str)
@click.option(
    "--providers",
    default=None,
    help="Comma-separated provider list, in order: area_codes,whitepages,opencnam",
)
@click.option("--json", "as_json", is_flag=True, help="Print the contact record as JSON.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
@click.option(
    "--region", default=None, help="Default region (ISO alpha-2) used if NUMBER is not in E.164."
)
@click.option(
    "--concurrent/--sequential",
    default=None,
    help="Run providers concurrently (first success in order still wins).",
)
def lookup_cmd(
    number: str,
    providers: str | None,
    as_json: bool,
    config_path: Path | None,
    region: str | None,
    concurrent: bool | None,
) -> None:
    """
    Resolve a phone number to contact data.
    """

    try:
        settings = load_settings(yaml_path=config_path)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)

    try:
        lookup_number = parse_lookup_number(
            number, default_region=region or settings.default_region
        )
    except (MissingCountryError, InvalidPhoneNumberError) as exc:
        raise click.ClickException(str(exc)) from exc
    except NumberParseException as exc:
        raise click.ClickException(f"Unable to parse number: {exc}") from exc

    provider_names = _parse_providers_csv(providers) if providers else None
    record = asyncio.run(
        lookup_async(
            lookup_number, settings=settings, providers=provider_names, concurrent=concurrent
        )
    )

    if record is None:
        click.echo(f"No match for {lookup_number.display_number}", err=True)
        raise click.exceptions.Exit(1)

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2, sort_keys=True))
    else:
        click.echo(_human_text(record), nl=False)


@main.command("import-area-codes")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("db_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--table", default="area_codes", show_default=True)
def import_area_codes_cmd(csv_path: Path, db_path: Path, table: str) -> None:
    """
    Load `area_code,region,name` rows from CSV_PATH into the SQLite DB_PATH.
    """

    rows: list[tuple[str, str, str]] = []
    with csv_path.open(newline="", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            code = (row.get("area_code") or "").strip()
            name = (row.get("name") or "").strip()
            if not code or not name:
                continue
            rows.append((code, (row.get("region") or "").strip(), name))

    try:
        written = create_area_code_db(db_path, rows, table=table)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{written} area codes written to {db_path}")
