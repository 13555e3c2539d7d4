# file: revlookup/providers/web_scrape.py
"""
Reverse lookup by scraping a directory web page.

A scraping provider is a URL template plus a set of regex patterns. The page
is fetched once; each pattern pulls one field out of the raw HTML (group 1 of
the first match). Name and address are decoded from HTML to plain text.

Policy:
    - Any fetch failure is a miss (logged as a transport failure).
    - No name means no result, whatever else was extracted.
    - Address and website are only added when extracted and non-empty.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Literal, Mapping
from urllib.parse import quote

from revlookup.contact import (
    Address,
    ContactRecord,
    ContactRecordBuilder,
    Name,
    Phone,
    PhoneNumber,
    Website,
)
from revlookup.net.http import FetchError, fetch
from revlookup.text import compile_pattern, first_match, html_to_text

from .base import LookupContext, LookupProvider, ProviderConfigError

logger = logging.getLogger(__name__)

NumberFormat = Literal["digits", "e164"]


@dataclass(frozen=True)
class WebScrapeConfig:
    """
    Static description of a scraping provider.

    Fields:
        name: Provider name used in logs.
        url_template: Endpoint with a `{number}` placeholder.
        name_pattern: Pattern for the display name (mandatory field).
        number_pattern: Pattern for the canonical formatted number.
        address_pattern: Pattern for the postal address.
        website_pattern: Pattern for a profile URL.
        headers: Extra request headers (override the default user agent).
        dot_all: Whether `.` matches newlines in all patterns.
        number_format: "digits" drops a leading `+`, "e164" keeps it.
    """

    name: str
    url_template: str
    name_pattern: str
    number_pattern: str | None = None
    address_pattern: str | None = None
    website_pattern: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    dot_all: bool = True
    number_format: NumberFormat = "digits"


def whitepages_config(
    url_template: str = "https://www.whitepages.com/phone/{number}",
) -> WebScrapeConfig:
    """White Pages reverse phone page."""

    return WebScrapeConfig(
        name="whitepages",
        url_template=url_template,
        name_pattern=r'<h1[^>]*class="[^"]*\bname\b[^"]*"[^>]*>(.*?)</h1>',
        number_pattern=r'<[^>]*class="[^"]*\bphone-number\b[^"]*"[^>]*>\s*([^<]+?)\s*<',
        address_pattern=r'<[a-z]+[^>]*class="[^"]*\baddress\b[^"]*"[^>]*>(.*?)</(?:div|p|span|address)>',
        website_pattern=r'<a[^>]*class="[^"]*\bprofile-link\b[^"]*"[^>]*href="([^"]*)"',
        headers={"Accept": "text/html,application/xhtml+xml"},
    )


@dataclass(frozen=True, slots=True)
class ScrapedFields:
    name: str | None
    formatted_number: str | None
    address: str | None
    website: str | None


class WebScrapeProvider(LookupProvider):
    """Provider driven entirely by a `WebScrapeConfig`."""

    def __init__(self, config: WebScrapeConfig) -> None:
        if "{number}" not in config.url_template:
            raise ProviderConfigError(
                f"url_template for {config.name!r} must contain a {{number}} placeholder"
            )
        try:
            config.url_template.format(number="0")
        except (KeyError, IndexError, ValueError) as exc:
            raise ProviderConfigError(f"Unusable url_template for {config.name!r}: {exc}") from exc

        patterns: dict[str, re.Pattern[str] | None] = {}
        for field_name in ("name_pattern", "number_pattern", "address_pattern", "website_pattern"):
            raw = getattr(config, field_name)
            if raw is None:
                patterns[field_name] = None
                continue
            try:
                patterns[field_name] = compile_pattern(raw, dot_all=config.dot_all)
            except ValueError as exc:
                raise ProviderConfigError(f"{config.name}.{field_name}: {exc}") from exc

        self.name = config.name
        self._config = config
        self._patterns = patterns

    def build_url(self, normalized_number: str) -> str:
        number = normalized_number
        if self._config.number_format == "digits":
            number = number.lstrip("+")
        return self._config.url_template.format(number=quote(number, safe=""))

    def extract(self, body: str) -> ScrapedFields:
        def grab(key: str) -> str | None:
            pattern = self._patterns[key]
            return None if pattern is None else first_match(body, pattern)

        name = html_to_text(grab("name_pattern"))
        address = html_to_text(grab("address_pattern"))
        return ScrapedFields(
            name=name or None,
            formatted_number=grab("number_pattern") or None,
            address=address or None,
            website=grab("website_pattern") or None,
        )

    async def lookup(
        self,
        context: LookupContext,
        normalized_number: str,
        formatted_number: str | None = None,
    ) -> ContactRecord | None:
        client = context.require_client(self.name)
        url = self.build_url(normalized_number)
        try:
            body = await fetch(client, url, self._config.headers)
        except FetchError as exc:
            self._log_failure(logger, "transport_failure", exc)
            return None

        fields = self.extract(body)
        if fields.name is None:
            self._log_outcome(logger, "not_found", normalized_number)
            return None

        self._log_outcome(logger, "match", normalized_number)
        number = PhoneNumber(normalized_number, formatted_number)
        builder = ContactRecordBuilder("reverse_lookup", number)
        builder.set_name(Name(fields.name))
        builder.add_phone_number(Phone(fields.formatted_number or number.display_number, "main"))
        if fields.address is not None:
            builder.add_address(Address(fields.address, "home"))
        if fields.website is not None:
            builder.add_website(Website(fields.website, "profile"))
        return builder.build()
