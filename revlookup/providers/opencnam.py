# file: revlookup/providers/opencnam.py
"""
OpenCNAM caller-name (CNAM) lookup.

The public endpoint answers with the caller name as plain text. It only covers
North American numbers, and the free tier answers some numbers with an
"unavailable for Hobbyist Tier users" message instead of a name; both cases
are misses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

from revlookup.contact import ContactRecord
from revlookup.net.http import FetchError, fetch

from .base import LookupContext, LookupProvider, ProviderConfigError, business_record

logger = logging.getLogger(__name__)

_UNAVAILABLE_MARKER = "Hobbyist Tier"


@dataclass(frozen=True, slots=True)
class OpenCnamConfig:
    base_url: str = "https://api.opencnam.com/v2/phone/"


class OpenCnamProvider(LookupProvider):
    name = "opencnam"

    def __init__(self, config: OpenCnamConfig | None = None) -> None:
        config = config or OpenCnamConfig()
        if not config.base_url.startswith(("http://", "https://")):
            raise ProviderConfigError(f"OpenCNAM base_url must be http(s): {config.base_url!r}")
        self._config = config

    async def lookup(
        self,
        context: LookupContext,
        normalized_number: str,
        formatted_number: str | None = None,
    ) -> ContactRecord | None:
        if normalized_number.startswith("+") and not normalized_number.startswith("+1"):
            self._log_outcome(logger, "not_found", normalized_number)
            return None

        client = context.require_client(self.name)
        url = self._config.base_url + quote(normalized_number, safe="+")
        try:
            body = await fetch(client, url)
        except FetchError as exc:
            self._log_failure(logger, "transport_failure", exc)
            return None

        display_name = body.strip()
        if not display_name or _UNAVAILABLE_MARKER in display_name:
            self._log_outcome(logger, "not_found", normalized_number)
            return None

        self._log_outcome(logger, "match", normalized_number)
        return business_record(display_name, normalized_number, formatted_number)
