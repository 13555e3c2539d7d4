# file: revlookup/providers/base.py
"""
Lookup provider interface.

Providers must be async and cancellable. A provider that finds nothing returns
None: a miss is a normal outcome, not an error. Transport and parse failures
are absorbed by the provider (and logged as such); only configuration
problems raise, and those raise at construction time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from revlookup.contact import (
    ContactRecord,
    ContactRecordBuilder,
    Name,
    Phone,
    PhoneNumber,
    PhotoReference,
)


class ProviderConfigError(ValueError):
    """Raised when a provider is constructed (or wired) with an unusable configuration."""


@dataclass(frozen=True, slots=True)
class LookupContext:
    """
    Per-call collaborators handed to every provider.

    Fields:
        client: Shared HTTP client; required by network-backed providers.
    """

    client: httpx.AsyncClient | None = None

    def require_client(self, provider: str) -> httpx.AsyncClient:
        if self.client is None:
            raise ProviderConfigError(f"Provider {provider!r} needs an HTTP client in its context")
        return self.client


class LookupProvider(ABC):
    """Base interface for reverse lookup providers."""

    name: str

    @abstractmethod
    async def lookup(
        self,
        context: LookupContext,
        normalized_number: str,
        formatted_number: str | None = None,
    ) -> ContactRecord | None:
        """
        Resolve a phone number to a contact record.

        Args:
            context: Per-call collaborators (HTTP client).
            normalized_number: Canonical number, e.g. +16502530000.
            formatted_number: Optional display form of the same number.
        """

        raise NotImplementedError

    def _log_outcome(self, logger: logging.Logger, outcome: str, number: str) -> None:
        # Numbers only ever go to DEBUG.
        logger.debug(
            "%s lookup %s: %s",
            self.name,
            outcome,
            number,
            extra={"provider": self.name, "outcome": outcome},
        )

    def _log_failure(self, logger: logging.Logger, outcome: str, exc: BaseException) -> None:
        logger.warning(
            "%s lookup %s: %s",
            self.name,
            outcome,
            exc,
            extra={"provider": self.name, "outcome": outcome},
        )


def business_record(
    display_name: str, normalized_number: str, formatted_number: str | None = None
) -> ContactRecord:
    """Record for a name-only hit: the name, the number as main phone, a business photo."""

    number = PhoneNumber(normalized_number, formatted_number)
    builder = ContactRecordBuilder("reverse_lookup", number)
    builder.set_name(Name(display_name))
    builder.add_phone_number(Phone(number.display_number, "main"))
    builder.set_photo_reference(PhotoReference.BUSINESS)
    return builder.build()
