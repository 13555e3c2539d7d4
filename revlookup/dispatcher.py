# file: revlookup/dispatcher.py
"""
Provider dispatch: ask providers in order, first non-empty record wins.

There is no merging across providers. A provider that raises is logged and
skipped; if nothing matches the caller gets None, never a placeholder record.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from revlookup.contact import ContactRecord, PhoneNumber
from revlookup.providers.base import LookupContext, LookupProvider

logger = logging.getLogger(__name__)


async def _run_provider(
    provider: LookupProvider, context: LookupContext, number: PhoneNumber
) -> ContactRecord | None:
    name = getattr(provider, "name", provider.__class__.__name__)
    try:
        record = await provider.lookup(context, number.normalized_number, number.formatted_number)
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("Provider %s failed", name, extra={"provider": name, "outcome": "error"})
        return None

    if record is None or record.is_empty():
        return None
    return record


async def resolve(
    context: LookupContext,
    number: PhoneNumber,
    providers: Sequence[LookupProvider],
) -> ContactRecord | None:
    """Consult `providers` one after another and return the first non-empty record."""

    for provider in providers:
        record = await _run_provider(provider, context, number)
        if record is not None:
            return record
    return None


async def resolve_concurrently(
    context: LookupContext,
    number: PhoneNumber,
    providers: Sequence[LookupProvider],
) -> ContactRecord | None:
    """
    Start every provider at once and return the first success in provider order.

    Once a result is chosen, lookups that are still running are cancelled;
    anything they would have returned is discarded.
    """

    tasks = [asyncio.create_task(_run_provider(p, context, number)) for p in providers]
    try:
        for task in tasks:
            record = await task
            if record is not None:
                return record
        return None
    finally:
        pending = [t for t in tasks if not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


class LookupDispatcher:
    """Holds an ordered provider list and the scheduling choice."""

    def __init__(self, providers: Sequence[LookupProvider], *, concurrent: bool = False) -> None:
        self._providers = list(providers)
        self._concurrent = concurrent

    @property
    def providers(self) -> list[LookupProvider]:
        return list(self._providers)

    async def resolve(self, context: LookupContext, number: PhoneNumber) -> ContactRecord | None:
        if self._concurrent and len(self._providers) > 1:
            record = await resolve_concurrently(context, number, self._providers)
        else:
            record = await resolve(context, number, self._providers)
        if record is None:
            logger.debug("No provider matched %s", number.normalized_number)
        return record
