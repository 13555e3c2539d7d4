# file: revlookup/factory.py
"""Build the ordered provider list from settings."""

from __future__ import annotations

import logging
from typing import Callable

from revlookup.config import RevLookupSettings
from revlookup.providers.base import LookupProvider, ProviderConfigError
from revlookup.providers.content_db import AreaCodeDbConfig, AreaCodeDbProvider
from revlookup.providers.opencnam import OpenCnamConfig, OpenCnamProvider
from revlookup.providers.web_scrape import WebScrapeProvider, whitepages_config

logger = logging.getLogger(__name__)


def _area_codes(settings: RevLookupSettings) -> LookupProvider:
    if settings.area_code_db_path is None:
        raise ProviderConfigError("area_code_db_path is not set")
    return AreaCodeDbProvider(AreaCodeDbConfig(db_path=settings.area_code_db_path))


def _whitepages(settings: RevLookupSettings) -> LookupProvider:
    return WebScrapeProvider(whitepages_config(settings.whitepages_url_template))


def _opencnam(settings: RevLookupSettings) -> LookupProvider:
    return OpenCnamProvider(OpenCnamConfig(base_url=settings.opencnam_base_url))


PROVIDER_FACTORIES: dict[str, Callable[[RevLookupSettings], LookupProvider]] = {
    "area_codes": _area_codes,
    "whitepages": _whitepages,
    "opencnam": _opencnam,
}


def build_providers(
    settings: RevLookupSettings, names: list[str] | None = None
) -> list[LookupProvider]:
    """
    Instantiate providers in the configured order.

    Unknown names and providers with a broken configuration are logged and
    left out; the remaining providers keep their relative order.
    """

    providers: list[LookupProvider] = []
    seen: set[str] = set()
    for name in names if names is not None else settings.providers:
        if name in seen:
            continue
        seen.add(name)
        factory = PROVIDER_FACTORIES.get(name)
        if factory is None:
            logger.warning("Unknown provider: %s", name)
            continue
        try:
            providers.append(factory(settings))
        except ProviderConfigError as exc:
            logger.warning("Provider %s disabled: %s", name, exc)
    return providers
