from __future__ import annotations

import logging
from pathlib import Path

import pytest

from revlookup.config import RevLookupSettings
from revlookup.factory import build_providers
from revlookup.providers.content_db import AreaCodeDbProvider, create_area_code_db
from revlookup.providers.opencnam import OpenCnamProvider
from revlookup.providers.web_scrape import WebScrapeProvider


def test_build_providers_keeps_configured_order(tmp_path: Path) -> None:
    db = tmp_path / "areas.sqlite3"
    create_area_code_db(db, [("139", "CN", "Beijing")])
    settings = RevLookupSettings(
        providers=["opencnam", "area_codes", "whitepages"], area_code_db_path=db
    )

    providers = build_providers(settings)

    assert [type(p) for p in providers] == [OpenCnamProvider, AreaCodeDbProvider, WebScrapeProvider]
    assert [p.name for p in providers] == ["opencnam", "area_codes", "whitepages"]


def test_build_providers_skips_unknown_and_misconfigured(
    caplog: pytest.LogCaptureFixture,
) -> None:
    settings = RevLookupSettings(providers=["bogus", "area_codes", "opencnam", "opencnam"])

    with caplog.at_level(logging.WARNING, logger="revlookup.factory"):
        providers = build_providers(settings)

    assert [p.name for p in providers] == ["opencnam"]
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "bogus" in messages
    assert "area_codes" in messages


def test_build_providers_explicit_names_override_settings() -> None:
    settings = RevLookupSettings(providers=["opencnam"])
    assert [p.name for p in build_providers(settings, ["whitepages"])] == ["whitepages"]


def test_build_providers_drops_repeated_explicit_names() -> None:
    settings = RevLookupSettings()
    providers = build_providers(settings, ["whitepages", "opencnam", "whitepages"])
    assert [p.name for p in providers] == ["whitepages", "opencnam"]
