from __future__ import annotations

import asyncio
import logging

import pytest

from revlookup.contact import ContactRecord, ContactRecordBuilder, Name, Phone, PhoneNumber
from revlookup.dispatcher import LookupDispatcher, resolve, resolve_concurrently
from revlookup.providers.base import LookupContext, LookupProvider

NUMBER = PhoneNumber("+16502530000", "(650) 253-0000")


def _record(name: str) -> ContactRecord:
    return (
        ContactRecordBuilder("reverse_lookup", NUMBER)
        .set_name(Name(name))
        .add_phone_number(Phone(NUMBER.display_number, "main"))
        .build()
    )


class _StubProvider(LookupProvider):
    def __init__(
        self,
        name: str,
        result: ContactRecord | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self._result = result
        self._error = error
        self._delay = delay
        self.calls = 0
        self.cancelled = False

    async def lookup(
        self,
        context: LookupContext,
        normalized_number: str,
        formatted_number: str | None = None,
    ) -> ContactRecord | None:
        self.calls += 1
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self._error is not None:
            raise self._error
        return self._result


@pytest.mark.asyncio
async def test_first_success_short_circuits() -> None:
    r = _record("Second")
    p1 = _StubProvider("p1")
    p2 = _StubProvider("p2", r)
    p3 = _StubProvider("p3", _record("Third"))

    assert await resolve(LookupContext(), NUMBER, [p1, p2, p3]) == r
    assert (p1.calls, p2.calls, p3.calls) == (1, 1, 0)


@pytest.mark.asyncio
async def test_all_misses_return_none() -> None:
    providers = [_StubProvider("p1"), _StubProvider("p2")]
    assert await resolve(LookupContext(), NUMBER, providers) is None
    assert await resolve(LookupContext(), NUMBER, []) is None


@pytest.mark.asyncio
async def test_empty_record_counts_as_miss() -> None:
    empty = ContactRecordBuilder("reverse_lookup", NUMBER).build()
    r = _record("Real")
    p2 = _StubProvider("p2", r)
    assert await resolve(LookupContext(), NUMBER, [_StubProvider("p1", empty), p2]) == r


@pytest.mark.asyncio
async def test_failing_provider_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    r = _record("Fallback")
    broken = _StubProvider("broken", error=RuntimeError("bad template"))
    with caplog.at_level(logging.ERROR, logger="revlookup.dispatcher"):
        result = await resolve(LookupContext(), NUMBER, [broken, _StubProvider("ok", r)])

    assert result == r
    assert any("broken" in rec.getMessage() for rec in caplog.records)
    assert caplog.records[0].exc_info is not None


@pytest.mark.asyncio
async def test_concurrent_prefers_provider_order_and_cancels_the_rest() -> None:
    slow_first = _StubProvider("slow", _record("Slow"), delay=0.05)
    fast_second = _StubProvider("fast", _record("Fast"))
    hanging = _StubProvider("hanging", _record("Never"), delay=10)

    record = await resolve_concurrently(LookupContext(), NUMBER, [slow_first, fast_second, hanging])

    assert record is not None and record.display_name == "Slow"
    assert hanging.cancelled is True


@pytest.mark.asyncio
async def test_concurrent_all_misses() -> None:
    providers = [_StubProvider("p1"), _StubProvider("p2", error=ValueError("x"))]
    assert await resolve_concurrently(LookupContext(), NUMBER, providers) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [False, True])
async def test_dispatcher_class(concurrent: bool) -> None:
    r = _record("Found")
    dispatcher = LookupDispatcher([_StubProvider("p1"), _StubProvider("p2", r)], concurrent=concurrent)
    assert [p.name for p in dispatcher.providers] == ["p1", "p2"]
    assert await dispatcher.resolve(LookupContext(), NUMBER) == r
