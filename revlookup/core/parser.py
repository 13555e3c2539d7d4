# file: revlookup/core/parser.py
"""
Turn user input into a lookup key.

Small wrappers around `phonenumbers` that:
- sanitize user input (separators, `00` international prefix),
- parse with an optional default region and validate,
- produce the `PhoneNumber` providers are keyed on (E.164 + national format).
"""

from __future__ import annotations

import re

import phonenumbers
from phonenumbers import NumberParseException
from phonenumbers.phonenumber import PhoneNumber as ParsedNumber
from phonenumbers.phonenumberutil import PhoneNumberFormat

from revlookup.contact import PhoneNumber


class MissingCountryError(ValueError):
    """Raised when a number is missing a country code and no default region is provided."""


class InvalidPhoneNumberError(ValueError):
    """Raised when a number parses but is not a valid phone number."""


_NON_DIALABLE = re.compile(r"[^\d+]+")


def sanitize_number(raw: str) -> str:
    """
    Normalize common phone number input into a parse-friendly string.

    - Trims whitespace.
    - Removes common separators (spaces, dashes, parentheses, dots).
    - Converts an international dialing prefix `00` into `+`.
    """

    s = raw.strip()
    if not s:
        return s

    s = _NON_DIALABLE.sub("", s)
    if s.startswith("00"):
        s = f"+{s[2:]}"
    return s


def parse_number(raw: str, *, default_region: str | None = None) -> ParsedNumber:
    """
    Parse and validate a phone number.

    Raises:
        MissingCountryError: if `raw` has no leading `+` and no `default_region`.
        NumberParseException: if `phonenumbers` cannot parse the input.
        InvalidPhoneNumberError: if parsed but not a valid number.
    """

    sanitized = sanitize_number(raw)
    if not sanitized:
        raise NumberParseException(NumberParseException.NOT_A_NUMBER, "Empty input")

    if not sanitized.startswith("+") and not default_region:
        raise MissingCountryError(
            "Missing country code. Provide an E.164 number (e.g., +14155552671) "
            "or specify a default region (e.g., US)."
        )

    region = default_region.upper() if default_region else None
    parsed = phonenumbers.parse(sanitized, region)
    if not phonenumbers.is_valid_number(parsed):
        raise InvalidPhoneNumberError("Invalid phone number.")
    return parsed


def to_lookup_number(parsed: ParsedNumber) -> PhoneNumber:
    return PhoneNumber(
        normalized_number=phonenumbers.format_number(parsed, PhoneNumberFormat.E164),
        formatted_number=phonenumbers.format_number(parsed, PhoneNumberFormat.NATIONAL),
    )


def parse_lookup_number(raw: str, *, default_region: str | None = None) -> PhoneNumber:
    """Parse, validate and return the lookup key for `raw`."""

    return to_lookup_number(parse_number(raw, default_region=default_region))
