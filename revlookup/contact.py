# file: revlookup/contact.py
"""
Contact records produced by lookup providers.

Providers never construct a `ContactRecord` directly: they feed whatever they
extracted into a `ContactRecordBuilder` and hand the finished, immutable record
to the caller. The builder does no parsing or I/O and never invents a field
the provider didn't set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

ContactSource = Literal["reverse_lookup", "forward_lookup", "people_lookup"]
PhoneType = Literal["main", "mobile", "work", "home", "other"]
AddressType = Literal["home", "work", "other"]
WebsiteType = Literal["profile", "homepage", "other"]
PhotoKind = Literal["none", "business", "uri"]


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """
    The lookup key supplied by the caller.

    Fields:
        normalized_number: Canonical digits (E.164 style, may carry a leading `+`).
        formatted_number: Optional display form, e.g. "(650) 253-0000".
    """

    normalized_number: str
    formatted_number: str | None = None

    @property
    def display_number(self) -> str:
        return self.formatted_number or self.normalized_number


@dataclass(frozen=True, slots=True)
class Name:
    display_name: str


@dataclass(frozen=True, slots=True)
class Phone:
    number: str
    type: PhoneType = "main"


@dataclass(frozen=True, slots=True)
class Address:
    formatted_address: str
    type: AddressType = "home"


@dataclass(frozen=True, slots=True)
class Website:
    url: str
    type: WebsiteType = "profile"


@dataclass(frozen=True)
class PhotoReference:
    kind: PhotoKind = "none"
    uri: str | None = None

    NONE: ClassVar[PhotoReference]
    BUSINESS: ClassVar[PhotoReference]

    @classmethod
    def from_uri(cls, value: str) -> PhotoReference:
        return cls(kind="uri", uri=value)

    def to_dict(self) -> dict[str, str | None]:
        return {"kind": self.kind, "uri": self.uri}


PhotoReference.NONE = PhotoReference()
PhotoReference.BUSINESS = PhotoReference(kind="business")


@dataclass(frozen=True, slots=True)
class ContactRecord:
    """
    Provider-agnostic result of a successful lookup.

    A record with no names and no phone numbers is "empty" and must be treated
    as no result.
    """

    source: ContactSource
    names: tuple[Name, ...] = ()
    phone_numbers: tuple[Phone, ...] = ()
    addresses: tuple[Address, ...] = ()
    websites: tuple[Website, ...] = ()
    photo: PhotoReference = field(default_factory=lambda: PhotoReference.NONE)
    lookup_number: PhoneNumber | None = None

    def is_empty(self) -> bool:
        return not self.names and not self.phone_numbers

    @property
    def display_name(self) -> str | None:
        return self.names[0].display_name if self.names else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "names": [{"display_name": n.display_name} for n in self.names],
            "phone_numbers": [{"number": p.number, "type": p.type} for p in self.phone_numbers],
            "addresses": [
                {"formatted_address": a.formatted_address, "type": a.type} for a in self.addresses
            ],
            "websites": [{"url": w.url, "type": w.type} for w in self.websites],
            "photo": self.photo.to_dict(),
            "lookup_number": (
                None
                if self.lookup_number is None
                else {
                    "normalized_number": self.lookup_number.normalized_number,
                    "formatted_number": self.lookup_number.formatted_number,
                }
            ),
        }


class ContactRecordBuilder:
    """
    Single-use accumulator for one `ContactRecord`.

    `set_*` methods overwrite, `add_*` methods append. Values are not validated;
    empty strings pass through untouched. `build()` snapshots the current state
    and does not reset the builder.
    """

    def __init__(
        self, source: ContactSource = "reverse_lookup", number: PhoneNumber | None = None
    ) -> None:
        self._source: ContactSource = source
        self._number = number
        self._name: Name | None = None
        self._phone_numbers: list[Phone] = []
        self._addresses: list[Address] = []
        self._websites: list[Website] = []
        self._photo = PhotoReference.NONE

    def set_name(self, name: Name) -> ContactRecordBuilder:
        self._name = name
        return self

    def add_phone_number(self, phone: Phone) -> ContactRecordBuilder:
        self._phone_numbers.append(phone)
        return self

    def add_address(self, address: Address) -> ContactRecordBuilder:
        self._addresses.append(address)
        return self

    def add_website(self, website: Website) -> ContactRecordBuilder:
        self._websites.append(website)
        return self

    def set_photo_reference(self, photo: PhotoReference) -> ContactRecordBuilder:
        self._photo = photo
        return self

    def build(self) -> ContactRecord:
        return ContactRecord(
            source=self._source,
            names=() if self._name is None else (self._name,),
            phone_numbers=tuple(self._phone_numbers),
            addresses=tuple(self._addresses),
            websites=tuple(self._websites),
            photo=self._photo,
            lookup_number=self._number,
        )
