# file: revlookup/text.py
"""
Regex and HTML helpers for scraping providers.

A scraping provider is essentially a URL template plus a handful of patterns;
these helpers keep the providers declarative. Every pattern must have at least
one capture group and only group 1 is returned.
"""

from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import Union

PatternLike = Union[str, re.Pattern[str]]

# Elements that start a new line when rendered as text.
_BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "dd",
        "div",
        "dl",
        "dt",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "li",
        "ol",
        "p",
        "section",
        "table",
        "td",
        "th",
        "tr",
        "ul",
    }
)
_SKIPPED_TAGS = frozenset({"script", "style"})
_INLINE_WS = re.compile(r"[ \t\r\f\v\n\xa0]+")
_BLANK_LINES = re.compile(r" *\n[ \n]*")


def compile_pattern(pattern: PatternLike, *, dot_all: bool = False) -> re.Pattern[str]:
    """
    Compile `pattern`, or return it unchanged if it is already compiled.

    Raises:
        ValueError: if the pattern is invalid or has no capture group.
    """

    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        try:
            compiled = re.compile(pattern, re.DOTALL if dot_all else 0)
        except re.error as exc:
            raise ValueError(f"Invalid pattern {pattern!r}: {exc}") from exc
    if compiled.groups < 1:
        raise ValueError(f"Pattern {compiled.pattern!r} has no capture group")
    return compiled


def first_match(text: str | None, pattern: PatternLike, dot_all: bool = False) -> str | None:
    """Return capture group 1 of the first match (stripped), or None."""

    if text is None:
        return None
    m = compile_pattern(pattern, dot_all=dot_all).search(text)
    if m is None:
        return None
    group = m.group(1)
    return group.strip() if group is not None else None


def all_matches(text: str | None, pattern: PatternLike, dot_all: bool = False) -> list[str]:
    """Return capture group 1 of every non-overlapping match, in document order."""

    if text is None:
        return []
    compiled = compile_pattern(pattern, dot_all=dot_all)
    return [m.group(1).strip() for m in compiled.finditer(text) if m.group(1) is not None]


class _TextCollector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag == "br":
            self._parts.append("\n")
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "br":
            self._parts.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        self._parts.append(_INLINE_WS.sub(" ", data))

    def text(self) -> str:
        raw = "".join(self._parts)
        return _BLANK_LINES.sub("\n", raw).strip()


def html_to_text(text: str | None) -> str | None:
    """
    Decode an HTML fragment to plain text.

    Entities are decoded, tags dropped, `<br>` and block elements become line
    breaks and runs of whitespace inside text collapse to one space.
    """

    if text is None:
        return None
    parser = _TextCollector()
    parser.feed(text)
    parser.close()
    return parser.text()
