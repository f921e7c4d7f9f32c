"""Filename-safe slugs for branch names."""

from __future__ import annotations

import re
import unicodedata

__all__ = ["slugify"]

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated ASCII form of value.

    Accented letters lose their accents ("é" -> "e"); anything else outside
    [a-z0-9 -] is dropped. Total and idempotent: slugify(slugify(x)) ==
    slugify(x), and slugify("") == "".
    """
    text = unicodedata.normalize("NFKD", str(value))
    text = _COMBINING_MARKS.sub("", text)
    text = text.strip().lower()
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub("-", text)
    return _HYPHENS.sub("-", text)
