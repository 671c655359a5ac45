"""Postal code recognition for US ZIP codes and Canadian postal codes."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Pre-compiled patterns; checked in order, first match wins.
US_ZIP_PATTERN = re.compile(r"^(\d{5})(-\d{4})?$")
CA_POSTAL_PATTERN = re.compile(r"^([ABCEGHJKLMNPRSTVXY]\d[A-Z]) ?\d[A-Z]\d$")


@dataclass(frozen=True, slots=True)
class PostalCode:
    """Normalized lookup key: country slug plus the code the geocoder expects.

    For Canada only the forward sortation area (first three characters) is
    looked up.
    """

    country: str
    code: str

    def __str__(self) -> str:
        return f"{self.country}/{self.code}"


def match_postal_code(text: str | None) -> PostalCode | None:
    """Return the PostalCode the whole of ``text`` represents, if any."""
    if not text:
        return None
    candidate = text.strip()
    match = US_ZIP_PATTERN.match(candidate)
    if match:
        return PostalCode("us", match.group(1))
    match = CA_POSTAL_PATTERN.match(candidate)
    if match:
        return PostalCode("ca", match.group(1))
    return None
