"""Carrier code and booking reference extraction from free text."""

import re

from .text import normalize, similarity

# Two-letter carrier designator followed by a 3-4 digit flight number
CARRIER_CODE_PATTERN = re.compile(r"(?<![A-Za-z])([A-Z]{2})\s?\d{3,4}(?!\d)")

# Flight-number-like tokens in normalized (lower-case) text
FLIGHT_NUMBER_PATTERN = re.compile(r"[a-z]{1,2}\d{3,4}")

PARTIAL_MATCH_THRESHOLD = 0.8


def extract_carrier_code(text: str | None) -> str | None:
    """Extract the carrier code from text such as "Flight DL1234 SFO-JFK"."""
    if not text:
        return None
    match = CARRIER_CODE_PATTERN.search(text)
    return match.group(1) if match else None


def reference_variants(reference: str | None) -> list[str]:
    """Normalized reference plus the re-punctuated forms expense systems use.

    "AA1234" may appear as "aa 1234" or "aa#1234".
    """
    normalized = normalize(reference)
    if not normalized:
        return []

    variants = [normalized]
    for separator in (" ", "#"):
        variant = re.sub(r"^(\D+?)(\d+)", rf"\1{separator}\2", normalized, count=1)
        if variant not in variants:
            variants.append(variant)
    return variants


def reference_in_text(reference: str | None, text: str | None) -> bool:
    """Check whether a reference or one of its variants appears in text.

    Text keeps '#' so the '#'-inserted variant can be found.
    """
    haystack = normalize(text)
    hash_haystack = re.sub(r"[^\w\s#]", "", (text or "").lower())
    hash_haystack = re.sub(r"\s+", " ", hash_haystack).strip()
    if not haystack:
        return False

    return any(
        variant in haystack or variant in hash_haystack
        for variant in reference_variants(reference)
    )


def partial_flight_number_match(
    reference: str | None,
    text: str | None,
) -> tuple[str, str] | None:
    """Find a pair of similar flight numbers in a reference and a text."""
    reference_parts = FLIGHT_NUMBER_PATTERN.findall(normalize(reference))
    text_parts = FLIGHT_NUMBER_PATTERN.findall(normalize(text))

    for reference_part in reference_parts:
        for text_part in text_parts:
            if similarity(reference_part, text_part) > PARTIAL_MATCH_THRESHOLD:
                return reference_part, text_part
    return None
