"""String normalization and similarity."""

import re

from rapidfuzz.distance import Levenshtein

# Name parts this many edits apart still count as the same part
NAME_PART_MAX_EDITS = 2


def normalize(text: str | None) -> str:
    """Lower-case, drop punctuation and collapse whitespace."""
    if not text:
        return ""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert, delete and substitute costs."""
    return Levenshtein.distance(a, b)


def similarity(a: str | None, b: str | None) -> float:
    """Similarity of two strings in [0, 1].

    Equal normalized strings score 1.0, containment scores 0.9, anything
    else falls back to normalized edit distance.
    """
    norm_a = normalize(a)
    norm_b = normalize(b)
    if not norm_a or not norm_b:
        return 0.0

    if norm_a == norm_b:
        return 1.0
    if norm_a in norm_b or norm_b in norm_a:
        return 0.9

    return 1 - edit_distance(norm_a, norm_b) / max(len(norm_a), len(norm_b))


def name_similarity(a: str | None, b: str | None) -> float:
    """Similarity of two person names, tolerant to reordered or misspelt parts."""
    norm_a = normalize(a)
    norm_b = normalize(b)
    if not norm_a or not norm_b:
        return 0.0

    if norm_a == norm_b:
        return 1.0
    if norm_a in norm_b or norm_b in norm_a:
        return 0.9

    parts_a = norm_a.split(" ")
    parts_b = norm_b.split(" ")
    matching = sum(
        1
        for part in parts_a
        if any(
            part == other or edit_distance(part, other) <= NAME_PART_MAX_EDITS
            for other in parts_b
        )
    )
    return matching / max(len(parts_a), len(parts_b))
