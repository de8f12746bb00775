"""Standard moving box units."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class BoxSpec:
    """Fixed per-box volume (cu ft) and weight (lbs)."""

    size: str
    label: str
    volume: float
    weight: float


BOX_SIZES: dict[str, BoxSpec] = {
    "small": BoxSpec("small", "Small boxes", 1.5, 15.0),
    "medium": BoxSpec("medium", "Medium boxes", 3.0, 25.0),
    "large": BoxSpec("large", "Large boxes", 4.5, 30.0),
    "extra-large": BoxSpec("extra-large", "Extra-large boxes", 6.0, 35.0),
}

_WORD_RE = re.compile(r"[a-z]+")
_SIZE_RE = re.compile(
    r"\b(?P<xl>extra[\s-]?large|x[\s-]?large|xl)\b|\b(?P<size>small|medium|large)\b"
)
_BOX_NOUNS = frozenset({"box", "boxes"})
# compound nouns that name furniture or fixtures, not packed boxes
_NOT_MOVING_BOX = frozenset(
    {"toy", "jewelry", "jewellery", "tool", "music", "shadow", "window", "mail"}
    | {"lunch", "bread", "juke", "litter", "fuse", "ice", "tissue", "flower"}
)
# words that may follow the noun when it heads the phrase ("boxes of books")
_BOX_FOLLOWERS = frozenset(
    {
        "of",
        "for",
        "with",
        "containing",
        "packed",
        "filled",
        "labeled",
        "labelled",
        "small",
        "medium",
        "large",
        "extra",
        "x",
        "xl",
        "size",
        "sized",
        "est",
        "estimated",
    }
)


def box_size_key(raw: str) -> str | None:
    """Return the ``BOX_SIZES`` key named in a size phrase, if any."""
    match = _SIZE_RE.search(raw.lower())
    if match is None:
        return None
    if match.group("xl"):
        return "extra-large"
    return match.group("size")


def match_box(name: str) -> BoxSpec | None:
    """Return the box spec of a box entry, or None for anything else.

    "box" must head the phrase, so "Box spring" or "Large box fan" stay items.
    """
    words = _WORD_RE.findall(name.lower())
    if not any(_heads_phrase(words, position) for position in range(len(words))):
        return None
    size = box_size_key(name)
    return BOX_SIZES[size] if size else None


def _heads_phrase(words: list[str], position: int) -> bool:
    if words[position] not in _BOX_NOUNS:
        return False
    if position > 0 and words[position - 1] in _NOT_MOVING_BOX:
        return False
    return position + 1 == len(words) or words[position + 1] in _BOX_FOLLOWERS
