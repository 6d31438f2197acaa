"""Context pass: marketing relevance of what a photo shows."""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType

from listinghero.scoring.types import RoomAnalysis

# Marketing relevance by room type (not photographic quality)
ROOM_MARKETING_SCORES = MappingProxyType(
    {
        "exterior": 10,
        "pool": 9,
        "kitchen": 9,
        "living": 8,
        "dining": 7,
        "bedroom": 6,
        "bathroom": 5,
        "office": 4,
        "other": 5,
        "garage": 2,
        "utility": 1,
    }
)
DEFAULT_ROOM_SCORE = 5

CONDITION_BONUS = MappingProxyType({"excellent": 2, "good": 1, "needs_updates": -1})

# normalised property type -> room type -> score delta
PROPERTY_TYPE_MODIFIERS = MappingProxyType(
    {
        "luxury": {"pool": 2, "exterior": 2, "kitchen": 1},
        "starterhome": {"kitchen": 2, "living": 2, "bedroom": 1},
        # shared exteriors are less distinctive
        "condo": {"living": 2, "kitchen": 1, "exterior": -1},
        "waterfront": {"exterior": 3, "pool": 1},
        "lakefront": {"exterior": 3, "pool": 1},
        "commercial": {"exterior": 1, "office": 3, "other": 1},
    }
)

# Quality-only mode: a luxury hint still favours the front exterior
LUXURY_EXTERIOR_BONUS = 2

# High-conversion amenities, boosted whatever room they appear in
PREMIUM_FEATURE_KEYWORDS = ("pool", "spa")

# Typical listing photo order after the first three shots
ROTATION_ROOM_TYPES = ("bedroom", "bathroom", "dining", "other")

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_property_type(property_type: str | None) -> str:
    """Lower-case and strip everything but letters ("Starter Home" -> "starterhome")."""
    if not property_type:
        return ""
    return _NON_LETTERS.sub("", property_type.lower())


def property_type_modifier(room_type: str, property_type: str | None) -> int:
    modifiers = PROPERTY_TYPE_MODIFIERS.get(normalize_property_type(property_type))
    if not modifiers:
        return 0
    return modifiers.get(room_type, 0)


def _preference_bonus(room_type: str, preferred_room_types: Iterable[str]) -> int:
    return 1 if room_type in {r.lower() for r in preferred_room_types} else 0


def score_basic_context(
    room_type: str,
    property_type: str | None = None,
    preferred_room_types: Iterable[str] = (),
) -> float:
    """Context score from the room type alone (no condition/feature data).

    A guessed room type only earns the base table score. The one property
    bias kept is a luxury hint on the exterior shot.
    """
    score = ROOM_MARKETING_SCORES.get(room_type, DEFAULT_ROOM_SCORE)
    if room_type == "exterior" and property_type and "luxury" in property_type.lower():
        score += LUXURY_EXTERIOR_BONUS
    score += _preference_bonus(room_type, preferred_room_types)
    return float(max(0, score))


def score_context(
    room: RoomAnalysis,
    property_type: str | None = None,
    preferred_room_types: Iterable[str] = (),
) -> float:
    """Context score from a full room analysis.

    Args:
        room: Vision-model classification of the photo.
        property_type: Free-text hint, matched against PROPERTY_TYPE_MODIFIERS.
        preferred_room_types: Room types the user asked to favour (+1).

    Returns:
        Non-negative relevance score.
    """
    score = ROOM_MARKETING_SCORES.get(room.type, DEFAULT_ROOM_SCORE)
    score += CONDITION_BONUS.get(room.condition, 0)
    score += property_type_modifier(room.type, property_type)

    if len(room.features) > 3:
        score += 1

    if any(
        keyword in feature.lower()
        for feature in room.features
        for keyword in PREMIUM_FEATURE_KEYWORDS
    ):
        score += 2

    score += _preference_bonus(room.type, preferred_room_types)
    return float(max(0, score))


def infer_room_type(index: int, total: int) -> str:
    """Guess a room type from the photo's position in the listing.

    Listing photos conventionally open with the front exterior, then the
    kitchen and living room.
    """
    if index == 0:
        return "exterior"
    if index == 1 and total >= 4:
        return "kitchen"
    if index == 2 and total >= 5:
        return "living"
    if index >= 3:
        return ROTATION_ROOM_TYPES[(index - 3) % len(ROTATION_ROOM_TYPES)]
    return "other"
