"""Confidence estimation for a photo's ranking."""

from __future__ import annotations

# Room types that make dependable hero shots
HERO_ROOM_TYPES = frozenset({"exterior", "kitchen", "living", "pool"})

BASE_CONFIDENCE = 0.5
QUALITY_ONLY_CAP = 0.8


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def estimate_confidence(
    quality_score: float,
    context_score: float,
    appeal: float | None,
    has_metadata: bool,
    room_type: str,
) -> float:
    """Confidence (0-1) in a photo's AI-assisted score.

    Args:
        quality_score: Output of score_quality.
        context_score: Output of score_context.
        appeal: Vision-model appeal (0-10), None if unknown.
        has_metadata: Whether the decoder reported width and height.
        room_type: Room classification of the photo.
    """
    confidence = BASE_CONFIDENCE
    confidence += min(0.3, quality_score / 15)
    confidence += min(0.2, context_score / 15)
    if appeal is not None:
        confidence += min(0.2, appeal / 10)
    if has_metadata:
        confidence += 0.1
    if room_type in HERO_ROOM_TYPES:
        confidence += 0.1
    return _clamp(confidence)


def estimate_quality_only_confidence(quality_score: float) -> float:
    """Confidence without AI input, capped at 0.8."""
    return _clamp(min(QUALITY_ONLY_CAP, quality_score / 15))
