"""Tunable constants for hero selection."""

from __future__ import annotations

from dataclasses import dataclass

# Resolution tiers (pixel counts)
PIXELS_4K = 3840 * 2160
PIXELS_1080P = 1920 * 1080
PIXELS_720P = 1280 * 720
PIXELS_480P = 640 * 480

# Long edge of the reduced copy used for brightness statistics
STATS_MAX_DIM = 512

# Encoded JPEG quality for platform renditions
VARIANT_JPEG_QUALITY = 90

# Score and confidence given to a photo whose analysis failed
FAILED_SCORE = 1.0
FAILED_CONFIDENCE = 0.1


@dataclass(frozen=True)
class SelectionConfig:
    """Blend weights and thresholds for the hero selector.

    None of these values come from measured conversion data; they are
    product defaults and are expected to be tuned.
    """

    # AI-insight mode: quality, context and AI appeal
    WEIGHT_AI_QUALITY: float = 0.4
    WEIGHT_AI_CONTEXT: float = 0.4
    WEIGHT_AI_APPEAL: float = 0.2

    # Quality-only mode: quality and inferred-room context
    WEIGHT_QUALITY: float = 0.7
    WEIGHT_CONTEXT: float = 0.3

    # Secondary ranking weight applied to confidence
    CONFIDENCE_TIE_WEIGHT: float = 0.3

    # AI candidate wins when its score is at least this share of the top score
    OVERRIDE_THRESHOLD: float = 0.85

    # Seconds allowed per photo analysis (None = no limit)
    PHOTO_TIMEOUT: float | None = 10.0

    def __post_init__(self) -> None:
        if self.PHOTO_TIMEOUT is not None and not self.PHOTO_TIMEOUT > 0:
            raise ValueError(f"PHOTO_TIMEOUT must be positive or None, got {self.PHOTO_TIMEOUT}")


DEFAULT_CONFIG = SelectionConfig()
