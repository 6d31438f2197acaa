"""Scoring passes for hero photo selection.

Scoring Passes:
    1. Quality - resolution, aspect ratio, format, compression, exposure
    2. Context - marketing relevance of the room shown, biased by property type
    3. Confidence - how far the combined score can be trusted

The hero selector blends these per photo; see listinghero.select.
"""

from __future__ import annotations

# Re-export types for convenience
from listinghero.scoring.types import (
    Alternative,
    AnalysisRecord,
    HeroCandidate,
    HeroPreferences,
    HeroSelectionResult,
    ImageMetrics,
    PhotoInsights,
    RoomAnalysis,
    SelectionMetadata,
)

# Re-export utilities
from listinghero.scoring.utils import auto_orient, open_photo

from listinghero.scoring.confidence import (
    estimate_confidence,
    estimate_quality_only_confidence,
)
from listinghero.scoring.context import (
    PROPERTY_TYPE_MODIFIERS,
    ROOM_MARKETING_SCORES,
    infer_room_type,
    normalize_property_type,
    score_basic_context,
    score_context,
)
from listinghero.scoring.quality import (
    analyze_photo_quality,
    extract_metrics,
    score_quality,
)

__all__ = [
    # Types
    "Alternative",
    "AnalysisRecord",
    "HeroCandidate",
    "HeroPreferences",
    "HeroSelectionResult",
    "ImageMetrics",
    "PhotoInsights",
    "RoomAnalysis",
    "SelectionMetadata",
    # Utilities
    "auto_orient",
    "open_photo",
    # Quality pass
    "analyze_photo_quality",
    "extract_metrics",
    "score_quality",
    # Context pass
    "PROPERTY_TYPE_MODIFIERS",
    "ROOM_MARKETING_SCORES",
    "infer_room_type",
    "normalize_property_type",
    "score_basic_context",
    "score_context",
    # Confidence
    "estimate_confidence",
    "estimate_quality_only_confidence",
]
