"""Dataclasses shared by the scoring passes and the hero selector."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Literal

RoomType = Literal[
    "kitchen",
    "living",
    "bedroom",
    "bathroom",
    "exterior",
    "dining",
    "office",
    "pool",
    "garage",
    "utility",
    "other",
]
ROOM_TYPES: frozenset[str] = frozenset(
    {
        "kitchen",
        "living",
        "bedroom",
        "bathroom",
        "exterior",
        "dining",
        "office",
        "pool",
        "garage",
        "utility",
        "other",
    }
)

AnalysisMethod = Literal["ai_insights", "quality_analysis", "fallback"]
AspectPreference = Literal["landscape", "portrait", "square", "any"]


@dataclass
class ImageMetrics:
    """Decoded header facts and pixel statistics for one photo."""

    width: int = 0
    height: int = 0
    format: str | None = None  # Pillow format name ("JPEG", "PNG", ...)
    encoded_size: int = 0  # bytes
    mean_brightness: float | None = None  # 0-255, None = stats unavailable

    @property
    def pixels(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        return (self.width or 1) / (self.height or 1)

    @property
    def density(self) -> float:
        """Encoded bytes per pixel (higher = less compression)."""
        return self.encoded_size / self.pixels if self.pixels > 0 else 0.0

    @property
    def has_dimensions(self) -> bool:
        return bool(self.width and self.height)


@dataclass
class RoomAnalysis:
    """Room classification for one photo, produced by a vision model."""

    type: str = "other"
    features: list[str] = field(default_factory=list)
    condition: str = "good"  # excellent | good | needs_updates
    appeal: float = 0.0  # 0-10 marketing appeal

    def __post_init__(self) -> None:
        if self.type not in ROOM_TYPES:
            self.type = "other"
        appeal = float(self.appeal)
        if not math.isfinite(appeal):
            raise ValueError(f"Appeal must be a finite number, got {self.appeal!r}")
        self.appeal = min(10.0, max(0.0, appeal))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoomAnalysis:
        if not isinstance(data, dict):
            raise ValueError(f"Room analysis must be an object, got {type(data).__name__}")
        features = data.get("features") or []
        try:
            appeal = float(data.get("appeal", 0) or 0)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid appeal value: {data.get('appeal')!r}") from None
        return cls(
            type=str(data.get("type", "other")).lower(),
            features=[str(f) for f in features],
            condition=str(data.get("condition", "good")).lower(),
            appeal=appeal,
        )


@dataclass
class HeroCandidate:
    """Hero photo suggested by the vision model."""

    index: int
    reason: str = ""
    score: float = 0.0


@dataclass
class PhotoInsights:
    """Vision-model output for a listing's photo set.

    Only ``rooms`` and ``hero_candidate`` drive hero selection; the other
    fields are carried for the content generators.
    """

    rooms: list[RoomAnalysis] = field(default_factory=list)
    hero_candidate: HeroCandidate | None = None
    features: list[str] = field(default_factory=list)
    style: list[str] = field(default_factory=list)
    lighting: str = "unknown"
    condition: str = "unknown"
    selling_points: list[str] = field(default_factory=list)
    marketing_angles: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PhotoInsights:
        """Parse the vision-model JSON payload (camelCase keys)."""
        if not isinstance(data, dict):
            raise ValueError("Photo insights payload must be a JSON object")

        rooms = [RoomAnalysis.from_dict(r) for r in data.get("rooms") or []]

        candidate = None
        raw_candidate = data.get("heroCandidate")
        if raw_candidate:
            try:
                candidate = HeroCandidate(
                    index=int(raw_candidate["index"]),
                    reason=str(raw_candidate.get("reason", "")),
                    score=float(raw_candidate.get("score", 0) or 0),
                )
            except (KeyError, TypeError, ValueError):
                raise ValueError(f"Invalid heroCandidate: {raw_candidate!r}") from None

        return cls(
            rooms=rooms,
            hero_candidate=candidate,
            features=list(data.get("features") or []),
            style=list(data.get("style") or []),
            lighting=str(data.get("lighting", "unknown")),
            condition=str(data.get("condition", "unknown")),
            selling_points=list(data.get("sellingPoints") or []),
            marketing_angles=list(data.get("marketingAngles") or []),
        )


@dataclass
class HeroPreferences:
    """Optional user steering for hero selection."""

    preferred_room_types: list[str] = field(default_factory=list)
    minimum_quality: float | None = None
    aspect_ratio_preference: AspectPreference = "any"
    platform_optimized: str | None = None  # platform catalog key


@dataclass
class AnalysisRecord:
    """Per-photo working record built during one selection call."""

    index: int
    score: float
    quality_score: float = 0.0
    context_score: float = 0.0
    confidence: float = 0.0
    reason: str = ""
    room_analysis: RoomAnalysis | None = None
    failed: bool = False


@dataclass(frozen=True)
class Alternative:
    """A runner-up photo."""

    index: int
    reason: str
    score: float
    confidence: float


@dataclass(frozen=True)
class SelectionMetadata:
    total_photos: int
    analysis_method: AnalysisMethod
    processing_time_ms: float


@dataclass(frozen=True)
class HeroSelectionResult:
    """Outcome of hero selection."""

    selected_index: int
    reason: str
    confidence: float  # 0-1
    alternatives: tuple[Alternative, ...]
    metadata: SelectionMetadata

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation using the external camelCase keys."""
        return {
            "selectedIndex": self.selected_index,
            "reason": self.reason,
            "confidence": self.confidence,
            "alternatives": [
                {
                    "index": a.index,
                    "reason": a.reason,
                    "score": a.score,
                    "confidence": a.confidence,
                }
                for a in self.alternatives
            ],
            "metadata": {
                "totalPhotos": self.metadata.total_photos,
                "analysisMethod": self.metadata.analysis_method,
                "processingTimeMs": self.metadata.processing_time_ms,
            },
        }
