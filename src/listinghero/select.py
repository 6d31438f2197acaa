"""Hero selector: rank listing photos and pick the hero.

Strategies, tried in order and never mixed within one call:
    1. AI insights - room analyses line up 1:1 with the photos
    2. Quality analysis - pixel quality plus room type guessed from position
    3. Fallback - no photos, every photo failed, or an unexpected error

Photos are analysed one at a time in index order. Each decoder is closed
before the next photo is opened, so memory stays bounded by a single photo
no matter how large the listing is.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from functools import partial
from typing import Any, TypeVar

from listinghero.config import (
    DEFAULT_CONFIG,
    FAILED_CONFIDENCE,
    FAILED_SCORE,
    PIXELS_1080P,
    SelectionConfig,
)
from listinghero.platforms import aspect_preference_for
from listinghero.scoring.confidence import (
    estimate_confidence,
    estimate_quality_only_confidence,
)
from listinghero.scoring.context import (
    infer_room_type,
    score_basic_context,
    score_context,
)
from listinghero.scoring.quality import analyze_photo_quality
from listinghero.scoring.types import (
    Alternative,
    AnalysisMethod,
    AnalysisRecord,
    HeroPreferences,
    HeroSelectionResult,
    ImageMetrics,
    PhotoInsights,
    RoomAnalysis,
    SelectionMetadata,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ALTERNATIVES = 3
SCORE_EPSILON = 1e-9

AI_OVERRIDE_REASON = "AI recommendation validated by quality analysis"

ROOM_DESCRIPTIONS = {
    "exterior": "front exterior (classic choice)",
    "kitchen": "kitchen (high engagement)",
    "living": "living room (family appeal)",
    "pool": "pool area (luxury appeal)",
    "dining": "dining room",
    "bedroom": "bedroom",
    "bathroom": "bathroom",
    "office": "office space",
    "garage": "garage",
    "other": "property feature",
}


def build_detailed_reason(room: RoomAnalysis, quality_score: float) -> str:
    """Explain an AI-assisted score in plain words."""
    reasons = [ROOM_DESCRIPTIONS.get(room.type, "property area")]

    if quality_score > 10:
        reasons.append("excellent image quality")
    elif quality_score > 7:
        reasons.append("good image quality")

    if room.condition == "excellent":
        reasons.append("pristine condition")
    elif room.condition == "good":
        reasons.append("good condition")

    if len(room.features) > 2:
        reasons.append(f"notable features ({', '.join(room.features[:2])})")

    if room.appeal > 8:
        reasons.append("strong marketing appeal")

    return ", ".join(reasons)


def build_quality_reason(room_type: str, quality_score: float, metrics: ImageMetrics) -> str:
    """Explain a quality-only score."""
    if room_type == "exterior":
        reasons = ["front exterior photo"]
    elif room_type == "kitchen":
        reasons = ["kitchen area"]
    else:
        reasons = [f"{room_type} photo"]

    if quality_score > 10:
        reasons.append("high quality")
    elif quality_score > 7:
        reasons.append("good quality")

    if metrics.pixels >= PIXELS_1080P:
        reasons.append("high resolution")

    return ", ".join(reasons)


def _run_with_timeout(func: Callable[[], T], timeout: float | None) -> T:
    """Run func, raising TimeoutError if it takes longer than timeout seconds.

    The worker is a daemon thread: a hung call is abandoned rather than
    awaited, and it cannot hold the interpreter open at exit.
    """
    if timeout is None:
        return func()

    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = func()
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=target, name="listinghero-photo", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise TimeoutError(f"Photo analysis exceeded {timeout:g}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def _resolve_aspect_preference(preferences: HeroPreferences) -> str | None:
    if preferences.aspect_ratio_preference != "any":
        return preferences.aspect_ratio_preference
    if preferences.platform_optimized:
        preference = aspect_preference_for(preferences.platform_optimized)
        return None if preference == "any" else preference
    return None


def _analyze_with_insights(
    photo_buffers: Sequence[bytes],
    rooms: Sequence[RoomAnalysis],
    property_type: str | None,
    preferences: HeroPreferences,
    config: SelectionConfig,
) -> list[AnalysisRecord]:
    aspect_preference = _resolve_aspect_preference(preferences)
    records = []

    for i, buffer in enumerate(photo_buffers):
        room = rooms[i]
        try:
            metrics, quality = _run_with_timeout(
                partial(analyze_photo_quality, buffer, aspect_preference),
                config.PHOTO_TIMEOUT,
            )
            context = score_context(room, property_type, preferences.preferred_room_types)
            total = (
                quality * config.WEIGHT_AI_QUALITY
                + context * config.WEIGHT_AI_CONTEXT
                + room.appeal * config.WEIGHT_AI_APPEAL
            )
            confidence = estimate_confidence(
                quality_score=quality,
                context_score=context,
                appeal=room.appeal,
                has_metadata=metrics.has_dimensions,
                room_type=room.type,
            )
            record = AnalysisRecord(
                index=i,
                score=total,
                quality_score=quality,
                context_score=context,
                confidence=confidence,
                reason=build_detailed_reason(room, quality),
                room_analysis=room,
            )
        except Exception as e:
            logger.warning("Failed to analyze photo %d: %s", i, e)
            record = AnalysisRecord(
                index=i,
                score=FAILED_SCORE,
                confidence=FAILED_CONFIDENCE,
                reason="Analysis failed",
                room_analysis=room,
                failed=True,
            )

        logger.debug("Photo %d: score=%.2f confidence=%.2f", i, record.score, record.confidence)
        records.append(record)

    return records


def _analyze_quality_only(
    photo_buffers: Sequence[bytes],
    property_type: str | None,
    preferences: HeroPreferences,
    config: SelectionConfig,
) -> list[AnalysisRecord]:
    aspect_preference = _resolve_aspect_preference(preferences)
    total_photos = len(photo_buffers)
    records = []

    for i, buffer in enumerate(photo_buffers):
        try:
            metrics, quality = _run_with_timeout(
                partial(analyze_photo_quality, buffer, aspect_preference),
                config.PHOTO_TIMEOUT,
            )
            room_type = infer_room_type(i, total_photos)
            context = score_basic_context(
                room_type, property_type, preferences.preferred_room_types
            )
            record = AnalysisRecord(
                index=i,
                score=quality * config.WEIGHT_QUALITY + context * config.WEIGHT_CONTEXT,
                quality_score=quality,
                context_score=context,
                confidence=estimate_quality_only_confidence(quality),
                reason=build_quality_reason(room_type, quality, metrics),
            )
        except Exception as e:
            logger.warning("Failed to analyze photo %d: %s", i, e)
            record = AnalysisRecord(
                index=i,
                score=FAILED_SCORE,
                confidence=FAILED_CONFIDENCE,
                reason="Quality analysis failed",
                failed=True,
            )

        logger.debug("Photo %d: score=%.2f confidence=%.2f", i, record.score, record.confidence)
        records.append(record)

    return records


def rank_records(
    records: Sequence[AnalysisRecord],
    config: SelectionConfig = DEFAULT_CONFIG,
    minimum_quality: float | None = None,
) -> list[AnalysisRecord]:
    """Order candidates best first.

    Score leads, with confidence as a secondary weight. Photos below
    minimum_quality (when set) sink below every photo that meets it.
    Equal keys keep photo order.
    """

    def sort_key(record: AnalysisRecord) -> tuple[bool, float]:
        below_minimum = minimum_quality is not None and record.quality_score < minimum_quality
        return (below_minimum, -(record.score + config.CONFIDENCE_TIE_WEIGHT * record.confidence))

    return sorted(records, key=sort_key)


def apply_candidate_override(
    ranked: Sequence[AnalysisRecord],
    candidate_index: int,
    threshold: float = DEFAULT_CONFIG.OVERRIDE_THRESHOLD,
) -> AnalysisRecord | None:
    """Return the AI-suggested record if it scores within threshold of the top.

    Local scoring is a sanity check on the vision model's pick, not a
    replacement for it.
    """
    if not ranked:
        return None
    choice = next((r for r in ranked if r.index == candidate_index), None)
    if choice is None:
        return None
    if choice.score >= ranked[0].score * threshold - SCORE_EPSILON:
        return choice
    return None


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def build_result(
    winner: AnalysisRecord,
    ranked: Sequence[AnalysisRecord],
    analysis_method: AnalysisMethod,
    started: float,
    reason: str | None = None,
) -> HeroSelectionResult:
    """Assemble the result from the winner and up to three runners-up."""
    # ranked is already in ranking order, so equal scores keep it
    runners_up = sorted(
        (r for r in ranked if r.index != winner.index), key=lambda r: -r.score
    )
    alternatives = tuple(
        Alternative(index=r.index, reason=r.reason, score=r.score, confidence=r.confidence)
        for r in runners_up[:MAX_ALTERNATIVES]
    )
    return HeroSelectionResult(
        selected_index=winner.index,
        reason=reason or winner.reason,
        confidence=min(1.0, max(0.0, winner.confidence)),
        alternatives=alternatives,
        metadata=SelectionMetadata(
            total_photos=len(ranked),
            analysis_method=analysis_method,
            processing_time_ms=_elapsed_ms(started),
        ),
    )


def _fallback_result(
    total_photos: int, reason: str, confidence: float, started: float
) -> HeroSelectionResult:
    return HeroSelectionResult(
        selected_index=0,
        reason=reason,
        confidence=confidence,
        alternatives=(),
        metadata=SelectionMetadata(
            total_photos=total_photos,
            analysis_method="fallback",
            processing_time_ms=_elapsed_ms(started),
        ),
    )


def select_optimal_hero(
    photo_buffers: Sequence[bytes],
    photo_insights: PhotoInsights | None = None,
    property_type: str | None = None,
    preferences: HeroPreferences | None = None,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> HeroSelectionResult:
    """Pick the hero photo for a listing.

    Never raises: failures lower a photo's rank, and anything unexpected
    produces a low-confidence fallback result pointing at the first photo.

    Args:
        photo_buffers: Encoded photos in listing order.
        photo_insights: Vision-model output; used only when it has exactly
            one room analysis per photo.
        property_type: Free-text hint such as "luxury" or "condo".
        preferences: Optional user steering.
        config: Blend weights and thresholds.

    Returns:
        HeroSelectionResult with the chosen index, reasoning and alternatives.
    """
    started = time.perf_counter()

    if not photo_buffers:
        return _fallback_result(0, "No photos available", 0.0, started)

    total_photos = len(photo_buffers)
    preferences = preferences or HeroPreferences()

    try:
        rooms = photo_insights.rooms if photo_insights is not None else []
        if rooms and len(rooms) == total_photos:
            analysis_method: AnalysisMethod = "ai_insights"
            records = _analyze_with_insights(
                photo_buffers, rooms, property_type, preferences, config
            )
        else:
            if rooms:
                logger.info(
                    "Ignoring %d room analyses for %d photos; using quality analysis",
                    len(rooms),
                    total_photos,
                )
            analysis_method = "quality_analysis"
            records = _analyze_quality_only(photo_buffers, property_type, preferences, config)

        if all(r.failed for r in records):
            logger.warning("All %d photo analyses failed", total_photos)
            return _fallback_result(
                total_photos,
                "All photo analyses failed, using first photo",
                FAILED_CONFIDENCE,
                started,
            )

        ranked = rank_records(records, config, preferences.minimum_quality)

        candidate = photo_insights.hero_candidate if photo_insights is not None else None
        if analysis_method == "ai_insights" and candidate is not None:
            choice = apply_candidate_override(ranked, candidate.index, config.OVERRIDE_THRESHOLD)
            if choice is not None:
                logger.info("Using AI-suggested hero photo %d", choice.index)
                return build_result(choice, ranked, analysis_method, started, AI_OVERRIDE_REASON)

        result = build_result(ranked[0], ranked, analysis_method, started)
        logger.info(
            "Selected photo %d of %d (%s, confidence %.2f)",
            result.selected_index,
            total_photos,
            analysis_method,
            result.confidence,
        )
        return result

    except Exception:
        logger.exception("Hero selection failed; falling back to first photo")
        return _fallback_result(
            total_photos, "Analysis failed, using first photo", FAILED_CONFIDENCE, started
        )
