"""Vision-model insights: analyzer interface, payload loading, hero suggestion."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from listinghero.scoring.context import DEFAULT_ROOM_SCORE, ROOM_MARKETING_SCORES
from listinghero.scoring.types import HeroCandidate, PhotoInsights, RoomAnalysis

logger = logging.getLogger(__name__)


class PhotoAnalyzer(Protocol):
    """Anything that can classify listing photos (usually a hosted vision model)."""

    def analyze(self, photos: Sequence[bytes]) -> list[RoomAnalysis]: ...


def suggest_hero_candidate(rooms: Sequence[RoomAnalysis]) -> HeroCandidate | None:
    """Pick the vision model's hero suggestion from its room analyses.

    Room score plus condition (excellent +2, good +1) and appeal
    (>8: +2, >6: +1) bonuses. The first room with the highest total wins.
    """
    best: HeroCandidate | None = None
    for index, room in enumerate(rooms):
        score = ROOM_MARKETING_SCORES.get(room.type, DEFAULT_ROOM_SCORE)
        if room.condition == "excellent":
            score += 2
        elif room.condition == "good":
            score += 1
        if room.appeal > 8:
            score += 2
        elif room.appeal > 6:
            score += 1

        if best is None or score > best.score:
            best = HeroCandidate(
                index=index,
                reason=f"{room.type} with {', '.join(room.features)} - high marketing appeal",
                score=float(score),
            )
    return best


def collect_insights(
    analyzer: PhotoAnalyzer, photos: Sequence[bytes]
) -> PhotoInsights | None:
    """Run an analyzer over the photos and attach a hero suggestion.

    Returns None when the analyzer fails, so selection falls back to
    quality-only ranking instead of trusting a partial payload.
    """
    if not photos:
        return PhotoInsights()
    try:
        rooms = list(analyzer.analyze(photos))
    except Exception:
        logger.exception("Photo analyzer failed; continuing without insights")
        return None

    if len(rooms) != len(photos):
        logger.warning(
            "Analyzer returned %d room analyses for %d photos", len(rooms), len(photos)
        )
    return PhotoInsights(rooms=rooms, hero_candidate=suggest_hero_candidate(rooms))


def load_insights(path: Path) -> PhotoInsights:
    """Read a vision-model JSON payload from disk.

    Raises:
        ValueError: If the file is not valid JSON or not an insights object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid insights JSON in {path}: {e}") from e
    return PhotoInsights.from_dict(data)
