"""Technical quality pass: resolution, aspect, format, compression, exposure."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from listinghero.config import PIXELS_1080P, PIXELS_480P, PIXELS_4K, PIXELS_720P
from listinghero.scoring.types import ImageMetrics
from listinghero.scoring.utils import open_photo, reduce_for_stats

logger = logging.getLogger(__name__)

BASE_QUALITY = 5.0


def compute_mean_brightness(img: Image.Image) -> float:
    """Average of the R, G and B channel means (0-255)."""
    small = reduce_for_stats(img)
    try:
        arr = np.asarray(small, dtype=np.float64)
        channel_means = arr.reshape(-1, 3).mean(axis=0)
    finally:
        small.close()
    return float(channel_means.mean())


def extract_metrics(buffer: bytes) -> ImageMetrics:
    """Decode one photo buffer into ImageMetrics.

    The decoder is closed before returning and nothing keeps a reference to
    the buffer. Pixel statistics are best-effort: if they cannot be computed
    the brightness is left as None.

    Raises:
        ValueError: If the buffer cannot be decoded at all.
    """
    with open_photo(buffer) as img:
        width, height = img.size
        fmt = img.format

        try:
            brightness: float | None = compute_mean_brightness(img)
        except (OSError, ValueError) as e:
            logger.debug("Pixel statistics unavailable: %s", e)
            brightness = None

    return ImageMetrics(
        width=width,
        height=height,
        format=fmt,
        encoded_size=len(buffer),
        mean_brightness=brightness,
    )


def resolution_points(pixels: int) -> float:
    if pixels >= PIXELS_4K:
        return 4.0
    if pixels >= PIXELS_1080P:
        return 3.0
    if pixels >= PIXELS_720P:
        return 2.0
    if pixels >= PIXELS_480P:
        return 1.0
    return -1.0


def aspect_points(ratio: float) -> float:
    if 1.2 <= ratio <= 2.0:
        return 2.0  # landscape
    if 0.8 <= ratio <= 1.2:
        return 1.0  # near-square, fine for feed posts
    if ratio > 2.5 or ratio < 0.4:
        return -1.0
    return 0.0


def format_points(fmt: str | None) -> float:
    if fmt == "JPEG":
        return 1.0
    if fmt == "PNG":
        return 0.5
    return 0.0


def compression_points(density: float) -> float:
    if density > 0.5:
        return 2.0
    if density > 0.2:
        return 1.0
    if density < 0.1:
        return -1.0
    return 0.0


def exposure_points(mean_brightness: float | None) -> float:
    if mean_brightness is None:
        return 0.0
    if 50 < mean_brightness < 200:
        return 1.0
    if mean_brightness < 30 or mean_brightness > 220:
        return -2.0
    return 0.0


def matches_aspect_preference(ratio: float, preference: str | None) -> bool:
    if preference == "landscape":
        return ratio > 1.2
    if preference == "portrait":
        return ratio < 0.8
    if preference == "square":
        return 0.8 <= ratio <= 1.2
    return False


def score_quality(metrics: ImageMetrics, aspect_preference: str | None = None) -> float:
    """Additive technical quality score.

    Starts at 5 and has no fixed ceiling; in practice it lands in 0-15.

    Args:
        metrics: Decoded photo metrics.
        aspect_preference: landscape/portrait/square earns +1 when matched.

    Returns:
        Non-negative quality score.
    """
    score = BASE_QUALITY
    score += resolution_points(metrics.pixels)
    score += aspect_points(metrics.aspect_ratio)
    score += format_points(metrics.format)
    score += compression_points(metrics.density)
    score += exposure_points(metrics.mean_brightness)

    if matches_aspect_preference(metrics.aspect_ratio, aspect_preference):
        score += 1.0

    return max(0.0, score)


def analyze_photo_quality(
    buffer: bytes, aspect_preference: str | None = None
) -> tuple[ImageMetrics, float]:
    """Extract metrics from a buffer and score them."""
    metrics = extract_metrics(buffer)
    return metrics, score_quality(metrics, aspect_preference)
