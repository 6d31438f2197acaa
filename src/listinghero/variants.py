"""Platform renditions of the hero photo."""

from __future__ import annotations

import io
import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from PIL import Image, ImageOps

from listinghero.config import DEFAULT_CONFIG, VARIANT_JPEG_QUALITY, SelectionConfig
from listinghero.overlay import HeroImageOptions, render_overlay
from listinghero.platforms import PLATFORM_SPECS, PlatformSpec
from listinghero.scoring.types import HeroPreferences, PhotoInsights
from listinghero.scoring.utils import auto_orient, open_photo
from listinghero.select import select_optimal_hero

logger = logging.getLogger(__name__)


@dataclass
class HeroImageVariant:
    """One encoded rendition of the hero photo."""

    name: str
    buffer: bytes  # JPEG
    width: int
    height: int
    platform_display_name: str
    description: str


@dataclass
class HeroImageResult:
    original: bytes | None
    variants: list[HeroImageVariant]
    selected_index: int
    reason: str
    photo_insights: PhotoInsights | None = None


def cover_fit(img: Image.Image, width: int, height: int) -> Image.Image:
    """Scale and centre-crop to exactly width x height (no letterboxing)."""
    return ImageOps.fit(
        img, (width, height), method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
    )


def apply_overlay(frame: Image.Image, options: HeroImageOptions) -> Image.Image:
    """Return a new RGB image with the overlay layer composited onto frame."""
    layer = render_overlay(frame.width, frame.height, options)
    base = frame.convert("RGBA")
    try:
        composed = Image.alpha_composite(base, layer)
    finally:
        base.close()
        layer.close()
    try:
        return composed.convert("RGB")
    finally:
        composed.close()


def create_platform_variant(
    hero_buffer: bytes,
    platform: str,
    spec: PlatformSpec,
    options: HeroImageOptions,
) -> HeroImageVariant:
    """Render a single platform rendition.

    Raises:
        ValueError: If the hero buffer cannot be decoded.
    """
    with open_photo(hero_buffer) as img:
        oriented = auto_orient(img)
        try:
            rgb = oriented.convert("RGB")
            try:
                frame = cover_fit(rgb, spec.width, spec.height)
            finally:
                rgb.close()
        finally:
            if oriented is not img:
                oriented.close()

    try:
        if options.overlay:
            flattened = apply_overlay(frame, options)
            frame.close()
            frame = flattened

        out = io.BytesIO()
        frame.save(out, format="JPEG", quality=VARIANT_JPEG_QUALITY)
    finally:
        frame.close()

    description = f"Optimized for {spec.display_name}"
    if options.overlay:
        description += f" with {options.overlay} overlay"

    return HeroImageVariant(
        name=f"hero_{platform}",
        buffer=out.getvalue(),
        width=spec.width,
        height=spec.height,
        platform_display_name=spec.display_name,
        description=description,
    )


def generate_hero_variants(
    hero_buffer: bytes,
    options: HeroImageOptions | None = None,
    platforms: Mapping[str, PlatformSpec] = PLATFORM_SPECS,
) -> list[HeroImageVariant]:
    """Render the hero photo for every platform in catalog order.

    A platform that fails to render is logged and left out; the others are
    unaffected. Never raises.
    """
    options = options or HeroImageOptions()
    variants = []

    for platform, spec in platforms.items():
        try:
            variants.append(create_platform_variant(hero_buffer, platform, spec, options))
        except Exception:
            logger.exception("Failed to create %s variant", platform)
        # let other threads run between large renders
        time.sleep(0)

    logger.info("Generated %d of %d hero variants", len(variants), len(platforms))
    return variants


def process_hero_image(
    photo_buffers: Sequence[bytes],
    photo_insights: PhotoInsights | None = None,
    options: HeroImageOptions | None = None,
    property_type: str | None = None,
    preferences: HeroPreferences | None = None,
    platforms: Mapping[str, PlatformSpec] = PLATFORM_SPECS,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> HeroImageResult:
    """Select the hero photo and render it for every platform."""
    selection = select_optimal_hero(
        photo_buffers, photo_insights, property_type, preferences, config
    )

    if not photo_buffers:
        return HeroImageResult(
            original=None,
            variants=[],
            selected_index=selection.selected_index,
            reason=selection.reason,
            photo_insights=photo_insights,
        )

    hero_buffer = photo_buffers[selection.selected_index]
    return HeroImageResult(
        original=hero_buffer,
        variants=generate_hero_variants(hero_buffer, options, platforms),
        selected_index=selection.selected_index,
        reason=selection.reason,
        photo_insights=photo_insights,
    )
