"""Tests for listinghero.variants module."""

import io

import pytest
from PIL import Image

import listinghero.variants as variants_module
from listinghero.overlay import HeroImageOptions
from listinghero.platforms import PLATFORM_SPECS, PlatformSpec, aspect_preference_for
from listinghero.scoring.types import PhotoInsights, RoomAnalysis
from listinghero.variants import (
    cover_fit,
    create_platform_variant,
    generate_hero_variants,
    process_hero_image,
)


def make_photo(w: int = 800, h: int = 600, color: tuple = (120, 130, 140)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (w, h), color).save(buf, "JPEG")
    return buf.getvalue()


def decode(buffer: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(buffer))
    img.load()
    return img


class TestPlatformCatalog:
    def test_catalog_order_and_sizes(self):
        assert list(PLATFORM_SPECS) == ["facebook", "instagram", "story", "email", "web", "print"]
        assert (PLATFORM_SPECS["story"].width, PLATFORM_SPECS["story"].height) == (1080, 1920)
        assert PLATFORM_SPECS["print"].display_name == "Print Flyer (8.5x11)"

    def test_aspect_preference(self):
        assert aspect_preference_for("facebook") == "landscape"
        assert aspect_preference_for("instagram") == "square"
        assert aspect_preference_for("story") == "portrait"
        assert aspect_preference_for("myspace") == "any"


class TestCoverFit:
    def test_exact_size(self):
        img = Image.new("RGB", (800, 600))
        assert cover_fit(img, 1080, 1920).size == (1080, 1920)
        assert cover_fit(img, 600, 400).size == (600, 400)

    def test_centre_crop(self):
        # red | green | blue thirds; a square crop keeps only the middle
        img = Image.new("RGB", (300, 100), (255, 0, 0))
        img.paste((0, 255, 0), (100, 0, 200, 100))
        img.paste((0, 0, 255), (200, 0, 300, 100))
        fitted = cover_fit(img, 50, 50)
        r, g, b = fitted.getpixel((25, 25))
        assert g > 200 and r < 50 and b < 50


class TestCreatePlatformVariant:
    def test_variant_fields(self):
        variant = create_platform_variant(
            make_photo(), "email", PLATFORM_SPECS["email"], HeroImageOptions()
        )
        assert variant.name == "hero_email"
        assert (variant.width, variant.height) == (600, 400)
        assert variant.platform_display_name == "Email Header"
        assert variant.description == "Optimized for Email Header"
        img = decode(variant.buffer)
        assert img.format == "JPEG"
        assert img.size == (600, 400)

    def test_overlay_description(self):
        variant = create_platform_variant(
            make_photo(), "email", PLATFORM_SPECS["email"], HeroImageOptions(overlay="sold")
        )
        assert variant.description == "Optimized for Email Header with sold overlay"

    def test_corrupt_hero(self):
        with pytest.raises(ValueError):
            create_platform_variant(
                b"nope", "email", PLATFORM_SPECS["email"], HeroImageOptions()
            )

    @pytest.mark.parametrize("overlay", [None, "sold"])
    def test_intermediates_released(self, monkeypatch, overlay):
        seen = []
        real_fit = variants_module.cover_fit

        def recording_fit(img, width, height):
            frame = real_fit(img, width, height)
            seen.extend([img, frame])
            return frame

        monkeypatch.setattr(variants_module, "cover_fit", recording_fit)
        create_platform_variant(
            make_photo(), "email", PLATFORM_SPECS["email"], HeroImageOptions(overlay=overlay)
        )
        assert len(seen) == 2
        for img in seen:
            with pytest.raises(ValueError):
                img.getpixel((0, 0))

    def test_frame_released_when_encoding_fails(self, monkeypatch):
        seen = []
        real_fit = variants_module.cover_fit

        def recording_fit(img, width, height):
            frame = real_fit(img, width, height)
            seen.append(frame)
            return frame

        def failing_save(self, *args, **kwargs):
            raise OSError("disk full")

        photo = make_photo()
        monkeypatch.setattr(variants_module, "cover_fit", recording_fit)
        monkeypatch.setattr(Image.Image, "save", failing_save)
        with pytest.raises(OSError, match="disk full"):
            create_platform_variant(photo, "email", PLATFORM_SPECS["email"], HeroImageOptions())
        with pytest.raises(ValueError):
            seen[0].getpixel((0, 0))

    def test_exif_orientation_applied(self):
        # left half red; tag 6 shows it rotated 90 CW, so red ends up on top
        img = Image.new("RGB", (400, 200), (0, 0, 255))
        img.paste((255, 0, 0), (0, 0, 200, 200))
        exif = Image.Exif()
        exif[0x0112] = 6
        buf = io.BytesIO()
        img.save(buf, "JPEG", exif=exif)
        spec = PlatformSpec(200, 400, "Tall")
        variant = create_platform_variant(buf.getvalue(), "tall", spec, HeroImageOptions())
        r, g, b = decode(variant.buffer).getpixel((100, 50))
        assert r > 200 and b < 50


class TestGenerateHeroVariants:
    def test_all_platforms(self):
        variants = generate_hero_variants(make_photo())
        assert [v.name for v in variants] == [f"hero_{p}" for p in PLATFORM_SPECS]
        for variant in variants:
            spec = PLATFORM_SPECS[variant.name.removeprefix("hero_")]
            assert decode(variant.buffer).size == (spec.width, spec.height)

    def test_overlay_changes_pixels(self):
        photo = make_photo()
        plain = generate_hero_variants(photo)
        overlaid = generate_hero_variants(photo, HeroImageOptions(overlay="just_listed", price="$1"))
        assert len(plain) == len(overlaid) == 6
        for a, b in zip(plain, overlaid):
            assert a.buffer != b.buffer

    def test_failed_platform_is_skipped(self, monkeypatch):
        real = variants_module.create_platform_variant

        def flaky(hero_buffer, platform, spec, options):
            if platform == "email":
                raise OSError("encoder crashed")
            return real(hero_buffer, platform, spec, options)

        monkeypatch.setattr(variants_module, "create_platform_variant", flaky)
        variants = generate_hero_variants(make_photo())
        assert [v.name for v in variants] == [
            "hero_facebook",
            "hero_instagram",
            "hero_story",
            "hero_web",
            "hero_print",
        ]

    def test_corrupt_hero_returns_empty(self):
        assert generate_hero_variants(b"not a photo") == []

    def test_custom_platforms(self):
        platforms = {"thumb": PlatformSpec(120, 80, "Thumbnail")}
        variants = generate_hero_variants(make_photo(), platforms=platforms)
        assert len(variants) == 1
        assert variants[0].name == "hero_thumb"
        assert decode(variants[0].buffer).size == (120, 80)


class TestProcessHeroImage:
    def test_selects_and_renders(self):
        small = make_photo(160, 120, (15, 15, 15))
        large = make_photo(1920, 1080, (128, 128, 128))
        result = process_hero_image([small, large])
        assert result.selected_index == 1
        assert result.original == large
        assert len(result.variants) == 6
        assert result.reason

    def test_empty(self):
        result = process_hero_image([])
        assert result.original is None
        assert result.variants == []
        assert result.selected_index == 0
        assert result.reason == "No photos available"

    def test_insights_passed_through(self):
        insights = PhotoInsights(rooms=[RoomAnalysis(type="exterior")], selling_points=["view"])
        result = process_hero_image(
            [make_photo()], insights, platforms={"email": PLATFORM_SPECS["email"]}
        )
        assert result.photo_insights is insights
        assert [v.name for v in result.variants] == ["hero_email"]
