"""Tests for listinghero.overlay module."""

import pytest

from listinghero.overlay import (
    OVERLAY_STYLES,
    AgentBrand,
    HeroImageOptions,
    load_font,
    overlay_text,
    render_overlay,
)


class TestOverlayText:
    def test_just_listed(self):
        options = HeroImageOptions(overlay="just_listed", price="$450,000", beds_baths="3 bd | 2 ba")
        assert overlay_text(options) == ("JUST LISTED", "$450,000 • 3 bd | 2 ba")

    def test_just_listed_without_price(self):
        options = HeroImageOptions(overlay="just_listed", beds_baths="3 bd | 2 ba")
        assert overlay_text(options) == ("JUST LISTED", "3 bd | 2 ba")

    def test_open_house(self):
        options = HeroImageOptions(
            overlay="open_house", open_house_date="Sat 6/14", open_house_time="1-4pm"
        )
        assert overlay_text(options) == ("OPEN HOUSE", "Sat 6/14 1-4pm")

    def test_open_house_date_only(self):
        options = HeroImageOptions(overlay="open_house", open_house_date="Sat 6/14")
        assert overlay_text(options) == ("OPEN HOUSE", "Sat 6/14")

    def test_price_reduced(self):
        options = HeroImageOptions(overlay="price_reduced", price="$425,000")
        assert overlay_text(options) == ("PRICE REDUCED", "$425,000")

    def test_fixed_sub_lines(self):
        assert overlay_text(HeroImageOptions(overlay="pending")) == ("PENDING", "Under Contract")
        assert overlay_text(HeroImageOptions(overlay="coming_soon")) == (
            "COMING SOON",
            "Contact agent for details",
        )

    def test_sold(self):
        assert overlay_text(HeroImageOptions(overlay="sold", price="$460,000")) == (
            "SOLD",
            "Sold for $460,000",
        )
        assert overlay_text(HeroImageOptions(overlay="sold")) == ("SOLD", None)

    def test_no_overlay(self):
        assert overlay_text(HeroImageOptions()) == ("", None)


class TestOptions:
    def test_unknown_status(self):
        with pytest.raises(ValueError, match="overlay status"):
            HeroImageOptions(overlay="foreclosure")

    def test_unknown_style(self):
        with pytest.raises(ValueError, match="overlay style"):
            HeroImageOptions(overlay="sold", style="neon")

    def test_agent_badge_text(self):
        brand = AgentBrand(name="Dana Reyes", phone="555-0100", website="reyes.homes")
        assert brand.badge_text == "Dana Reyes • 555-0100"
        assert AgentBrand(name="Dana Reyes").badge_text == "Dana Reyes"
        assert AgentBrand(phone="555-0100").badge_text == ""


class TestRenderOverlay:
    def test_layer_size_and_mode(self):
        layer = render_overlay(600, 400, HeroImageOptions(overlay="just_listed", price="$1"))
        assert layer.mode == "RGBA"
        assert layer.size == (600, 400)

    def test_label_drawn_inside_padding(self):
        layer = render_overlay(600, 400, HeroImageOptions(overlay="pending"))
        # padding is 20px at this width
        assert layer.getpixel((0, 0))[3] == 0
        assert layer.getpixel((30, 30))[3] > 0

    @pytest.mark.parametrize("style", sorted(OVERLAY_STYLES))
    def test_style_background(self, style):
        layer = render_overlay(600, 400, HeroImageOptions(overlay="sold", style=style))
        assert layer.getpixel((22, 45))[3] == OVERLAY_STYLES[style].background[3]

    def test_agent_badge_bottom_right(self):
        plain = render_overlay(600, 400, HeroImageOptions(overlay="sold"))
        assert plain.getpixel((575, 375))[3] == 0

        branded = render_overlay(
            600, 400, HeroImageOptions(overlay="sold", agent_brand=AgentBrand(name="Dana Reyes"))
        )
        assert branded.getpixel((575, 375))[3] == 178

    def test_no_overlay_is_transparent(self):
        layer = render_overlay(300, 200, HeroImageOptions())
        assert layer.getbbox() is None

    def test_font_loading_is_cached(self):
        assert load_font(30) is load_font(30)
