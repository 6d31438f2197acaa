"""Status/price/agent overlay layers for hero variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Literal

from PIL import Image, ImageDraw, ImageFont

OverlayStatus = Literal[
    "just_listed", "open_house", "price_reduced", "pending", "sold", "coming_soon"
]
OVERLAY_STATUSES = frozenset(
    {"just_listed", "open_house", "price_reduced", "pending", "sold", "coming_soon"}
)

OverlayStyleName = Literal["modern", "luxury", "minimal", "bold"]

# Tried in order; Pillow's bundled font is used when none is installed.
FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf", "Helvetica.ttc")

AGENT_BADGE_FILL = (0, 0, 0, 178)
SEPARATOR = " • "


@dataclass(frozen=True)
class OverlayStyle:
    background: tuple[int, int, int, int]
    text_color: tuple[int, int, int, int]
    font_size: int
    radius: int


OVERLAY_STYLES = {
    "modern": OverlayStyle((0, 122, 255, 230), (255, 255, 255, 255), 48, 8),
    "luxury": OverlayStyle((212, 175, 55, 242), (255, 255, 255, 255), 44, 0),
    "minimal": OverlayStyle((255, 255, 255, 242), (0, 0, 0, 255), 40, 12),
    "bold": OverlayStyle((255, 59, 48, 230), (255, 255, 255, 255), 52, 0),
}


@dataclass
class AgentBrand:
    name: str | None = None
    phone: str | None = None
    website: str | None = None
    logo: str | None = None  # website and logo are not rendered

    @property
    def badge_text(self) -> str:
        """Name, then phone when set; empty without a name."""
        if not self.name:
            return ""
        return SEPARATOR.join(part for part in (self.name, self.phone) if part)


@dataclass
class HeroImageOptions:
    """Overlay settings for hero variants. overlay=None renders no overlay."""

    overlay: OverlayStatus | None = None
    price: str | None = None
    beds_baths: str | None = None
    open_house_date: str | None = None
    open_house_time: str | None = None
    agent_brand: AgentBrand | None = field(default=None)
    style: OverlayStyleName = "modern"

    def __post_init__(self) -> None:
        if self.overlay is not None and self.overlay not in OVERLAY_STATUSES:
            raise ValueError(
                f"Unknown overlay status {self.overlay!r}; "
                f"expected one of {', '.join(sorted(OVERLAY_STATUSES))}"
            )
        if self.style not in OVERLAY_STYLES:
            raise ValueError(
                f"Unknown overlay style {self.style!r}; "
                f"expected one of {', '.join(sorted(OVERLAY_STYLES))}"
            )


def overlay_text(options: HeroImageOptions) -> tuple[str, str | None]:
    """Headline and optional sub-line for the overlay status."""
    if options.overlay == "just_listed":
        if options.price:
            sub = options.price
            if options.beds_baths:
                sub += SEPARATOR + options.beds_baths
            return "JUST LISTED", sub
        return "JUST LISTED", options.beds_baths
    if options.overlay == "open_house":
        if options.open_house_date and options.open_house_time:
            return "OPEN HOUSE", f"{options.open_house_date} {options.open_house_time}"
        return "OPEN HOUSE", options.open_house_date or options.open_house_time
    if options.overlay == "price_reduced":
        return "PRICE REDUCED", options.price
    if options.overlay == "pending":
        return "PENDING", "Under Contract"
    if options.overlay == "sold":
        return "SOLD", f"Sold for {options.price}" if options.price else None
    if options.overlay == "coming_soon":
        return "COMING SOON", "Contact agent for details"
    return "", None


@lru_cache(maxsize=32)
def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _draw_label(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    box: tuple[float, float, float, float],
    fill: tuple[int, int, int, int],
    text_color: tuple[int, int, int, int],
    radius: int,
    text_x: float,
) -> None:
    """Draw a filled box with text vertically centred inside it."""
    draw.rounded_rectangle(box, radius=radius, fill=fill)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_y = box[1] + (box[3] - box[1] - (bottom - top)) / 2 - top
    draw.text((text_x, text_y), text, font=font, fill=text_color)


def render_overlay(width: int, height: int, options: HeroImageOptions) -> Image.Image:
    """Render a transparent RGBA layer the size of the platform rendition.

    Font size and padding scale with width so small renditions stay legible.
    """
    style = OVERLAY_STYLES[options.style]
    main, sub = overlay_text(options)

    font_size = int(max(24, min(style.font_size, width / 20)))
    padding = max(20.0, width / 40)
    max_box_width = width - padding * 2

    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    if main:
        font = load_font(font_size)
        text_width = draw.textlength(main, font=font)
        box_height = font_size + padding
        box = (
            padding,
            padding,
            padding + min(max_box_width, text_width + padding),
            padding + box_height,
        )
        _draw_label(
            draw, main, font, box, style.background, style.text_color, style.radius,
            text_x=padding * 1.5,
        )

        if sub:
            sub_font = load_font(max(12, int(font_size * 0.6)))
            sub_width = draw.textlength(sub, font=sub_font)
            sub_top = padding * 2 + font_size
            sub_box = (
                padding,
                sub_top,
                padding + min(max_box_width, sub_width + padding),
                sub_top + font_size * 0.6 + padding * 0.5,
            )
            _draw_label(
                draw, sub, sub_font, sub_box, style.background, style.text_color,
                style.radius, text_x=padding * 1.5,
            )

    badge = options.agent_brand.badge_text if options.agent_brand else ""
    if badge:
        badge_font = load_font(max(12, int(font_size * 0.4)))
        left, top, right, bottom = draw.textbbox((0, 0), badge, font=badge_font)
        badge_width = min(max_box_width, (right - left) + padding)
        badge_height = (bottom - top) + padding * 0.5
        badge_box = (
            width - padding - badge_width,
            height - padding - badge_height,
            width - padding,
            height - padding,
        )
        _draw_label(
            draw, badge, badge_font, badge_box, AGENT_BADGE_FILL, (255, 255, 255, 255), 4,
            text_x=badge_box[0] + padding * 0.5,
        )

    return layer
