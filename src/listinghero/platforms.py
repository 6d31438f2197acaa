"""Target platform renditions for hero variants."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class PlatformSpec:
    width: int
    height: int
    display_name: str

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


# Iteration order is the order variants are produced in.
PLATFORM_SPECS: Mapping[str, PlatformSpec] = MappingProxyType(
    {
        "facebook": PlatformSpec(1200, 630, "Facebook Post"),
        "instagram": PlatformSpec(1080, 1080, "Instagram Feed"),
        "story": PlatformSpec(1080, 1920, "Instagram/Facebook Story"),
        "email": PlatformSpec(600, 400, "Email Header"),
        "web": PlatformSpec(1920, 1080, "Website Hero"),
        "print": PlatformSpec(2550, 3300, "Print Flyer (8.5x11)"),
    }
)


def aspect_preference_for(
    platform: str, platforms: Mapping[str, PlatformSpec] = PLATFORM_SPECS
) -> str:
    """Map a platform key to landscape/portrait/square ("any" if unknown)."""
    spec = platforms.get(platform)
    if spec is None:
        return "any"
    ratio = spec.aspect_ratio
    if ratio > 1.2:
        return "landscape"
    if ratio < 0.8:
        return "portrait"
    return "square"
