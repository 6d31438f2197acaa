"""listinghero: hero photo selection and platform variants for property listings."""

from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path

from listinghero.config import DEFAULT_CONFIG, SelectionConfig
from listinghero.insights import PhotoAnalyzer, collect_insights, load_insights
from listinghero.overlay import OVERLAY_STATUSES, OVERLAY_STYLES, AgentBrand, HeroImageOptions
from listinghero.platforms import PLATFORM_SPECS, PlatformSpec
from listinghero.scoring.types import (
    HeroPreferences,
    HeroSelectionResult,
    PhotoInsights,
    RoomAnalysis,
)
from listinghero.select import select_optimal_hero
from listinghero.ui import configure_logging, create_progress
from listinghero.variants import (
    HeroImageResult,
    HeroImageVariant,
    generate_hero_variants,
    process_hero_image,
)

__version__ = "0.1.0"

__all__ = [
    "AgentBrand",
    "DEFAULT_CONFIG",
    "HeroImageOptions",
    "HeroImageResult",
    "HeroImageVariant",
    "HeroPreferences",
    "HeroSelectionResult",
    "PLATFORM_SPECS",
    "PhotoAnalyzer",
    "PhotoInsights",
    "PlatformSpec",
    "RoomAnalysis",
    "SelectionConfig",
    "collect_insights",
    "generate_hero_variants",
    "load_insights",
    "main",
    "process_hero_image",
    "select_optimal_hero",
]


def read_photos(paths: list[Path]) -> list[bytes]:
    """Read photo files in the given order."""
    buffers = []
    with create_progress() as progress:
        task = progress.add_task("[cyan]Reading photos...", total=len(paths))
        for path in paths:
            progress.update(task, description=f"[cyan]Reading {path.name}...")
            buffers.append(path.read_bytes())
            progress.advance(task)
    return buffers


def write_variants(variants: list[HeroImageVariant], out_dir: Path) -> list[Path]:
    """Write each variant as <out_dir>/<name>.jpg."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for variant in variants:
        path = out_dir / f"{variant.name}.jpg"
        path.write_bytes(variant.buffer)
        written.append(path)
    return written


def _add_overlay_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--overlay", choices=sorted(OVERLAY_STATUSES), default=None, help="Status overlay"
    )
    parser.add_argument("--price", default=None, help="Listing or sold price text")
    parser.add_argument("--beds-baths", default=None, help='e.g. "3 bd | 2 ba"')
    parser.add_argument("--open-house-date", default=None)
    parser.add_argument("--open-house-time", default=None)
    parser.add_argument("--agent-name", default=None)
    parser.add_argument("--agent-phone", default=None)
    parser.add_argument(
        "--style",
        choices=sorted(OVERLAY_STYLES),
        default="modern",
        help="Overlay style (default: modern)",
    )


def _non_negative_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not math.isfinite(number) or number < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative number, got {value}")
    return number


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--insights", type=Path, default=None, help="Vision-model insights JSON file"
    )
    parser.add_argument(
        "--property-type", default=None, help='Property type hint, e.g. "luxury"'
    )
    parser.add_argument(
        "--override-threshold",
        type=_non_negative_float,
        default=DEFAULT_CONFIG.OVERRIDE_THRESHOLD,
        help=f"Share of the top score the AI pick needs (default: {DEFAULT_CONFIG.OVERRIDE_THRESHOLD})",
    )
    parser.add_argument(
        "--photo-timeout",
        type=_non_negative_float,
        default=DEFAULT_CONFIG.PHOTO_TIMEOUT,
        help=f"Seconds per photo analysis, 0 to disable (default: {DEFAULT_CONFIG.PHOTO_TIMEOUT})",
    )


def _options_from_args(args: argparse.Namespace) -> HeroImageOptions:
    brand = None
    if args.agent_name:
        brand = AgentBrand(name=args.agent_name, phone=args.agent_phone)
    return HeroImageOptions(
        overlay=args.overlay,
        price=args.price,
        beds_baths=args.beds_baths,
        open_house_date=args.open_house_date,
        open_house_time=args.open_house_time,
        agent_brand=brand,
        style=args.style,
    )


def _config_from_args(args: argparse.Namespace) -> SelectionConfig:
    return SelectionConfig(
        OVERRIDE_THRESHOLD=args.override_threshold,
        PHOTO_TIMEOUT=args.photo_timeout or None,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="listinghero",
        description="Pick a listing's hero photo and render it for each platform.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log per-photo scoring details"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # select command
    select_parser = subparsers.add_parser("select", help="Rank photos and pick the hero")
    select_parser.add_argument("photos", type=Path, nargs="+", help="Photos in listing order")
    _add_selection_arguments(select_parser)
    select_parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )

    # variants command
    variants_parser = subparsers.add_parser(
        "variants", help="Render a hero photo for every platform"
    )
    variants_parser.add_argument("hero", type=Path, help="Hero photo")
    variants_parser.add_argument("--out", type=Path, required=True, help="Output directory")
    _add_overlay_arguments(variants_parser)

    # process command - select + variants
    process_parser = subparsers.add_parser(
        "process", help="Pick the hero and render its platform variants"
    )
    process_parser.add_argument("photos", type=Path, nargs="+", help="Photos in listing order")
    process_parser.add_argument("--out", type=Path, required=True, help="Output directory")
    _add_selection_arguments(process_parser)
    _add_overlay_arguments(process_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    if args.command == "select":
        return cmd_select(
            args.photos, args.insights, args.property_type, _config_from_args(args), args.json
        )
    if args.command == "variants":
        return cmd_variants(args.hero, args.out, _options_from_args(args))
    if args.command == "process":
        return cmd_process(
            args.photos,
            args.out,
            args.insights,
            args.property_type,
            _options_from_args(args),
            _config_from_args(args),
        )

    parser.print_help()
    return 1


def _check_files(paths: list[Path]) -> bool:
    missing = [p for p in paths if not p.is_file()]
    for path in missing:
        print(f"Error: {path} is not a file", file=sys.stderr)
    return not missing


def _load_optional_insights(path: Path | None) -> tuple[bool, PhotoInsights | None]:
    if path is None:
        return True, None
    try:
        return True, load_insights(path)
    except (OSError, ValueError) as e:
        print(f"Error: could not load insights: {e}", file=sys.stderr)
        return False, None


def cmd_select(
    photos: list[Path],
    insights_path: Path | None,
    property_type: str | None,
    config: SelectionConfig,
    as_json: bool,
) -> int:
    """Rank photos and print the chosen hero."""
    if not _check_files(photos):
        return 1
    ok, insights = _load_optional_insights(insights_path)
    if not ok:
        return 1

    buffers = read_photos(photos)
    result = select_optimal_hero(buffers, insights, property_type, config=config)

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Hero: [{result.selected_index}] {photos[result.selected_index].name}")
    print(f"Reason: {result.reason}")
    print(
        f"Confidence: {result.confidence:.2f} "
        f"({result.metadata.analysis_method}, {result.metadata.processing_time_ms:.0f} ms)"
    )

    if result.alternatives:
        print()
        print(f"{'Rank':<5} {'Score':<7} {'Conf':<6} {'File'}")
        print("-" * 60)
        for rank, alt in enumerate(result.alternatives, 2):
            print(
                f"{rank:<5} {alt.score:>5.2f}  {alt.confidence:>4.2f}  "
                f"{photos[alt.index].name} ({alt.reason})"
            )
    return 0


def cmd_variants(hero: Path, out: Path, options: HeroImageOptions) -> int:
    """Render one photo for every platform."""
    if not _check_files([hero]):
        return 1

    variants = generate_hero_variants(hero.read_bytes(), options)
    if not variants:
        print(f"Error: no variants could be rendered from {hero}", file=sys.stderr)
        return 1

    for path in write_variants(variants, out):
        print(f"Wrote {path}")
    print(f"\n✓ {len(variants)} of {len(PLATFORM_SPECS)} platform variants")
    return 0


def cmd_process(
    photos: list[Path],
    out: Path,
    insights_path: Path | None,
    property_type: str | None,
    options: HeroImageOptions,
    config: SelectionConfig,
) -> int:
    """Pick the hero and render its platform variants."""
    if not _check_files(photos):
        return 1
    ok, insights = _load_optional_insights(insights_path)
    if not ok:
        return 1

    buffers = read_photos(photos)
    result = process_hero_image(
        buffers, insights, options, property_type=property_type, config=config
    )
    print(f"Hero: [{result.selected_index}] {photos[result.selected_index].name}")
    print(f"Reason: {result.reason}")

    if not result.variants:
        print("Error: no variants could be rendered", file=sys.stderr)
        return 1

    for path in write_variants(result.variants, out):
        print(f"Wrote {path}")
    print(f"\n✓ {len(result.variants)} of {len(PLATFORM_SPECS)} platform variants")
    return 0


if __name__ == "__main__":
    sys.exit(main())
