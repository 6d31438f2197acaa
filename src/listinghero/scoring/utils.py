"""Decoding helpers shared by the scoring passes and the variant generator."""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager

from PIL import Image, UnidentifiedImageError

from listinghero.config import STATS_MAX_DIM


@contextmanager
def open_photo(buffer: bytes) -> Iterator[Image.Image]:
    """Open an encoded photo buffer and close the decoder on exit.

    Pillow decodes lazily: size and format are read from the header, pixels
    only when first accessed.

    Raises:
        ValueError: If the buffer is empty or not a recognisable image.
    """
    if not buffer:
        raise ValueError("Could not decode image: empty buffer")
    try:
        img = Image.open(io.BytesIO(buffer))
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Could not decode image: {e}") from e
    try:
        yield img
    finally:
        img.close()


def auto_orient(img: Image.Image) -> Image.Image:
    """Rotate/flip according to the EXIF orientation tag.

    Phone photos are usually stored sideways with an orientation tag, so
    crops must be taken after this step. Returns the image unchanged when
    there is no tag.
    """
    try:
        exif = img.getexif()
        if not exif:
            return img

        # Orientation is tag 274
        orientation = exif.get(274)
        if orientation is None:
            return img

        if orientation == 2:
            return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        elif orientation == 3:
            return img.rotate(180, expand=True)
        elif orientation == 4:
            return img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        elif orientation == 5:
            return img.transpose(Image.Transpose.TRANSPOSE)
        elif orientation == 6:
            return img.rotate(270, expand=True)
        elif orientation == 7:
            return img.transpose(Image.Transpose.TRANSVERSE)
        elif orientation == 8:
            return img.rotate(90, expand=True)
        else:
            return img
    except (AttributeError, KeyError, IndexError):
        return img


def reduce_for_stats(img: Image.Image, max_dim: int = STATS_MAX_DIM) -> Image.Image:
    """Return a small RGB copy suitable for channel statistics.

    For JPEG sources ``draft`` lets the decoder downscale by DCT scaling, so
    a full-resolution bitmap is never materialised.
    """
    if img.format == "JPEG":
        img.draft("RGB", (max_dim, max_dim))

    small = img.convert("RGB")
    if max(small.size) > max_dim:
        small.thumbnail((max_dim, max_dim), Image.Resampling.BILINEAR)
    return small
