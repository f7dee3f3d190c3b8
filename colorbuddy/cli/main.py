# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Command-line driver.

Runs the extraction pipeline once per image. Images are independent, so
they may be processed on a thread pool; a failure on one image is logged
and the rest of the batch continues.
"""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from colorbuddy.cli.args import OutputType, parse_args
from colorbuddy.cli.output_path import output_file_name
from colorbuddy.errors import ColorBuddyError, InvalidParameterError
from colorbuddy.quantize import ExtractionConfig, load_image, quantize, sample_pixels
from colorbuddy.render import GeometryRequest, overlay_palette, standalone_palette
from colorbuddy.runtime import SerializerFormat, to_json
from colorbuddy.schema import PaletteMode

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Formats Pillow cannot write with an alpha channel
_NO_ALPHA_SUFFIXES = {".jpg", ".jpeg", ".bmp"}


def process_image(
    path: Path,
    output_path: Path,
    *,
    config: ExtractionConfig,
    geometry: GeometryRequest,
    output_type: OutputType,
) -> Optional[str]:
    """
    Extract a palette from one image and write the requested output.

    Returns:
        The JSON text for OutputType.JSON (the caller prints it), else None.

    Raises:
        ColorBuddyError: Malformed image or invalid request
        OSError: The image could not be read, or the output written
    """
    pixels = load_image(path)
    height, width = pixels.shape[:2]
    samples = sample_pixels(pixels, alpha_threshold=config.alpha_threshold)
    palette = quantize(samples, config)
    logger.info(
        "%s: %d colors (%s, %d iterations%s)",
        path, len(palette), palette.method, palette.iterations,
        "" if palette.converged else ", not converged",
    )

    if output_type in (OutputType.JSON, OutputType.JSON_FILE):
        text = to_json(
            palette,
            requested_colors=config.n_colors,
            image_width=width,
            image_height=height,
            format=SerializerFormat.JSON_PRETTY,
        )
        if output_type is OutputType.JSON:
            return text
        output_path.write_text(text + "\n", encoding="utf-8")
    elif output_type is OutputType.STANDALONE:
        _save_image(standalone_palette(palette, geometry, width, height), output_path)
    else:
        _save_image(overlay_palette(pixels, palette, geometry), output_path)

    logger.info("%s: wrote %s", path, output_path)
    return None


def _save_image(pixels: NDArray[np.uint8], path: Path) -> None:
    """
    Encode pixels in the format named by the path suffix.

    Raises:
        InvalidParameterError: Pillow cannot write that suffix
        OSError: The file could not be written
    """
    from PIL import Image

    suffix = path.suffix.lower()
    image_format = Image.registered_extensions().get(suffix)
    if image_format is None or image_format not in Image.SAVE:
        raise InvalidParameterError(
            f"Unsupported output image format {suffix or path.name!r}"
        )

    img = Image.fromarray(pixels)
    if img.mode == "RGBA" and suffix in _NO_ALPHA_SUFFIXES:
        img = img.convert("RGB")
    img.save(path, format=image_format)


def run(args: argparse.Namespace) -> int:
    """Process every image in args; returns the process exit status."""
    if not args.images:
        logger.warning("no images given")
        return 0

    config = ExtractionConfig(
        method=args.quantization_method,
        n_colors=args.number_of_colors,
    )
    mode = (
        PaletteMode.STANDALONE
        if args.output_type is OutputType.STANDALONE
        else PaletteMode.OVERLAY
    )
    geometry = GeometryRequest(
        height=args.palette_height,
        width=args.palette_width,
        mode=mode,
    )

    failures = 0
    with ThreadPoolExecutor(max_workers=args.jobs) as pool:
        futures = [
            (
                image,
                pool.submit(
                    process_image,
                    image,
                    output_file_name(image, args.output, args.output_type),
                    config=config,
                    geometry=geometry,
                    output_type=args.output_type,
                ),
            )
            for image in args.images
        ]
        # Results are collected in submission order so stdout JSON is stable
        for image, future in futures:
            try:
                text = future.result()
            except (ColorBuddyError, OSError) as exc:
                logger.error("Error processing image %s: %s", image, exc)
                failures += 1
                continue
            if text is not None:
                print(text)

    return 1 if failures else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
