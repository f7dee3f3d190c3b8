# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Command-line arguments."""

from __future__ import annotations

import argparse
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from colorbuddy import __version__
from colorbuddy.errors import InvalidParameterError
from colorbuddy.quantize import DEFAULT_NUMBER_OF_COLORS
from colorbuddy.schema import DEFAULT_PALETTE_HEIGHT, PaletteHeight, QuantizationMethod

MAX_NUMBER_OF_COLORS = 256


class OutputType(Enum):
    JSON = "json"                      # print JSON to stdout
    JSON_FILE = "json-file"            # write JSON next to the image
    ORIGINAL_IMAGE = "original-image"  # image with the strip appended
    STANDALONE = "standalone"          # strip only

    def __str__(self) -> str:
        return self.value

    @property
    def is_image(self) -> bool:
        return self in (OutputType.ORIGINAL_IMAGE, OutputType.STANDALONE)


def _palette_height(text: str) -> PaletteHeight:
    try:
        return PaletteHeight.parse(text)
    except InvalidParameterError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _color_count(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid color count: {text!r}") from None
    if not 1 <= n <= MAX_NUMBER_OF_COLORS:
        raise argparse.ArgumentTypeError(
            f"color count must be 1-{MAX_NUMBER_OF_COLORS}, got {n}"
        )
    return n


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colorbuddy",
        description="Generate a color palette from one or more images.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-m", "--quantization-method",
        type=QuantizationMethod,
        choices=list(QuantizationMethod),
        default=QuantizationMethod.KMEANS,
        metavar="{k-means,median-cut}",
    )
    parser.add_argument(
        "-n", "--number-of-colors",
        type=_color_count,
        default=DEFAULT_NUMBER_OF_COLORS,
        help=f"palette size, 1-{MAX_NUMBER_OF_COLORS} (default: %(default)s)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="output file, or an existing directory for generated names",
    )
    parser.add_argument(
        "-t", "--output-type",
        type=OutputType,
        choices=list(OutputType),
        default=OutputType.ORIGINAL_IMAGE,
        metavar="{json,json-file,original-image,standalone}",
    )
    parser.add_argument(
        "-p", "--palette-height",
        type=_palette_height,
        default=PaletteHeight.pixels(DEFAULT_PALETTE_HEIGHT),
        help="pixels or percentage of the image height, e.g. 100, 100px, 50%%",
    )
    parser.add_argument(
        "-w", "--palette-width",
        type=_positive_int,
        default=None,
        help="strip width in pixels",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=_positive_int,
        default=1,
        help="images processed in parallel",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("images", nargs="*", type=Path, help="images to process")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (
        len(args.images) > 1
        and args.output is not None
        and not args.output.is_dir()
        and args.output_type is not OutputType.JSON
    ):
        parser.error("--output must be a directory when processing several images")
    return args
