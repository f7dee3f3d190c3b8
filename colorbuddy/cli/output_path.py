# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Output file naming."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from colorbuddy.cli.args import OutputType


def output_file_name(
    original: Path,
    output: Optional[Path],
    output_type: OutputType,
) -> Path:
    """
    Work out where the output for `original` goes.

    - output is an existing directory: generated name inside it
    - output is any other path: used as-is
    - output is None: generated name next to the original

    The generated name is "<stem>_palette.<ext>", keeping the original
    extension for image outputs ("png" if there is none) and using
    "json" for JSON outputs.

    Example:
        >>> output_file_name(Path("photo.jpg"), None, OutputType.ORIGINAL_IMAGE)
        PosixPath('photo_palette.jpg')
    """
    if output is not None and not output.is_dir():
        return output

    if output_type.is_image:
        extension = original.suffix.lstrip(".") or "png"
    else:
        extension = "json"
    file_name = f"{original.stem}_palette.{extension}"

    if output is not None:
        return output / file_name
    return original.with_name(file_name)
