# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Palette record formatter.

Converts a Palette into ordered ColorRecords (channels, hex, weight).
The formatter never reorders or merges entries.
"""

from __future__ import annotations

from colorbuddy.errors import InvalidParameterError
from colorbuddy.schema import ColorRecord, Palette, WeightedColor


def to_record(wc: WeightedColor) -> ColorRecord:
    """Format a single palette entry."""
    c = wc.color
    return ColorRecord(
        red=c.red,
        green=c.green,
        blue=c.blue,
        alpha=c.alpha,
        hex=c.hex,
        weight=wc.weight,
    )


def format_palette(palette: Palette) -> tuple[ColorRecord, ...]:
    """
    Format every palette entry, preserving palette order.

    Alpha appears in the records exactly when the palette colors carry
    an alpha channel (i.e. the source image was RGBA).

    Raises:
        InvalidParameterError: If the palette is empty.
    """
    if len(palette) == 0:
        raise InvalidParameterError("Cannot format an empty palette")
    return tuple(to_record(wc) for wc in palette)
