# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
JSON payload serializer.

Wraps the formatted records in a metadata envelope describing how the
palette was produced.

Example (JSON_PRETTY)::

    {
      "metadata": {
        "requested_colors": 8,
        "extracted_colors": 6,
        "quantization_method": "k-means",
        "image_dimensions": { "width": 1920, "height": 1080 },
        "generated_at": "2026-01-15T10:30:00Z",
        "converged": true
      },
      "colors": [
        { "r": 255, "g": 128, "b": 64, "hex": "#ff8040", "weight": 5120 }
      ]
    }
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from colorbuddy.runtime.serializers.records import format_palette
from colorbuddy.schema import (
    ImageDimensions,
    Palette,
    PaletteMetadata,
    PaletteOutput,
)


# UTC, second precision, e.g. "2026-01-15T10:30:00Z"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class SerializerFormat(Enum):
    """JSON layout: compact or indented."""

    JSON = "json"
    JSON_PRETTY = "json_pretty"


def to_palette_output(
    palette: Palette,
    *,
    requested_colors: int,
    image_width: int,
    image_height: int,
    generated_at: Optional[datetime] = None,
) -> PaletteOutput:
    """
    Build the structured output for a palette.

    Args:
        palette: Non-empty palette
        requested_colors: Color count that was asked for
        image_width, image_height: Source image size
        generated_at: Timestamp to record, converted to UTC (now if None)
    """
    colors = format_palette(palette)
    stamp = generated_at or datetime.now(timezone.utc)
    metadata = PaletteMetadata(
        requested_colors=requested_colors,
        extracted_colors=len(colors),
        quantization_method=palette.method.value,
        image_dimensions=ImageDimensions(width=image_width, height=image_height),
        generated_at=stamp.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT),
        converged=palette.converged,
    )
    return PaletteOutput(metadata=metadata, colors=colors)


def to_json(
    palette: Palette,
    *,
    requested_colors: int,
    image_width: int,
    image_height: int,
    format: SerializerFormat = SerializerFormat.JSON_PRETTY,
    generated_at: Optional[datetime] = None,
) -> str:
    """Serialize a palette and its metadata as a JSON string."""
    output = to_palette_output(
        palette,
        requested_colors=requested_colors,
        image_width=image_width,
        image_height=image_height,
        generated_at=generated_at,
    )
    return output.to_json(indent=2 if format == SerializerFormat.JSON_PRETTY else None)
