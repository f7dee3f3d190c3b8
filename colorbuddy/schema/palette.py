# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Palette schema: colors, weighted palettes, geometry and output records.

Design principles:
- Immutable: all value types are frozen dataclasses
- Deterministic: palettes carry a fixed, reproducible ordering
- Serializable: records and outputs are JSON-ready

Channel values are 8-bit unsigned integers. A color carries an alpha
channel only when the image it was sampled from did.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence

from colorbuddy.errors import InvalidParameterError


# =============================================================================
# Enumerations
# =============================================================================


class ChannelLayout(Enum):
    """Channel layout of a pixel buffer."""
    RGB = "rgb"
    RGBA = "rgba"

    @property
    def channels(self) -> int:
        return 3 if self is ChannelLayout.RGB else 4


class QuantizationMethod(Enum):
    """Palette extraction algorithm."""
    KMEANS = "k-means"
    MEDIAN_CUT = "median-cut"

    def __str__(self) -> str:
        return self.value


class PaletteMode(Enum):
    """How a rendered palette strip is emitted."""
    OVERLAY = "overlay"        # strip appended below the source image
    STANDALONE = "standalone"  # strip as its own image


# =============================================================================
# Core Color Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Color:
    """
    A single 8-bit color.

    Attributes:
        red, green, blue: Channel values (0-255)
        alpha: Alpha value (0-255), or None for 3-channel colors
    """
    red: int
    green: int
    blue: int
    alpha: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate channel values are 8-bit."""
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            if value is None and name == "alpha":
                continue
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be 0-255, got {value}")

    @property
    def channels(self) -> tuple[int, ...]:
        """Channel values in (R, G, B[, A]) order."""
        if self.alpha is None:
            return (self.red, self.green, self.blue)
        return (self.red, self.green, self.blue, self.alpha)

    @property
    def layout(self) -> ChannelLayout:
        return ChannelLayout.RGB if self.alpha is None else ChannelLayout.RGBA

    @property
    def hex(self) -> str:
        """Lowercase hex string like "#ff8040" (alpha is not encoded)."""
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @classmethod
    def from_channels(cls, values: Sequence[int]) -> Color:
        """Build a color from 3 or 4 channel values."""
        if len(values) not in (3, 4):
            raise ValueError(f"Expected 3 or 4 channels, got {len(values)}")
        alpha = int(values[3]) if len(values) == 4 else None
        return cls(int(values[0]), int(values[1]), int(values[2]), alpha)

    @classmethod
    def from_hex(cls, hex_str: str) -> Color:
        """Parse "#rrggbb" (case-insensitive)."""
        h = hex_str.lstrip("#")
        if len(h) != 6:
            raise ValueError(f"Expected #rrggbb, got {hex_str!r}")
        return cls(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    def with_alpha(self, alpha: int = 255) -> Color:
        """Return this color as a 4-channel color (existing alpha is kept)."""
        if self.alpha is not None:
            return self
        return Color(self.red, self.green, self.blue, alpha)


@dataclass(frozen=True, slots=True)
class WeightedColor:
    """
    A palette entry: a color and the number of samples it represents.

    Attributes:
        color: The representative color
        weight: Number of (non-transparent) samples assigned to this color
    """
    color: Color
    weight: int

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"Weight must be >= 0, got {self.weight}")


@dataclass(frozen=True, slots=True)
class Palette:
    """
    Ordered, weighted palette produced by one quantization run.

    Entries are ordered by descending weight, ties by ascending channel
    tuple. Weights sum to the number of samples that were quantized.

    Attributes:
        entries: Weighted colors in palette order
        method: Algorithm that produced the palette
        iterations: Refinement iterations run (k-means) or splits made (median-cut)
        converged: False when k-means stopped at its iteration cap
    """
    entries: tuple[WeightedColor, ...]
    method: QuantizationMethod
    iterations: int = 0
    converged: bool = True

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[WeightedColor]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> WeightedColor:
        return self.entries[index]

    @property
    def colors(self) -> tuple[Color, ...]:
        return tuple(wc.color for wc in self.entries)

    @property
    def total_weight(self) -> int:
        return sum(wc.weight for wc in self.entries)

    @property
    def layout(self) -> Optional[ChannelLayout]:
        """Channel layout of the palette colors (None when empty)."""
        if not self.entries:
            return None
        return self.entries[0].color.layout


def palette_sort_key(wc: WeightedColor) -> tuple:
    """Descending weight, then ascending channel values."""
    return (-wc.weight, wc.color.channels)


# =============================================================================
# Geometry
# =============================================================================

_PIXELS_RE = re.compile(r"([0-9]+)(?:px)?")
_PERCENT_RE = re.compile(r"([0-9]+(?:\.[0-9]+)?)%")

DEFAULT_PALETTE_HEIGHT = 256
DEFAULT_STANDALONE_WIDTH = 512


@dataclass(frozen=True, slots=True)
class PaletteHeight:
    """
    Requested strip height: absolute pixels or a percentage of the source height.

    Attributes:
        value: Pixel count, or percentage in [0, 100]
        is_percentage: True when value is a percentage
    """
    value: float
    is_percentage: bool = False

    def __post_init__(self) -> None:
        if self.value < 0:
            raise InvalidParameterError(f"Palette height must be >= 0, got {self.value}")
        if self.is_percentage and self.value > 100:
            raise InvalidParameterError("Percentage must be between 0 and 100")

    @classmethod
    def pixels(cls, n: int) -> PaletteHeight:
        return cls(value=int(n))

    @classmethod
    def percentage(cls, pct: float) -> PaletteHeight:
        return cls(value=float(pct), is_percentage=True)

    @classmethod
    def parse(cls, text: str) -> PaletteHeight:
        """
        Parse a height specification.

        Accepts "200" or "200px" (pixels) and "50%" or "99.9%" (percentage,
        0-100). Only ASCII digits and a lowercase "px" suffix are accepted.

        Raises:
            InvalidParameterError: For anything else.
        """
        m = _PERCENT_RE.fullmatch(text)
        if m:
            return cls.percentage(float(m.group(1)))
        m = _PIXELS_RE.fullmatch(text)
        if m:
            return cls.pixels(int(m.group(1)))
        if text.endswith("%"):
            raise InvalidParameterError("Percentage must be between 0 and 100")
        raise InvalidParameterError(
            f"Invalid palette height {text!r}: pixels must be a positive integer"
        )

    def resolve(self, source_height: int) -> int:
        """Resolve to pixels against a source height, clamped to at least 1."""
        if self.is_percentage:
            # round half up, not banker's rounding
            pixels = int(source_height * self.value / 100.0 + 0.5)
        else:
            pixels = int(self.value)
        return max(1, pixels)

    def __str__(self) -> str:
        if self.is_percentage:
            return f"{self.value:g}%"
        return f"{int(self.value)}px"


@dataclass(frozen=True, slots=True)
class PaletteGeometry:
    """Resolved strip size in pixels (both >= 1)."""
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise InvalidParameterError(
                f"Palette geometry must be at least 1x1, got {self.width}x{self.height}"
            )


# =============================================================================
# Output Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class ColorRecord:
    """
    One formatted palette entry.

    Field order in to_dict() is r, g, b, [a], hex, weight; alpha appears
    only for colors sampled from an image with an alpha channel.
    """
    red: int
    green: int
    blue: int
    hex: str
    weight: int
    alpha: Optional[int] = None

    def to_dict(self) -> dict:
        d = {"r": self.red, "g": self.green, "b": self.blue}
        if self.alpha is not None:
            d["a"] = self.alpha
        d["hex"] = self.hex
        d["weight"] = self.weight
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ColorRecord:
        return cls(
            red=data["r"],
            green=data["g"],
            blue=data["b"],
            alpha=data.get("a"),
            hex=data["hex"],
            weight=data.get("weight", 0),
        )


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    width: int
    height: int

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class PaletteMetadata:
    """
    How a palette was produced.

    Attributes:
        requested_colors: Color count asked for
        extracted_colors: Color count actually produced (may be fewer)
        quantization_method: Method name, e.g. "k-means"
        image_dimensions: Source image size
        generated_at: ISO-8601 UTC timestamp
        converged: False when k-means hit its iteration cap
    """
    requested_colors: int
    extracted_colors: int
    quantization_method: str
    image_dimensions: ImageDimensions
    generated_at: str
    converged: bool = True

    def to_dict(self) -> dict:
        return {
            "requested_colors": self.requested_colors,
            "extracted_colors": self.extracted_colors,
            "quantization_method": self.quantization_method,
            "image_dimensions": self.image_dimensions.to_dict(),
            "generated_at": self.generated_at,
            "converged": self.converged,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PaletteMetadata:
        dims = data["image_dimensions"]
        return cls(
            requested_colors=data["requested_colors"],
            extracted_colors=data["extracted_colors"],
            quantization_method=data["quantization_method"],
            image_dimensions=ImageDimensions(dims["width"], dims["height"]),
            generated_at=data["generated_at"],
            converged=data.get("converged", True),
        )


@dataclass(frozen=True, slots=True)
class PaletteOutput:
    """Top-level structured output: metadata plus the ordered color records."""
    metadata: PaletteMetadata
    colors: tuple[ColorRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata.to_dict(),
            "colors": [c.to_dict() for c in self.colors],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Indented JSON, or compact JSON with no whitespace when indent is None."""
        if indent is None:
            return json.dumps(self.to_dict(), separators=(",", ":"))
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> PaletteOutput:
        return cls(
            metadata=PaletteMetadata.from_dict(data["metadata"]),
            colors=tuple(ColorRecord.from_dict(c) for c in data["colors"]),
        )

    @classmethod
    def from_json(cls, json_str: str) -> PaletteOutput:
        return cls.from_dict(json.loads(json_str))
