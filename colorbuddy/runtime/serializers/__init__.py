# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Serializers for palette delivery.

Each serializer formats a Palette without modifying it: order, colors
and weights pass through unchanged.
"""

from colorbuddy.runtime.serializers.payload import (
    SerializerFormat,
    to_json,
    to_palette_output,
)
from colorbuddy.runtime.serializers.records import format_palette, to_record

__all__ = [
    "SerializerFormat",
    "format_palette",
    "to_record",
    "to_palette_output",
    "to_json",
]
