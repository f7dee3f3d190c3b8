# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Structured output runtime for Color Buddy.

1. Records -- ordered {r, g, b, [a], hex, weight} entries
2. Payload -- records plus extraction metadata, as JSON

The output layer never modifies palette content.
"""

from colorbuddy.runtime.serializers import (
    SerializerFormat,
    format_palette,
    to_json,
    to_palette_output,
    to_record,
)

__all__ = [
    "format_palette",
    "to_record",
    "to_palette_output",
    "to_json",
    "SerializerFormat",
]
