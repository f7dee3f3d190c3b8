# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Exception types raised by the extraction core."""

from __future__ import annotations


class ColorBuddyError(Exception):
    """Base class for all errors raised by colorbuddy."""


class MalformedImageError(ColorBuddyError, ValueError):
    """The pixel buffer does not match its declared dimensions or layout."""


class InvalidParameterError(ColorBuddyError, ValueError):
    """A quantization or geometry request is malformed."""
