# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Command-line entry point (``colorbuddy`` console script)."""

from colorbuddy.cli.main import main, process_image, run

__all__ = ["main", "run", "process_image"]
