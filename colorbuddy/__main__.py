# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

import sys

from colorbuddy.cli import main

sys.exit(main())
