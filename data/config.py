"""
Runtime configuration.
"""

import os

DEBUG = os.environ.get("PALETTE_SWAP_DEBUG", "").lower() in ("1", "true", "yes")

CURRENT_VERSION = "1.0.0"
