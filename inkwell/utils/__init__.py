"""
Utilities Package

Helpers shared across the application.
"""

from inkwell.utils.timestamps import as_utc, truncate_ms, utc_now

__all__ = ["as_utc", "truncate_ms", "utc_now"]
