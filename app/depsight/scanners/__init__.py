"""Source scanners for dependency usage.

This module exports the scanner that detects imported packages.
"""

from depsight.scanners.usage import UsageScanner, build_import_patterns

__all__ = ["UsageScanner", "build_import_patterns"]
