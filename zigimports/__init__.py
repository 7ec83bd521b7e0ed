"""
zigimports - Find and remove unused imports in Zig source files.
"""

__version__ = "0.1.0"

from zigimports.core.analysis import analyze_source, fix_source
from zigimports.core.detector import UnusedImportDetector

__all__ = ["UnusedImportDetector", "analyze_source", "fix_source"]
