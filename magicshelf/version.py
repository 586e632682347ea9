"""
Central version management for the Magic Shelf engine.
"""

from __future__ import annotations

__all__ = ["__app_name__", "__version__"]

__app_name__ = "Magic Shelf"
__version__ = "1.0.0"
