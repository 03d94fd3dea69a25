"""
Utility modules for the codescope package.

Provides per-stage timing collection.
"""

from .timing import StageStats, StageTimer

__all__ = ['StageStats', 'StageTimer']
