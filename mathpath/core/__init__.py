"""
Core Module - Shared helpers used across exercises, session and progression.
"""

from mathpath.core.rng import RandomSource, resolve_rng, shuffled

__all__ = [
    "RandomSource",
    "resolve_rng",
    "shuffled",
]
