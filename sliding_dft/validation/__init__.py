"""Validation utilities.

Ground-truth checks for the sliding DFT engines, kept out of the engine code path.

Design goals
------------
1) Independent of the recurrence under test (direct O(N^2) sum).
2) Scriptable: results are plain frozen dataclasses.
"""

from .reference import SpectrumComparison, compare_spectrum, direct_dft

__all__ = [
    "SpectrumComparison",
    "compare_spectrum",
    "direct_dft",
]
