"""Sliding DFT engines.

Design principle:
  - Engines operate on caller-owned numpy buffers and never allocate while pushing.
  - The spectrum is valid after construction and after every push.
  - The window is circular; chronological order is restored only on demand.
"""

from .phase import fill_phase_table, phase_table
from .single import SingleSdft
from .combined import CombinedSdft, combinability_issues
from .dispatch import SdftEngine, combine, create_engine

__all__ = [
    "fill_phase_table",
    "phase_table",
    "SingleSdft",
    "CombinedSdft",
    "combinability_issues",
    "SdftEngine",
    "combine",
    "create_engine",
]
