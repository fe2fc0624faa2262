"""Sliding DFT -- incremental spectrum tracking over a fixed-length window.

Keeps the full DFT of the last ``N`` samples of a complex stream current with
O(N) work per new sample, instead of recomputing an O(N log N) transform.

This package provides tools for:
- Updating a spectrum sample by sample over caller-owned numpy buffers
- Halving the per-sample work for purely real or purely imaginary signals
- Bounding rounding drift over unbounded streams with a combined dual engine
- Restoring the circular window to chronological order in place
- Verifying spectra against a direct reference DFT

Key principles:
- No allocation while pushing: every buffer belongs to the caller
- Precision (single, double, extended) is fixed once per engine
- Rectangular window only: no window-function weighting

Main subpackages:
- analysis: Phase table, single and combined engines, engine construction
- models: Signal traits, precisions, buffer sets, EngineProfile configuration
- validation: Reference DFT and spectrum comparison
- scripts: Command line streaming tool
"""

from sliding_dft.analysis import CombinedSdft, SdftEngine, SingleSdft, combine, create_engine
from sliding_dft.errors import (
    BufferContractError,
    EngineOwnershipError,
    NotCombinable,
    SdftError,
    SignalTraitViolation,
    WindowTooShort,
)
from sliding_dft.models import (
    EngineBuffers,
    EngineProfile,
    Precision,
    SignalTrait,
    allocate_buffers,
    build_engine,
)

__all__ = [
    "CombinedSdft",
    "SdftEngine",
    "SingleSdft",
    "combine",
    "create_engine",
    "BufferContractError",
    "EngineOwnershipError",
    "NotCombinable",
    "SdftError",
    "SignalTraitViolation",
    "WindowTooShort",
    "EngineBuffers",
    "EngineProfile",
    "Precision",
    "SignalTrait",
    "allocate_buffers",
    "build_engine",
]

__version__ = "0.1.0"
