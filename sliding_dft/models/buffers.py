"""Caller-owned buffer sets and the checks applied to them.

Engines never allocate: every array they touch is handed in by the caller and
stays owned by the caller. :func:`allocate_buffers` is a convenience for callers
that do not manage their own storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from sliding_dft.errors import BufferContractError
from sliding_dft.models.traits import Precision, SignalTrait


@dataclass(frozen=True)
class EngineBuffers:
    """The three arrays backing one single engine.

    Attributes
    ----------
    window:
        Sliding window samples, at least ``window_size`` slots.
    spectrum:
        Spectrum bins, at least ``n_bins`` slots.
    phase_table:
        Rotation factors, at least ``window_size`` slots. Overwritten on construction.
    """

    window: np.ndarray
    spectrum: np.ndarray
    phase_table: np.ndarray

    def shares_memory_with(self, other: "EngineBuffers") -> bool:
        mine = (self.window, self.spectrum, self.phase_table)
        theirs = (other.window, other.spectrum, other.phase_table)
        return any(np.shares_memory(a, b) for a in mine for b in theirs)


def allocate_buffers(
    window_size: int,
    signal_trait: Union[SignalTrait, str] = SignalTrait.FULL_COMPLEX,
    precision: Union[Precision, str] = Precision.DOUBLE,
) -> EngineBuffers:
    """Allocate a zeroed buffer set for one engine.

    The spectrum is always given ``window_size`` slots, even for half-spectrum
    traits, so the same set can back any trait.
    """
    SignalTrait.parse(signal_trait)
    dtype = Precision.parse(precision).dtype
    n = max(int(window_size), 0)
    return EngineBuffers(
        window=np.zeros(n, dtype=dtype),
        spectrum=np.zeros(n, dtype=dtype),
        phase_table=np.zeros(n, dtype=dtype),
    )


def check_buffer(name: str, buf: np.ndarray, *, dtype: np.dtype, min_size: int) -> None:
    """Raise :class:`BufferContractError` if ``buf`` cannot back ``min_size`` slots of ``dtype``."""
    if not isinstance(buf, np.ndarray):
        raise BufferContractError(f"{name} must be a numpy array, got {type(buf).__name__}")
    if buf.ndim != 1:
        raise BufferContractError(f"{name} must be 1D, got shape {buf.shape}")
    if buf.dtype != dtype:
        raise BufferContractError(f"{name} must have dtype {dtype}, got {buf.dtype}")
    if buf.size < min_size:
        raise BufferContractError(f"{name} too short: size={buf.size}, need={min_size}")
    if not buf.flags.writeable:
        raise BufferContractError(f"{name} must be writeable")


def check_disjoint(**buffers: np.ndarray) -> None:
    names = list(buffers)
    for i, a in enumerate(names):
        for b in names[i + 1:]:
            if np.shares_memory(buffers[a], buffers[b]):
                raise BufferContractError(f"{a} and {b} share memory")
