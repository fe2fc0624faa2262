"""Engine construction and the capability interface shared by both variants.

Precision is picked once, at construction, and selects the numpy dtype used by
the single generic engine body. Callers hold the result through the
:class:`SdftEngine` protocol and never branch on variant or precision again.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Union, runtime_checkable

import numpy as np

from sliding_dft.analysis.combined import CombinedSdft
from sliding_dft.analysis.single import SingleSdft
from sliding_dft.models.traits import Precision, SignalTrait


@runtime_checkable
class SdftEngine(Protocol):
    """Capability set implemented by :class:`SingleSdft` and :class:`CombinedSdft`."""

    @property
    def window_size(self) -> int:
        ...

    @property
    def n_bins(self) -> int:
        ...

    @property
    def signal_trait(self) -> SignalTrait:
        ...

    @property
    def precision(self) -> Precision:
        ...

    def push(self, sample: complex) -> None:
        """Slide the window by one sample; the spectrum is current on return."""
        ...

    def push_many(self, samples: Iterable[complex]) -> int:
        ...

    def get_spectrum(self) -> np.ndarray:
        """The ``n_bins`` spectrum values of the current window."""
        ...

    def reorder(self) -> np.ndarray:
        """The current window, oldest sample first."""
        ...


def create_engine(
    precision: Union[Precision, str],
    window: np.ndarray,
    spectrum: np.ndarray,
    phase_table: np.ndarray,
    window_size: int,
    signal_trait: Union[SignalTrait, str] = SignalTrait.FULL_COMPLEX,
) -> SingleSdft:
    """Build a single engine of the given precision over caller-owned buffers."""
    return SingleSdft(
        window,
        spectrum,
        phase_table,
        window_size,
        signal_trait=signal_trait,
        precision=precision,
    )


def combine(first: SingleSdft, second: SingleSdft) -> CombinedSdft:
    """Combine two compatible single engines. ``first`` keeps its state, ``second`` is cleared."""
    return CombinedSdft(first, second)
