"""Single sliding DFT engine.

Keeps the DFT of the last ``N`` pushed samples up to date with one additive
correction and one phase rotation per bin and push:

    X_k <- (X_k + x_new - x_old) * exp(j*2*pi*k/N)

The window is stored circularly. ``write_index`` is the buffer offset of the
oldest sample, which is also the next slot to be overwritten. The window is only
put back into chronological order on demand by :meth:`SingleSdft.reorder`.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, Union

import numpy as np

from sliding_dft.analysis.phase import fill_phase_table
from sliding_dft.errors import EngineOwnershipError, SignalTraitViolation, WindowTooShort
from sliding_dft.models.buffers import EngineBuffers, check_buffer, check_disjoint
from sliding_dft.models.traits import Precision, SignalTrait

if TYPE_CHECKING:
    from sliding_dft.analysis.combined import CombinedSdft

logger = logging.getLogger(__name__)


class SingleSdft:
    """Sliding DFT over caller-supplied buffers.

    Parameters
    ----------
    window:
        At least ``window_size`` slots holding the initial window (usually zeros).
    spectrum:
        At least ``n_bins`` slots holding the spectrum of the initial window.
    phase_table:
        At least ``window_size`` slots; overwritten with the rotation factors.
    window_size:
        Number of samples in the sliding window (``N >= 1``).
    signal_trait:
        Guarantee about the samples. Half-spectrum traits update ``N // 2`` bins.
    precision:
        Must match the dtype of all three buffers.

    Raises
    ------
    WindowTooShort
        ``window_size < 1``.
    BufferContractError
        A buffer has the wrong dtype/shape/size, or two buffers overlap.
    SignalTraitViolation
        The initial window breaks ``signal_trait``.
    """

    def __init__(
        self,
        window: np.ndarray,
        spectrum: np.ndarray,
        phase_table: np.ndarray,
        window_size: int,
        signal_trait: Union[SignalTrait, str] = SignalTrait.FULL_COMPLEX,
        precision: Union[Precision, str] = Precision.DOUBLE,
    ) -> None:
        N = int(window_size)
        if N < 1:
            raise WindowTooShort(N)

        trait = SignalTrait.parse(signal_trait)
        prec = Precision.parse(precision)
        n_bins = trait.n_bins(N)

        check_buffer("window", window, dtype=prec.dtype, min_size=N)
        check_buffer("spectrum", spectrum, dtype=prec.dtype, min_size=n_bins)
        check_buffer("phase_table", phase_table, dtype=prec.dtype, min_size=N)
        check_disjoint(window=window, spectrum=spectrum, phase_table=phase_table)

        bad = trait.first_violation(window[:N])
        if bad >= 0:
            raise SignalTraitViolation(complex(window[bad]), trait.value, index=bad)

        self._N = N
        self._n_bins = n_bins
        self._trait = trait
        self._precision = prec
        self._scalar = prec.dtype.type

        self._buffers = EngineBuffers(window=window, spectrum=spectrum, phase_table=phase_table)
        self._window = window[:N]
        self._bins = spectrum[:n_bins]
        self._phase = fill_phase_table(phase_table, N)[:n_bins]

        self._spectrum_view = self._bins.view()
        self._spectrum_view.flags.writeable = False

        self._index = 0
        self._claimed = False

        logger.debug(
            "SingleSdft: N=%d n_bins=%d trait=%s precision=%s",
            N, n_bins, trait.value, prec.value,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def window_size(self) -> int:
        return self._N

    @property
    def n_bins(self) -> int:
        return self._n_bins

    @property
    def signal_trait(self) -> SignalTrait:
        return self._trait

    @property
    def precision(self) -> Precision:
        return self._precision

    @property
    def write_index(self) -> int:
        """Buffer offset of the oldest sample in the window."""
        return self._index

    @property
    def buffers(self) -> EngineBuffers:
        return self._buffers

    @property
    def claimed(self) -> bool:
        """True once a combined engine has taken control of this engine."""
        return self._claimed

    @property
    def window(self) -> np.ndarray:
        """Read-only view of the window in its current (circular) layout."""
        v = self._window.view()
        v.flags.writeable = False
        return v

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def push(self, sample: complex) -> None:
        """Slide the window by one sample and update all bins.

        The sample is validated before anything is modified, so a
        :class:`SignalTraitViolation` leaves window and spectrum untouched.
        """
        self._ensure_unclaimed()
        self._apply(self._coerce(sample))

    def push_many(self, samples: Iterable[complex]) -> int:
        """Push ``samples`` in order and return how many were pushed.

        Stops at the first sample that violates the signal trait; every sample before
        it has already been applied when the error propagates.
        """
        self._ensure_unclaimed()
        count = 0
        for s in samples:
            self._apply(self._coerce(s))
            count += 1
        return count

    def get_spectrum(self) -> np.ndarray:
        """Read-only view of the ``n_bins`` spectrum values."""
        return self._spectrum_view

    def reorder(self) -> np.ndarray:
        """Rotate the window into chronological order (oldest first) and return it.

        Runs in O(N) time with O(1) extra space. Resets ``write_index`` to 0.
        """
        self._ensure_unclaimed()
        return self._rotate()

    def reset(self) -> None:
        """Zero window and spectrum and rewind ``write_index``."""
        self._ensure_unclaimed()
        self._clear()

    def combine(self, other: "SingleSdft") -> "CombinedSdft":
        """Combine with ``other`` into a drift-bounded engine. See :class:`CombinedSdft`."""
        from sliding_dft.analysis.combined import CombinedSdft

        return CombinedSdft(self, other)

    # ------------------------------------------------------------------
    # Internals (also driven by CombinedSdft)
    # ------------------------------------------------------------------

    def _coerce(self, sample: complex):
        # Check the value as given: a small nonzero part may round to zero in the engine dtype.
        raw = sample if isinstance(sample, np.generic) else complex(sample)
        if not self._trait.admits(raw):
            raise SignalTraitViolation(complex(raw), self._trait.value)
        return self._scalar(raw)

    def _apply(self, x) -> None:
        i = self._index
        delta = x - self._window[i]
        bins = self._bins
        np.add(bins, delta, out=bins)
        np.multiply(bins, self._phase, out=bins)
        self._window[i] = x
        i += 1
        self._index = 0 if i == self._N else i

    def _rotate(self) -> np.ndarray:
        w = self._window
        n = self._N
        ofs = self._index
        if ofs == 0:
            return w

        # Cycle-following rotation: slot cur receives the element ofs steps ahead.
        # There are gcd(n, ofs) disjoint cycles.
        for start in range(math.gcd(n, ofs)):
            saved = w[start]
            cur = start
            while True:
                nxt = cur + ofs
                if nxt >= n:
                    nxt -= n
                if nxt == start:
                    break
                w[cur] = w[nxt]
                cur = nxt
            w[cur] = saved

        self._index = 0
        return w

    def _clear(self) -> None:
        self._window.fill(0)
        self._bins.fill(0)
        self._index = 0

    def _ensure_unclaimed(self) -> None:
        if self._claimed:
            raise EngineOwnershipError(
                "this engine is owned by a combined engine; drive the combined engine instead"
            )

    def __repr__(self) -> str:
        return (
            f"SingleSdft(window_size={self._N}, n_bins={self._n_bins}, "
            f"signal_trait={self._trait.value!r}, precision={self._precision.value!r}, "
            f"write_index={self._index})"
        )
