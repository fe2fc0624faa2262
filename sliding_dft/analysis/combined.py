"""Combined sliding DFT engine with bounded error accumulation.

A single engine derives every spectrum from the previous, already rounded, one,
so rounding error grows without bound over an endless stream. The combined
engine drives two identically configured single engines with the same samples,
offset by half a cycle, and periodically zeroes each one::

    push count:   0 ........ N ........ 2N ........ 3N ...
    first:        valid  --> reset, refill ----> valid ...
    second:       refill --> valid ---> reset, refill ...

A reset zeroes window and spectrum together, which re-synchronizes them exactly.
After ``N`` more pushes the window holds real data again and the spectrum is its
DFT with at most ``N`` pushes worth of rounding. At any instant one of the two
engines holds a fully warmed window, and reads are routed to it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

import numpy as np

from sliding_dft.analysis.single import SingleSdft
from sliding_dft.errors import NotCombinable
from sliding_dft.models.traits import Precision, SignalTrait

logger = logging.getLogger(__name__)


def combinability_issues(first: SingleSdft, second: SingleSdft) -> List[str]:
    """List every reason why ``first`` and ``second`` cannot be combined (empty if they can)."""
    issues: List[str] = []
    for name, eng in (("first", first), ("second", second)):
        if not isinstance(eng, SingleSdft):
            issues.append(f"{name} is not a SingleSdft (got {type(eng).__name__})")
    if issues:
        return issues

    if first is second:
        return ["first and second are the same engine"]

    if first.precision is not second.precision:
        issues.append(f"precision differs: {first.precision.value} != {second.precision.value}")
    if first.window_size != second.window_size:
        issues.append(f"window_size differs: {first.window_size} != {second.window_size}")
    if first.signal_trait is not second.signal_trait:
        issues.append(f"signal_trait differs: {first.signal_trait.value} != {second.signal_trait.value}")
    for name, eng in (("first", first), ("second", second)):
        if eng.claimed:
            issues.append(f"{name} is already owned by a combined engine")
    if first.buffers.shares_memory_with(second.buffers):
        issues.append("first and second share buffer memory")
    return issues


class CombinedSdft:
    """Two single engines driven in lockstep with staggered resets.

    Parameters
    ----------
    first:
        Engine holding the caller's starting state. It is valid for the first ``N``
        pushes.
    second:
        Engine whose buffers are cleared on combination; it starts one full window
        behind ``first``.

    Raises
    ------
    NotCombinable
        Mismatching precision, window size or signal trait; the same engine twice;
        overlapping buffers; or an engine already owned by another combined engine.

    Notes
    -----
    Both engines are claimed on success: calling ``push``, ``reorder`` or ``reset``
    on either of them afterwards raises :class:`EngineOwnershipError`.
    """

    def __init__(self, first: SingleSdft, second: SingleSdft) -> None:
        issues = combinability_issues(first, second)
        if issues:
            raise NotCombinable(issues)

        first._claimed = True
        second._claimed = True
        second._clear()

        self._first = first
        self._second = second
        self._N = first.window_size
        self._cycle = 0

        logger.debug(
            "CombinedSdft: N=%d trait=%s precision=%s",
            self._N, first.signal_trait.value, first.precision.value,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def window_size(self) -> int:
        return self._N

    @property
    def n_bins(self) -> int:
        return self._first.n_bins

    @property
    def signal_trait(self) -> SignalTrait:
        return self._first.signal_trait

    @property
    def precision(self) -> Precision:
        return self._first.precision

    @property
    def cycle_counter(self) -> int:
        """Position in the ``2N``-push reset cycle, in ``[0, 2N]``."""
        return self._cycle

    @property
    def first(self) -> SingleSdft:
        return self._first

    @property
    def second(self) -> SingleSdft:
        return self._second

    @property
    def active(self) -> SingleSdft:
        """The inner engine currently holding the valid window and spectrum."""
        return self._first if self._cycle <= self._N else self._second

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def push(self, sample: complex) -> None:
        """Push ``sample`` into both inner engines, resetting one at cycle boundaries.

        The sample is validated before any reset or update, so a
        :class:`SignalTraitViolation` leaves the combined engine unchanged.
        """
        x = self._first._coerce(sample)

        if self._cycle == self._N:
            self._first._clear()
            logger.debug("CombinedSdft: reset first engine")
        elif self._cycle == 2 * self._N:
            self._second._clear()
            self._cycle = 0
            logger.debug("CombinedSdft: reset second engine")

        self._first._apply(x)
        self._second._apply(x)
        self._cycle += 1

    def push_many(self, samples: Iterable[complex]) -> int:
        """Push ``samples`` in order; see :meth:`SingleSdft.push_many`."""
        count = 0
        for s in samples:
            self.push(s)
            count += 1
        return count

    def get_spectrum(self) -> np.ndarray:
        return self.active.get_spectrum()

    def reorder(self) -> np.ndarray:
        """Chronologically ordered window of the currently valid inner engine."""
        return self.active._rotate()

    def __repr__(self) -> str:
        return (
            f"CombinedSdft(window_size={self._N}, n_bins={self.n_bins}, "
            f"signal_trait={self.signal_trait.value!r}, precision={self.precision.value!r}, "
            f"cycle_counter={self._cycle})"
        )
