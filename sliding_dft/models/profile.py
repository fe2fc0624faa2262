"""Engine profile -- bundles every parameter that shapes an engine.

An EngineProfile groups window size, signal trait, precision and the combined
mode into one frozen dataclass. It can be:

- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON configuration files
- Turned into a ready-to-use engine with :func:`build_engine`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from sliding_dft.models.buffers import allocate_buffers
from sliding_dft.models.traits import Precision, SignalTrait


@dataclass(frozen=True)
class EngineProfile:
    """Frozen engine configuration.

    Required fields
    ---------------
    window_size : int
        Number of samples in the sliding window.

    Optional fields
    ---------------
    signal_trait : SignalTrait
        Accepts the enum or one of ``"full"``, ``"real"``, ``"imag"``.
    precision : Precision
        Accepts the enum or one of ``"single"``, ``"double"``, ``"extended"``.
    combined : bool
        If True, :func:`build_engine` returns a drift-bounded combined engine.
    """

    window_size: int
    signal_trait: SignalTrait = SignalTrait.FULL_COMPLEX
    precision: Precision = Precision.DOUBLE
    combined: bool = False

    def __post_init__(self) -> None:
        # Normalize string inputs (e.g. from JSON) to enums.
        object.__setattr__(self, "window_size", int(self.window_size))
        object.__setattr__(self, "signal_trait", SignalTrait.parse(self.signal_trait))
        object.__setattr__(self, "precision", Precision.parse(self.precision))
        object.__setattr__(self, "combined", bool(self.combined))

    @property
    def n_bins(self) -> int:
        return self.signal_trait.n_bins(self.window_size)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (enums become their string values)."""
        return {
            "window_size": self.window_size,
            "signal_trait": self.signal_trait.value,
            "precision": self.precision.value,
            "combined": self.combined,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> EngineProfile:
        """Reconstruct from a dict (e.g. loaded from JSON). Unknown keys are rejected."""
        d = dict(d)
        unknown = sorted(set(d) - {"window_size", "signal_trait", "precision", "combined"})
        if unknown:
            raise KeyError(f"Unknown EngineProfile keys: {unknown}")
        return cls(**d)


def build_engine(
    profile: EngineProfile,
    initial: Optional[Union[Sequence[complex], np.ndarray]] = None,
):
    """Allocate buffers for ``profile`` and build the engine it describes.

    Parameters
    ----------
    profile:
        Engine configuration.
    initial:
        Optional starting window of exactly ``window_size`` samples, oldest first.
        Its spectrum is computed by direct DFT so the engine starts consistent.
        Defaults to an all-zero window.

    Returns
    -------
    SingleSdft or CombinedSdft
    """
    # Avoid circular import at module level
    from sliding_dft.analysis.combined import CombinedSdft
    from sliding_dft.analysis.single import SingleSdft
    from sliding_dft.validation.reference import direct_dft

    N = profile.window_size
    bufs = allocate_buffers(N, profile.signal_trait, profile.precision)

    if initial is not None:
        x = np.asarray(initial)
        if x.ndim != 1 or x.size != N:
            raise ValueError(f"initial must be 1D with window_size={N} samples, got shape {x.shape}")
        bufs.window[:] = x
        bufs.spectrum[: profile.n_bins] = direct_dft(bufs.window, n_bins=profile.n_bins)

    first = SingleSdft(
        bufs.window,
        bufs.spectrum,
        bufs.phase_table,
        N,
        signal_trait=profile.signal_trait,
        precision=profile.precision,
    )
    if not profile.combined:
        return first

    spare = allocate_buffers(N, profile.signal_trait, profile.precision)
    second = SingleSdft(
        spare.window,
        spare.spectrum,
        spare.phase_table,
        N,
        signal_trait=profile.signal_trait,
        precision=profile.precision,
    )
    return CombinedSdft(first, second)
