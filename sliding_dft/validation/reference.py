"""Reference DFT and spectrum comparison.

The direct transform here is the textbook O(N^2) sum, independent of
both the sliding recurrence and numpy's FFT, so that it can serve as ground truth.

Examples
--------
>>> import numpy as np
>>> complex(direct_dft(np.array([1.0, 1.0, 1.0, 1.0]))[0])
(4+0j)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class SpectrumComparison:
    """Result of comparing an engine spectrum against the direct DFT.

    Attributes
    ----------
    ok:
        True if every bin is within ``atol``.
    max_abs_error:
        Largest ``|X_engine - X_ref|`` over the compared bins.
    worst_bin:
        Bin index where ``max_abs_error`` occurs (-1 when no bins were compared).
    n_bins:
        Number of bins compared.
    errors:
        Human readable description of each out-of-tolerance bin (at most 10).
    """

    ok: bool
    max_abs_error: float
    worst_bin: int
    n_bins: int
    errors: List[str]

    def raise_if_errors(self) -> None:
        """Raise ValueError if any bin was out of tolerance."""
        if self.errors:
            msg = "Spectrum mismatch:\n" + "\n".join(f"- {e}" for e in self.errors)
            raise ValueError(msg)


def direct_dft(samples: np.ndarray, n_bins: Optional[int] = None) -> np.ndarray:
    r"""Compute \(X_k = \sum_n x_n e^{-j 2\pi k n / N}\) for ``k < n_bins``.

    Extended-precision input is evaluated in ``clongdouble``; everything else in
    ``complex128``.
    """
    x = np.asarray(samples)
    if x.ndim != 1:
        raise ValueError(f"samples must be 1D, got shape {x.shape}")
    N = int(x.size)
    if n_bins is None:
        n_bins = N
    n_bins = int(n_bins)
    if not (0 <= n_bins <= N):
        raise ValueError(f"n_bins must be in [0, {N}], got {n_bins}")

    if x.dtype == np.dtype(np.clongdouble):
        cdtype, rdtype = np.clongdouble, np.longdouble
    else:
        cdtype, rdtype = np.complex128, np.float64
    x = x.astype(cdtype)

    two_pi = 2 * np.arccos(np.array(-1, dtype=rdtype))
    k = np.arange(n_bins, dtype=rdtype)[:, None]
    n = np.arange(N, dtype=rdtype)[None, :]
    # Reduce k*n modulo N before scaling so large products keep their precision.
    denom = rdtype(max(N, 1))
    angles = -two_pi * np.mod(k * n, denom) / denom
    basis = np.empty(angles.shape, dtype=cdtype)
    basis.real = np.cos(angles)
    basis.imag = np.sin(angles)
    return basis @ x


def compare_spectrum(
    engine,
    samples: Optional[np.ndarray] = None,
    *,
    atol: float = 1e-3,
) -> SpectrumComparison:
    """Compare ``engine.get_spectrum()`` against the direct DFT of its window.

    Parameters
    ----------
    engine:
        Any sliding DFT engine.
    samples:
        The last ``window_size`` samples, oldest first. If omitted, the engine's
        window is reordered and used.
    atol:
        Absolute tolerance per bin.
    """
    if samples is None:
        samples = engine.reorder()
    samples = np.asarray(samples)
    if samples.size != engine.window_size:
        raise ValueError(f"samples must have window_size={engine.window_size} entries, got {samples.size}")

    spec = np.asarray(engine.get_spectrum())
    ref = direct_dft(samples, n_bins=engine.n_bins)

    if spec.size == 0:
        return SpectrumComparison(ok=True, max_abs_error=0.0, worst_bin=-1, n_bins=0, errors=[])

    err = np.abs(spec.astype(ref.dtype) - ref)
    worst = int(np.argmax(err))
    errors: List[str] = []
    for b in np.flatnonzero(err > atol)[:10]:
        errors.append(f"bin {int(b)}: |error|={float(err[b]):.3g} > atol={atol:g}")

    return SpectrumComparison(
        ok=not errors,
        max_abs_error=float(err[worst]),
        worst_bin=worst,
        n_bins=int(spec.size),
        errors=errors,
    )
