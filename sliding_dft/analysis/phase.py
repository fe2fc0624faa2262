"""Phase table generation.

The sliding DFT advances every bin by one time step per push by multiplying it
with the bin's rotation factor ``exp(j*2*pi*k/N)``. The table is computed once
per engine in the engine's own real precision.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from sliding_dft.models.traits import Precision


def fill_phase_table(out: np.ndarray, window_size: int) -> np.ndarray:
    r"""Write the ``N``-th roots of unity into ``out[:N]`` in place.

    Parameters
    ----------
    out:
        Array with at least ``window_size`` slots of one of the engine dtypes
        (``complex64``, ``complex128``, ``clongdouble``).
    window_size:
        ``N >= 1``.

    Returns
    -------
    np.ndarray
        View ``out[:N]`` holding \(e^{j 2\pi i / N}\) for ``i = 0..N-1``.

    Raises
    ------
    ValueError
        ``out`` has a dtype no precision uses.
    """
    N = int(window_size)
    table = out[:N]
    real_dtype = Precision.from_dtype(out.dtype).real_dtype
    two_pi = 2 * np.arccos(np.array(-1, dtype=real_dtype))
    angles = np.arange(N, dtype=real_dtype) * two_pi / real_dtype.type(N)
    table.real[:] = np.cos(angles)
    table.imag[:] = np.sin(angles)
    return table


def phase_table(window_size: int, precision: Union[Precision, str] = Precision.DOUBLE) -> np.ndarray:
    """Return a freshly allocated phase table for ``window_size`` samples."""
    dtype = Precision.parse(precision).dtype
    out = np.empty(int(window_size), dtype=dtype)
    return fill_phase_table(out, window_size)
