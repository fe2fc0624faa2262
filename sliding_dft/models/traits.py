from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np


class SignalTrait(Enum):
    """Caller guarantee about the samples pushed into an engine.

    ``REAL_ONLY`` and ``IMAG_ONLY`` halve the work per push: the spectrum of such a
    signal is conjugate-symmetric, so only the lower ``N // 2`` bins are updated.
    The upper half of the spectrum buffer is never written for these traits.
    """

    FULL_COMPLEX = "full"
    REAL_ONLY = "real"
    IMAG_ONLY = "imag"

    def n_bins(self, window_size: int) -> int:
        if self is SignalTrait.FULL_COMPLEX:
            return int(window_size)
        return int(window_size) // 2

    def admits(self, sample: complex) -> bool:
        """True if ``sample`` satisfies this trait (exact zero test, no tolerance)."""
        if self is SignalTrait.REAL_ONLY:
            return sample.imag == 0
        if self is SignalTrait.IMAG_ONLY:
            return sample.real == 0
        return True

    def first_violation(self, samples: np.ndarray) -> int:
        """Index of the first sample in ``samples`` breaking the trait, or -1."""
        if self is SignalTrait.REAL_ONLY:
            bad = np.flatnonzero(samples.imag != 0)
        elif self is SignalTrait.IMAG_ONLY:
            bad = np.flatnonzero(samples.real != 0)
        else:
            return -1
        return int(bad[0]) if bad.size else -1

    @classmethod
    def parse(cls, value: Union["SignalTrait", str]) -> "SignalTrait":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {
            "full": cls.FULL_COMPLEX,
            "full_complex": cls.FULL_COMPLEX,
            "complex": cls.FULL_COMPLEX,
            "real": cls.REAL_ONLY,
            "real_only": cls.REAL_ONLY,
            "imag": cls.IMAG_ONLY,
            "imag_only": cls.IMAG_ONLY,
        }
        if key not in aliases:
            raise ValueError(f"Unknown signal trait: {value!r}")
        return aliases[key]


class Precision(Enum):
    """Floating point precision of an engine's buffers and arithmetic."""

    SINGLE = "single"
    DOUBLE = "double"
    EXTENDED = "extended"

    @property
    def dtype(self) -> np.dtype:
        """Complex dtype used for every buffer of the engine."""
        return np.dtype(_COMPLEX_DTYPES[self])

    @property
    def real_dtype(self) -> np.dtype:
        return np.dtype(_REAL_DTYPES[self])

    @classmethod
    def parse(cls, value: Union["Precision", str]) -> "Precision":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {
            "single": cls.SINGLE,
            "float": cls.SINGLE,
            "complex64": cls.SINGLE,
            "double": cls.DOUBLE,
            "complex128": cls.DOUBLE,
            "extended": cls.EXTENDED,
            "long_double": cls.EXTENDED,
            "clongdouble": cls.EXTENDED,
        }
        if key not in aliases:
            raise ValueError(f"Unknown precision: {value!r}")
        return aliases[key]

    @classmethod
    def from_dtype(cls, dtype: np.dtype) -> "Precision":
        dtype = np.dtype(dtype)
        for p in cls:
            if p.dtype == dtype:
                return p
        raise ValueError(f"No precision uses dtype {dtype}")


_COMPLEX_DTYPES = {
    Precision.SINGLE: np.complex64,
    Precision.DOUBLE: np.complex128,
    Precision.EXTENDED: np.clongdouble,
}

_REAL_DTYPES = {
    Precision.SINGLE: np.float32,
    Precision.DOUBLE: np.float64,
    Precision.EXTENDED: np.longdouble,
}
