"""Exceptions raised by the sliding DFT engines.

All errors derive from :class:`SdftError`. The value errors also derive from
:class:`ValueError` so that callers which only care about "bad input" can catch
the builtin.
"""

from __future__ import annotations

from typing import Optional, Sequence


class SdftError(Exception):
    """Base class for all sliding DFT errors."""


class WindowTooShort(SdftError, ValueError):
    """The requested window size is below 1."""

    def __init__(self, window_size: int) -> None:
        self.window_size = window_size
        super().__init__(f"window_size must be >= 1, got {window_size}")


class SignalTraitViolation(SdftError, ValueError):
    """A sample broke the declared real-only / imaginary-only guarantee.

    Attributes
    ----------
    value:
        The offending complex sample.
    trait:
        Name of the declared signal trait.
    index:
        Window index of the offending sample when detected during construction,
        else None (detected on push).
    """

    def __init__(self, value: complex, trait: str, index: Optional[int] = None) -> None:
        self.value = value
        self.trait = trait
        self.index = index
        where = f" at window index {index}" if index is not None else ""
        super().__init__(f"sample {value!r}{where} violates signal trait '{trait}'")


class NotCombinable(SdftError, ValueError):
    """Two engines cannot be combined.

    ``reasons`` lists every mismatch that was found.
    """

    def __init__(self, reasons: Sequence[str]) -> None:
        self.reasons = tuple(reasons)
        super().__init__("engines are not combinable: " + "; ".join(self.reasons))


class BufferContractError(SdftError, ValueError):
    """A caller-supplied buffer has the wrong dtype, shape, size or aliases another buffer."""


class EngineOwnershipError(SdftError, RuntimeError):
    """An engine owned by a combined engine was driven directly."""
