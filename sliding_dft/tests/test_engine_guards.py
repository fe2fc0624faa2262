"""Tests for construction guards, trait rejection and in-place reordering."""

from __future__ import annotations

import numpy as np
import pytest

from sliding_dft.analysis.single import SingleSdft
from sliding_dft.analysis.dispatch import SdftEngine, create_engine
from sliding_dft.errors import (
    BufferContractError,
    SdftError,
    SignalTraitViolation,
    WindowTooShort,
)
from sliding_dft.models.buffers import allocate_buffers
from sliding_dft.models.traits import Precision, SignalTrait
from sliding_dft.validation.reference import compare_spectrum, direct_dft


def _make(window_size: int, trait=SignalTrait.FULL_COMPLEX, precision=Precision.DOUBLE) -> SingleSdft:
    bufs = allocate_buffers(window_size, trait, precision)
    return create_engine(precision, bufs.window, bufs.spectrum, bufs.phase_table, window_size, trait)


# -----------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------


def test_window_too_short() -> None:
    bufs = allocate_buffers(4)
    with pytest.raises(WindowTooShort):
        SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, 0)
    with pytest.raises(SdftError):
        SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, -3)


def test_initial_window_trait_violation_reports_index() -> None:
    bufs = allocate_buffers(8, precision=Precision.DOUBLE)
    bufs.window[3] = 1.0 + 2.0j
    with pytest.raises(SignalTraitViolation) as exc:
        SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, 8, signal_trait=SignalTrait.REAL_ONLY)
    assert exc.value.index == 3

    bufs.window[3] = 2.0j
    bufs.window[5] = 1.0
    with pytest.raises(SignalTraitViolation) as exc:
        SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, 8, signal_trait=SignalTrait.IMAG_ONLY)
    assert exc.value.index == 5


def test_full_complex_accepts_any_initial_window() -> None:
    bufs = allocate_buffers(4)
    bufs.window[:] = [1 + 1j, 2, 3j, -4 - 4j]
    bufs.spectrum[:] = direct_dft(bufs.window)
    eng = SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, 4)
    assert eng.write_index == 0
    assert compare_spectrum(eng, atol=1e-12).ok


def test_buffer_dtype_mismatch() -> None:
    bufs = allocate_buffers(8, precision=Precision.SINGLE)
    with pytest.raises(BufferContractError):
        SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, 8, precision=Precision.DOUBLE)


def test_buffer_too_short() -> None:
    dtype = Precision.DOUBLE.dtype
    window = np.zeros(8, dtype=dtype)
    phase = np.zeros(8, dtype=dtype)
    with pytest.raises(BufferContractError):
        SingleSdft(window, np.zeros(7, dtype=dtype), phase, 8)
    # Half-spectrum traits only need N // 2 spectrum slots.
    eng = SingleSdft(window, np.zeros(4, dtype=dtype), phase, 8, signal_trait=SignalTrait.REAL_ONLY)
    assert eng.n_bins == 4
    with pytest.raises(BufferContractError):
        SingleSdft(np.zeros(7, dtype=dtype), np.zeros(8, dtype=dtype), phase, 8)


def test_buffer_overlap_and_shape() -> None:
    dtype = Precision.DOUBLE.dtype
    block = np.zeros(16, dtype=dtype)
    with pytest.raises(BufferContractError):
        SingleSdft(block[:8], block[4:12], np.zeros(8, dtype=dtype), 8)
    with pytest.raises(BufferContractError):
        SingleSdft(np.zeros((2, 8), dtype=dtype), np.zeros(8, dtype=dtype), np.zeros(8, dtype=dtype), 8)
    with pytest.raises(BufferContractError):
        SingleSdft([0j] * 8, np.zeros(8, dtype=dtype), np.zeros(8, dtype=dtype), 8)


def test_phase_table_is_written_on_construction() -> None:
    eng = _make(4)
    np.testing.assert_allclose(eng.buffers.phase_table, [1, 1j, -1, -1j], atol=1e-15)


def test_engine_satisfies_protocol() -> None:
    assert isinstance(_make(4), SdftEngine)


# -----------------------------------------------------------------------
# Trait rejection on push
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "trait, bad",
    [(SignalTrait.REAL_ONLY, 1.0 + 1e-3j), (SignalTrait.IMAG_ONLY, 0.5 + 2.0j)],
)
def test_trait_violation_leaves_engine_untouched(trait, bad) -> None:
    eng = _make(8, trait)
    good = [3.0, -1.0, 2.5] if trait is SignalTrait.REAL_ONLY else [3.0j, -1.0j, 2.5j]
    for s in good:
        eng.push(s)

    spec_before = eng.get_spectrum().copy()
    window_before = eng.buffers.window.copy()
    index_before = eng.write_index

    with pytest.raises(SignalTraitViolation):
        eng.push(bad)

    np.testing.assert_array_equal(eng.get_spectrum(), spec_before)
    np.testing.assert_array_equal(eng.buffers.window, window_before)
    assert eng.write_index == index_before


@pytest.mark.parametrize(
    "trait, bad",
    [(SignalTrait.REAL_ONLY, 1.0 + 1e-50j), (SignalTrait.IMAG_ONLY, 1e-50 + 1.0j)],
)
def test_tiny_violation_rejected_before_rounding(trait, bad) -> None:
    # 1e-50 underflows to zero in complex64 but is still a nonzero part.
    eng = _make(4, trait, Precision.SINGLE)
    with pytest.raises(SignalTraitViolation):
        eng.push(bad)
    with pytest.raises(SignalTraitViolation):
        eng.push(np.complex128(bad))
    assert eng.write_index == 0
    assert not np.any(eng.window)


def test_push_many_stops_at_first_violation() -> None:
    eng = _make(8, SignalTrait.REAL_ONLY)
    with pytest.raises(SignalTraitViolation):
        eng.push_many([1.0, 2.0, 3.0 + 1.0j, 4.0])
    assert eng.write_index == 2
    np.testing.assert_array_equal(eng.reorder()[-2:], [1.0, 2.0])


def test_half_spectrum_upper_half_left_stale() -> None:
    N = 8
    bufs = allocate_buffers(N, SignalTrait.REAL_ONLY)
    bufs.spectrum[N // 2:] = 7.0 + 7.0j
    eng = SingleSdft(bufs.window, bufs.spectrum, bufs.phase_table, N, signal_trait=SignalTrait.REAL_ONLY)

    x = np.arange(1.0, 2 * N + 1.0)
    eng.push_many(x)

    assert eng.get_spectrum().shape == (N // 2,)
    np.testing.assert_array_equal(bufs.spectrum[N // 2:], np.full(N // 2, 7.0 + 7.0j))
    np.testing.assert_allclose(eng.get_spectrum(), direct_dft(x[-N:])[: N // 2], atol=1e-9)


def test_spectrum_view_is_read_only() -> None:
    eng = _make(4)
    with pytest.raises(ValueError):
        eng.get_spectrum()[0] = 1.0


def test_window_view_shows_circular_layout() -> None:
    eng = _make(4)
    eng.push_many([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    # Slots 0 and 1 were overwritten by the fifth and sixth samples.
    np.testing.assert_array_equal(eng.window, [5.0, 6.0, 3.0, 4.0])
    assert eng.write_index == 2
    with pytest.raises(ValueError):
        eng.window[0] = 0.0
    assert np.shares_memory(eng.window, eng.buffers.window)


# -----------------------------------------------------------------------
# Reorder
# -----------------------------------------------------------------------


@pytest.mark.parametrize("extra", range(12))
def test_reorder_every_rotation(extra: int) -> None:
    """Rotation amounts sharing a factor with N (2, 3, 4, 6, ...) need several cycles."""
    N = 12
    eng = _make(N)
    x = np.arange(1, N + extra + 1, dtype=float)
    eng.push_many(x)
    assert eng.write_index == extra % N

    window = eng.reorder()
    np.testing.assert_array_equal(window, x[-N:])
    assert eng.write_index == 0


def test_reorder_is_idempotent() -> None:
    eng = _make(10)
    eng.push_many(np.arange(23, dtype=float) * (1 - 1j))
    first = eng.reorder().copy()
    second = eng.reorder().copy()
    np.testing.assert_array_equal(first, second)
    assert eng.write_index == 0


def test_reorder_between_pushes_keeps_spectrum_correct() -> None:
    rng = np.random.default_rng(3)
    x = rng.normal(size=40) + 1j * rng.normal(size=40)
    eng = _make(9)
    for i, s in enumerate(x, start=1):
        eng.push(s)
        if i % 7 == 0:
            eng.reorder()
    np.testing.assert_allclose(eng.get_spectrum(), direct_dft(x[-9:]), atol=1e-9)
    np.testing.assert_array_equal(eng.reorder(), x[-9:])


def test_reorder_does_not_touch_spectrum() -> None:
    eng = _make(6)
    eng.push_many([1, 2, 3, 4, 5, 6, 7, 8])
    spec = eng.get_spectrum().copy()
    eng.reorder()
    np.testing.assert_array_equal(eng.get_spectrum(), spec)


def test_window_size_one() -> None:
    eng = _make(1)
    eng.push_many([2.0, -3.0 + 1j])
    np.testing.assert_allclose(eng.get_spectrum(), [-3.0 + 1j])
    np.testing.assert_array_equal(eng.reorder(), [-3.0 + 1j])


def test_reset_zeroes_state() -> None:
    eng = _make(5)
    eng.push_many([1, 2, 3])
    eng.reset()
    assert eng.write_index == 0
    assert not np.any(eng.buffers.window)
    assert not np.any(eng.get_spectrum())


# -----------------------------------------------------------------------
# Precision
# -----------------------------------------------------------------------


@pytest.mark.parametrize("precision", list(Precision))
def test_buffers_and_spectrum_keep_precision(precision: Precision) -> None:
    eng = _make(16, precision=precision)
    rng = np.random.default_rng(11)
    x = rng.uniform(-1, 1, 48) + 1j * rng.uniform(-1, 1, 48)
    eng.push_many(x)

    assert eng.get_spectrum().dtype == precision.dtype
    assert eng.buffers.window.dtype == precision.dtype
    res = compare_spectrum(eng, atol=1e-3)
    assert res.ok, res.errors


def test_extended_precision_is_at_least_as_accurate_as_double() -> None:
    rng = np.random.default_rng(5)
    x = rng.uniform(-1, 1, 2000) + 1j * rng.uniform(-1, 1, 2000)
    errs = {}
    for precision in (Precision.DOUBLE, Precision.EXTENDED):
        eng = _make(32, precision=precision)
        eng.push_many(x)
        errs[precision] = compare_spectrum(eng, x[-32:].astype(np.clongdouble)).max_abs_error
    assert errs[Precision.EXTENDED] <= errs[Precision.DOUBLE] * 1.5 + 1e-15
