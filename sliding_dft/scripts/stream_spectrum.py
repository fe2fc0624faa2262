"""
Stream a sample file through a sliding DFT engine.

Input is a CSV table with a ``real`` column and an optional ``imag`` column
(missing means zero). Every ``--every`` pushes the current spectrum is captured
as one row per bin:

- push_index : number of samples pushed so far
- bin        : bin index k in [0, n_bins)
- real, imag : spectrum value
- magnitude  : |X_k|

Examples
--------
>>> # python -m sliding_dft.scripts.stream_spectrum samples.csv --window-size 64 --trait real --out spectra.csv
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from sliding_dft.errors import SdftError
from sliding_dft.logging_config import setup_logging
from sliding_dft.models.profile import EngineProfile, build_engine
from sliding_dft.validation.reference import compare_spectrum

logger = logging.getLogger(__name__)

SPECTRUM_COLS = ("push_index", "bin", "real", "imag", "magnitude")


def read_samples(path: str | Path) -> np.ndarray:
    """
    Load complex samples from a CSV file with ``real`` and optional ``imag`` columns.

    Examples
    --------
    >>> # read_samples("samples.csv")[:2]
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(str(p))

    df = pd.read_csv(p)
    cols = {c.strip().lower(): c for c in df.columns}
    if "real" not in cols:
        raise ValueError(f"{p.name}: missing 'real' column. Present={list(df.columns)}")

    re = df[cols["real"]].to_numpy(dtype=np.float64)
    im = df[cols["imag"]].to_numpy(dtype=np.float64) if "imag" in cols else np.zeros_like(re)
    if not (np.isfinite(re).all() and np.isfinite(im).all()):
        raise ValueError(f"{p.name}: samples contain NaN/Inf")

    out = np.empty(re.shape, dtype=np.complex128)
    out.real = re
    out.imag = im
    return out


def stream_samples(engine, samples: np.ndarray, *, every: int) -> pd.DataFrame:
    """
    Push ``samples`` through ``engine`` and capture the spectrum every ``every`` pushes.

    Returns
    -------
    pd.DataFrame
        Columns :data:`SPECTRUM_COLS`, one row per captured bin.
    """
    every = int(every)
    if every < 1:
        raise ValueError(f"every must be >= 1, got {every}")

    frames = []
    bins = np.arange(engine.n_bins, dtype=int)
    for i, s in enumerate(samples, start=1):
        engine.push(s)
        if i % every == 0:
            spec = np.asarray(engine.get_spectrum(), dtype=np.complex128)
            frames.append(
                pd.DataFrame(
                    {
                        "push_index": np.full(bins.size, i, dtype=int),
                        "bin": bins,
                        "real": spec.real,
                        "imag": spec.imag,
                        "magnitude": np.abs(spec),
                    }
                )
            )

    if not frames:
        return pd.DataFrame({c: pd.Series(dtype=float) for c in SPECTRUM_COLS})
    return pd.concat(frames, ignore_index=True)


def _print_summary(df: pd.DataFrame, *, top: int = 5) -> None:
    if df.empty:
        print("no spectrum captured (fewer samples than --every)")
        return
    last = int(df["push_index"].max())
    snap = df[df["push_index"] == last].nlargest(top, "magnitude")
    print(f"spectrum after {last} pushes, strongest bins:")
    for row in snap.itertuples(index=False):
        print(f"  bin {int(row.bin):5d}: |X|={row.magnitude:.6g}  ({row.real:+.6g}{row.imag:+.6g}j)")


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m sliding_dft.scripts.stream_spectrum",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Stream samples from a CSV file through a sliding DFT engine.

            The file must contain a 'real' column and may contain an 'imag' column.
            """
        ),
    )
    p.add_argument("input", help="CSV file with 'real' and optional 'imag' columns")
    p.add_argument("--window-size", "-n", type=int, required=True, help="Sliding window length N")
    p.add_argument("--trait", default="full", choices=("full", "real", "imag"), help="Signal trait guarantee")
    p.add_argument(
        "--precision", default="double", choices=("single", "double", "extended"), help="Floating point precision"
    )
    p.add_argument("--combined", action="store_true", help="Use the drift-bounded combined engine")
    p.add_argument("--every", type=int, default=None, help="Capture the spectrum every K pushes (default: N)")
    p.add_argument("--out", default=None, help="Write captured spectra to this CSV file")
    p.add_argument("--verify", action="store_true", help="Check the final spectrum against a direct DFT")
    p.add_argument("--atol", type=float, default=1e-3, help="Absolute tolerance for --verify")
    p.add_argument("--log-level", default="WARNING", help="Console log level (DEBUG, INFO, WARNING, ...)")

    ns = p.parse_args(list(argv) if argv is not None else None)

    setup_logging(console_level=getattr(logging, str(ns.log_level).upper(), logging.WARNING))

    try:
        samples = read_samples(ns.input)
        profile = EngineProfile(
            window_size=ns.window_size,
            signal_trait=ns.trait,
            precision=ns.precision,
            combined=ns.combined,
        )
        engine = build_engine(profile)
        logger.info("streaming %d samples through %r", samples.size, engine)
        df = stream_samples(engine, samples, every=ns.every or profile.window_size)
    except (SdftError, ValueError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if ns.out:
        out = Path(ns.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print(f"wrote {len(df)} rows to {out}")
    else:
        _print_summary(df)

    if ns.verify:
        result = compare_spectrum(engine, atol=ns.atol)
        print(f"verify: max |error|={result.max_abs_error:.3g} at bin {result.worst_bin} (atol={ns.atol:g})")
        if not result.ok:
            for e in result.errors:
                print(f"  {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
