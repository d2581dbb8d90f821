# -*- coding: utf-8 -*-
"""
ipglasma.py
===========
Dipole amplitude from IP-Glasma Wilson lines.

    N(q1, q2) = Re[ 1 - 1/Nc Tr U(q1) U^dagger(q2) ]

U(q) is the stored Wilson line at the grid point nearest to q (nearest in
x and y separately, no interpolation). The lattice is one fixed snapshot,
so the amplitude does not depend on xpom.

Also provides the lattice scan used to visualise the target:
    python -m dipole_code.ipglasma wilsonlines.dat > scan.txt
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

import numpy as np
import pandas as pd

from dipole_code.dipole import NC, DipoleAmplitude
from dipole_code.wilson_lines import (
    WilsonLineGrid, hermitian_conjugate, load_wilson_lines, multiply, trace,
)

SCAN_COLUMNS = ["y", "x", "amp_origin", "amp_local", "one_minus_trace"]


class IPGlasma(DipoleAmplitude):
    def __init__(self, file: Optional[str | Path] = None,
                 grid: Optional[WilsonLineGrid] = None) -> None:
        if (file is None) == (grid is None):
            raise ValueError("[IPGlasma] give exactly one of file= or grid=")
        self.grid = grid if grid is not None else load_wilson_lines(file)

    # --- Wilson lines ---

    def get_wilson_line(self, x: float, y: float) -> np.ndarray:
        return self.grid.wilson_line(x, y)

    def get_trace(self, q: Sequence[float]) -> complex:
        """Tr U at the grid point nearest to q (diagnostics only)."""
        return trace(self.get_wilson_line(q[0], q[1]))

    def min_x(self) -> float: return self.grid.min_x
    def max_x(self) -> float: return self.grid.max_x
    def x_step(self) -> float: return self.grid.x_step

    # --- amplitude ---

    def amplitude(self, xpom: float, q1: Sequence[float], q2: Sequence[float]) -> float:
        quark = self.get_wilson_line(q1[0], q1[1])
        antiquark = hermitian_conjugate(self.get_wilson_line(q2[0], q2[1]))
        amp = 1.0 - trace(multiply(quark, antiquark)) / NC
        return float(amp.real)

    def amplitudes(self, xpom: float, q1s: np.ndarray, q2s: np.ndarray) -> np.ndarray:
        q1s = np.asarray(q1s, float).reshape(-1, 2)
        q2s = np.asarray(q2s, float).reshape(-1, 2)
        if q1s.shape != q2s.shape:
            raise ValueError(f"q1s.shape={q1s.shape} and q2s.shape={q2s.shape} mismatch")
        M = self.grid.matrices
        quark = M[self.grid.indices(q1s[:, 0], q1s[:, 1])]
        antiquark = hermitian_conjugate(M[self.grid.indices(q2s[:, 0], q2s[:, 1])])
        tr = np.trace(multiply(quark, antiquark), axis1=-2, axis2=-1)
        return (1.0 - tr / NC).real

    def info_str(self) -> str:
        nx, ny = self.grid.shape
        return f"IPGlasma Wilson lines from file {self.grid.source}, grid size {nx} x {ny}"


# ---------------------------------------------------------------------------
# Lattice scan
# ---------------------------------------------------------------------------

def scan_lattice(model: IPGlasma, xpom: float = 0.01) -> pd.DataFrame:
    """
    Sample the target between grid points, x and y both running over
    [min_x + step/2, max_x - step/2).

    Columns: y, x,
             amp_origin      N(0, p)
             amp_local       N(p, p)
             one_minus_trace 1 - Re Tr U(p) / Nc
    """
    lo, hi, step = model.min_x(), model.max_x(), model.x_step()
    if step <= 0.0:
        raise ValueError("[IPGlasma] scan needs at least two grid points along x")
    origin = (0.0, 0.0)
    rows = []
    y = lo + step / 2
    while y < hi - step / 2:
        x = lo + step / 2
        while x < hi - step / 2:
            p = (x, y)
            tr = model.get_trace(p).real
            rows.append((y, x,
                         model.amplitude(xpom, origin, p),
                         model.amplitude(xpom, p, p),
                         1.0 - tr / NC))
            x += step
        y += step
    return pd.DataFrame(rows, columns=SCAN_COLUMNS)


def write_scan(df: pd.DataFrame, stream: Optional[TextIO] = None) -> None:
    """Whitespace-separated rows, one blank line after each fixed-y block."""
    stream = sys.stdout if stream is None else stream
    stream.write("# y x  1/Nc(1-Tr[V(0)V^+(x,y)])  1/Nc(1-Tr[V(x,y)V^+(x,y)])  "
                 "1/Nc(Tr[1-V(x,y)])\n")
    for _, block in df.groupby("y", sort=False):
        for row in block[SCAN_COLUMNS].itertuples(index=False):
            stream.write(" ".join(f"{v:.10g}" for v in row) + "\n")
        stream.write("\n")


def plot_scan(df: pd.DataFrame, column: str = "amp_origin", *, ax=None):
    import matplotlib.pyplot as plt
    Z = df.pivot(index="y", columns="x", values=column)
    if ax is None:
        fig, ax = plt.subplots(figsize=(4.8, 4.0), dpi=150)
    else:
        fig = ax.figure
    mesh = ax.pcolormesh(Z.columns.to_numpy(), Z.index.to_numpy(), Z.to_numpy(),
                         shading="nearest")
    fig.colorbar(mesh, ax=ax, label=column)
    ax.set_xlabel(r"$x$ [GeV$^{-1}$]"); ax.set_ylabel(r"$y$ [GeV$^{-1}$]")
    ax.set_aspect("equal")
    fig.tight_layout(); return fig, ax


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    ap = argparse.ArgumentParser(description="Scan an IP-Glasma Wilson line file.")
    ap.add_argument("file", type=str, help="Wilson line data file")
    ap.add_argument("--xpom", type=float, default=0.01)
    args = ap.parse_args(argv)

    amp = IPGlasma(file=args.file)
    print(f"# {amp.info_str()}")
    write_scan(scan_lattice(amp, xpom=args.xpom))
    return 0


if __name__ == "__main__":
    sys.exit(main())
