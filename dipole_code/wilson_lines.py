# -*- coding: utf-8 -*-
"""
wilson_lines.py
===============
SU(3) Wilson lines on a transverse lattice: 3x3 colour-matrix algebra,
the lattice-file reader and the nearest-grid-point lookup.

File format (one lattice site per line, whitespace separated):
    x  y  Re U00 Im U00  Re U01 Im U01  Re U02 Im U02  Re U10 ... Im U22
Lines starting with '#' and lines shorter than 10 characters are skipped.
The sites must be enumerated x-major: for each x, all y in increasing order.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from dipole_code.dipole import log

COMMENT = "#"
MIN_LINE_LENGTH = 10
N_FIELDS = 2 + 18


class LatticeFileError(FileNotFoundError):
    """The lattice configuration file cannot be opened."""


# ---------------------------------------------------------------------------
# Colour-matrix algebra
# ---------------------------------------------------------------------------

def multiply(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    return np.matmul(A, B)

def hermitian_conjugate(A: np.ndarray) -> np.ndarray:
    return np.conjugate(np.swapaxes(A, -1, -2))

def trace(A: np.ndarray) -> complex:
    return complex(np.trace(A))


# ---------------------------------------------------------------------------
# Nearest grid point
# ---------------------------------------------------------------------------

def find_index(query: float, coords: Sequence[float]) -> int:
    """
    Index of the coordinate closest to `query` in the strictly increasing
    `coords`. Ties go to the lower index; queries outside the grid clamp
    to the first / last point.
    """
    coords = np.asarray(coords, float)
    n = coords.size
    i = int(np.searchsorted(coords, query))   # coords[i-1] < query <= coords[i]
    if i <= 0:
        return 0
    if i >= n:
        return n - 1
    return i - 1 if (query - coords[i - 1]) <= (coords[i] - query) else i

def find_indices(queries: np.ndarray, coords: np.ndarray) -> np.ndarray:
    """Vectorised find_index."""
    q = np.asarray(queries, float)
    coords = np.asarray(coords, float)
    if coords.size == 1:
        return np.zeros(q.shape, dtype=np.intp)
    i = np.clip(np.searchsorted(coords, q), 1, coords.size - 1)
    lo, hi = coords[i - 1], coords[i]
    return np.where(q - lo <= hi - q, i - 1, i).astype(np.intp)


# ---------------------------------------------------------------------------
# Lattice grid
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WilsonLineGrid:
    """Wilson lines on a rectangular grid, flattened as x_index * ny + y_index."""
    x_coords: np.ndarray     # (nx,)
    y_coords: np.ndarray     # (ny,)
    matrices: np.ndarray     # (nx*ny, 3, 3) complex
    source: str = ""

    def __post_init__(self):
        x = np.array(self.x_coords, dtype=float)
        y = np.array(self.y_coords, dtype=float)
        m = np.array(self.matrices, dtype=np.complex128)
        if x.size == 0 or y.size == 0:
            raise ValueError("[Lattice] Empty grid")
        if not (np.all(np.diff(x) > 0) and np.all(np.diff(y) > 0)):
            raise ValueError("[Lattice] Grid coords must be strictly increasing.")
        if m.shape != (x.size * y.size, 3, 3):
            raise ValueError(f"[Lattice] matrices.shape={m.shape}, expected "
                             f"({x.size * y.size}, 3, 3) for a {x.size} x {y.size} grid")
        for arr in (x, y, m):
            arr.flags.writeable = False
        object.__setattr__(self, "x_coords", x)
        object.__setattr__(self, "y_coords", y)
        object.__setattr__(self, "matrices", m)

    @property
    def nx(self) -> int: return int(self.x_coords.size)

    @property
    def ny(self) -> int: return int(self.y_coords.size)

    @property
    def shape(self) -> Tuple[int, int]: return self.nx, self.ny

    # ---- bounds ----
    @property
    def min_x(self) -> float: return float(self.x_coords[0])

    @property
    def max_x(self) -> float: return float(self.x_coords[-1])

    @property
    def x_step(self) -> float:
        return float(self.x_coords[1] - self.x_coords[0]) if self.nx > 1 else 0.0

    @property
    def min_y(self) -> float: return float(self.y_coords[0])

    @property
    def max_y(self) -> float: return float(self.y_coords[-1])

    @property
    def y_step(self) -> float:
        return float(self.y_coords[1] - self.y_coords[0]) if self.ny > 1 else 0.0

    # ---- access ----
    def index(self, x: float, y: float) -> int:
        return find_index(x, self.x_coords) * self.ny + find_index(y, self.y_coords)

    def indices(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return find_indices(x, self.x_coords) * self.ny + find_indices(y, self.y_coords)

    def matrix(self, index: int) -> np.ndarray:
        return self.matrices[index]

    def wilson_line(self, x: float, y: float) -> np.ndarray:
        return self.matrices[self.index(x, y)]


def _parse_site(line: str, lineno: int, path: Path) -> Tuple[float, float, np.ndarray]:
    parts = line.split()
    if len(parts) < N_FIELDS:
        raise ValueError(f"[Lattice] {path.name}:{lineno}: expected {N_FIELDS} "
                         f"numbers, found {len(parts)}")
    try:
        vals = [float(p) for p in parts[:N_FIELDS]]
    except ValueError as e:
        raise ValueError(f"[Lattice] {path.name}:{lineno}: {e}") from e
    re_, im = np.array(vals[2::2]), np.array(vals[3::2])
    return vals[0], vals[1], (re_ + 1j * im).reshape(3, 3)


def load_wilson_lines(path: str | Path) -> WilsonLineGrid:
    """
    Read a lattice file into a WilsonLineGrid.

    The x (y) axis is built by appending a coordinate only when it is larger
    than the last one appended, which relies on the x-major scan order. The
    scan order is then verified site by site, so an irregular file raises
    instead of producing a scrambled index map.
    """
    path = Path(path)
    try:
        fh = path.open("r")
    except OSError as e:
        log.error(f"Could not open file {path}")
        raise LatticeFileError(f"[Lattice] Could not open file {path}") from e

    xs: List[float] = []
    ys: List[float] = []
    sites: List[Tuple[float, float]] = []
    mats: List[np.ndarray] = []
    with fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.rstrip("\r\n")
            if line.startswith(COMMENT) or len(line) < MIN_LINE_LENGTH:
                continue
            x, y, U = _parse_site(line, lineno, path)
            mats.append(U)
            sites.append((x, y))
            if not xs or x > xs[-1]:
                xs.append(x)
            if not ys or y > ys[-1]:
                ys.append(y)

    if not mats:
        raise ValueError(f"[Lattice] No Wilson lines found in {path}")

    nx, ny = len(xs), len(ys)
    if len(mats) != nx * ny:
        raise ValueError(f"[Lattice] {path.name}: {len(mats)} sites do not form "
                         f"a {nx} x {ny} grid")
    expected = np.stack([np.repeat(xs, ny), np.tile(ys, nx)], axis=1)
    bad = np.flatnonzero(np.any(np.asarray(sites) != expected, axis=1))
    if bad.size:
        k = int(bad[0])
        raise ValueError(f"[Lattice] {path.name}: site {k} at {sites[k]} breaks the "
                         f"x-major scan order (expected {tuple(expected[k])})")

    grid = WilsonLineGrid(np.asarray(xs), np.asarray(ys), np.stack(mats), source=str(path))
    log.info(f"Loaded {len(mats)} Wilson lines from file {path}, grid size {nx} x {ny}")
    return grid
