from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import matplotlib
import numpy as np
import pytest

from dipole_code.glauber import NuclearThickness

matplotlib.use("Agg")


def random_unitary(rng: np.random.Generator) -> np.ndarray:
    Z = rng.normal(size=(3, 3)) + 1j * rng.normal(size=(3, 3))
    Q, R = np.linalg.qr(Z)
    return Q * (np.diag(R) / np.abs(np.diag(R)))


def lattice_line(x: float, y: float, U: np.ndarray) -> str:
    vals = [repr(float(x)), repr(float(y))]
    for z in np.asarray(U, complex).ravel():
        vals += [repr(float(z.real)), repr(float(z.imag))]
    return " ".join(vals)


def write_lattice(path: Path, sites: Iterable[Tuple[float, float, np.ndarray]],
                  header: str = "# x y Re/Im U_ij\n") -> Path:
    text = header + "".join(lattice_line(x, y, U) + "\n" for x, y, U in sites)
    path.write_text(text)
    return path


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20150601)


@pytest.fixture
def identity_lattice(tmp_path: Path) -> Path:
    I = np.eye(3)
    return write_lattice(tmp_path / "identity.dat",
                         [(0.0, 0.0, I), (0.0, 1.0, I), (1.0, 0.0, I), (1.0, 1.0, I)])


@pytest.fixture
def unitary_lattice(tmp_path: Path, rng: np.random.Generator):
    """4 x 4 grid on {0,1,2,3}^2 with random SU(3)-like entries, x-major order."""
    coords = [0.0, 1.0, 2.0, 3.0]
    sites = [(x, y, random_unitary(rng)) for x in coords for y in coords]
    path = write_lattice(tmp_path / "unitary.dat", sites)
    return path, sites


class StubElementary:
    """Elementary amplitude with a fixed b-integrated value."""

    def __init__(self, n_bint: float, saturation: bool = True) -> None:
        self.n_bint = n_bint
        self.saturation = saturation
        self.calls = 0

    def N_bint(self, r: float, x: float) -> float:
        self.calls += 1
        return self.n_bint


@pytest.fixture
def flat_thickness() -> NuclearThickness:
    """Constant T_A = 1e-3 GeV^-2 for b < 50 GeV^-1."""
    b = np.arange(0.0, 50.0, 0.5)
    return NuclearThickness(b=b, T=np.full_like(b, 1e-3), A=197)
