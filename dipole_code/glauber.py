# glauber.py — smooth Woods–Saxon nucleus in the optical Glauber limit
#
#   N_A(r, b) = 1 - exp( -A/2 T_A(b) σ_dip(r, x) ),   σ_dip = 2 ∫d²b N_p(r, b, x)
#
# T_A(b) is normalised to ∫d²b T_A = 1 and tabulated once per nucleus on
# b ∈ [0, 100) GeV^-1, step 0.1; outside the table it is exactly zero.
# Valid only for large nuclei (A ≥ 100) and a saturated elementary amplitude.
#
# Dependencies: numpy (matplotlib for the plotting helper)

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import math
import numpy as np

from dipole_code.dipole import FMGEV, ConfigurationError, DipoleAmplitude, log
from dipole_code.ipsat import MZSAT, IpsatAmplitude, IpsatParams, ipsat_version

LARGE_A = 100
B_MAX = 100.0   # GeV^-1
DB = 0.1        # GeV^-1


def _leggauss(n: int) -> Tuple[np.ndarray, np.ndarray]:
    return np.polynomial.legendre.leggauss(n)


# --------------------------- Woods–Saxon ------------------------------------

@dataclass(frozen=True)
class WoodsSaxon:
    A: int
    d_fm: float = 0.54
    rmax_fm: float = 20.0
    zmax_fm: float = 20.0
    nz: int = 200
    nr: int = 400

    def radius_fm(self) -> float:
        a13 = self.A ** (1 / 3)
        return 1.12 * a13 - 0.86 / a13

    def shape(self, r_fm: np.ndarray) -> np.ndarray:
        """Unnormalised profile 1 / (1 + exp((r - R_A)/d))."""
        x = (np.asarray(r_fm, float) - self.radius_fm()) / self.d_fm
        return 0.5 * (1.0 - np.tanh(0.5 * x))   # = 1/(1+e^x) without overflow

    def norm_fm3(self) -> float:
        """∫ d³r shape(r) in fm^3."""
        x, w = _leggauss(self.nr)
        half = 0.5 * self.rmax_fm
        r = half * (x + 1.0)
        return float(4.0 * math.pi * half * np.sum(w * r * r * self.shape(r)))

    def T_A(self, b: np.ndarray | float) -> np.ndarray:
        """Thickness [GeV^-2] at impact parameter b [GeV^-1], ∫d²b T_A = 1."""
        b_fm = np.atleast_1d(np.asarray(b, float)) / FMGEV
        x, w = _leggauss(self.nz)
        z = self.zmax_fm * x
        rr = np.sqrt(b_fm[:, None] ** 2 + z[None, :] ** 2)
        T_fm2 = self.zmax_fm * np.sum(w[None, :] * self.shape(rr), axis=1) / self.norm_fm3()
        return T_fm2 / FMGEV ** 2


# ----------------------- thickness interpolant ------------------------------

@dataclass(frozen=True)
class NuclearThickness:
    """Read-only T_A(b) table with linear interpolation, zero outside the table."""
    b: np.ndarray    # GeV^-1, strictly increasing
    T: np.ndarray    # GeV^-2
    A: Optional[int] = None

    def __post_init__(self):
        b = np.array(self.b, dtype=float)
        T = np.array(self.T, dtype=float)
        if b.ndim != 1 or b.shape != T.shape:
            raise ValueError(f"b.shape={b.shape} and T.shape={T.shape} mismatch")
        if b.size < 2 or not np.all(np.diff(b) > 0):
            raise ValueError("[Glauber] b grid must have ≥2 strictly increasing points")
        b.flags.writeable = False
        T.flags.writeable = False
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "T", T)

    @classmethod
    def from_woods_saxon(cls, A: int, b_max: float = B_MAX, db: float = DB,
                         **ws_kwargs) -> "NuclearThickness":
        ws = WoodsSaxon(A=int(A), **ws_kwargs)
        b = np.arange(0.0, b_max, db)
        T = ws.T_A(b)
        log.info(f"[Glauber] T_A(b) table: A={A} R_A={ws.radius_fm():.3f} fm "
                 f"d={ws.d_fm:g} fm, {b.size} points, b<{b_max:g} GeV^-1")
        return cls(b=b, T=T, A=int(A))

    def evaluate(self, b: np.ndarray | float) -> np.ndarray | float:
        out = np.interp(b, self.b, self.T, left=0.0, right=0.0)
        return out if np.ndim(out) else float(out)

    __call__ = evaluate

    def plot(self, *, ax=None):
        import matplotlib.pyplot as plt
        if ax is None:
            fig, ax = plt.subplots(figsize=(5.4, 3.6), dpi=180)
        else:
            fig = ax.figure
        ax.plot(self.b, self.T, lw=2, label=f"A={self.A}" if self.A else None)
        ax.set_xlabel(r"$b$ [GeV$^{-1}$]"); ax.set_ylabel(r"$T_A(b)$ [GeV$^{-2}$]")
        if self.A:
            ax.legend()
        fig.tight_layout(); return fig, ax


# ----------------------- optical Glauber nucleus ----------------------------

class SmoothWSNucleus(DipoleAmplitude):
    """
    Dipole-nucleus amplitude from a smooth Woods–Saxon nucleus.

    `elementary` is any object with a boolean `saturation` attribute and an
    `N_bint(r, x)` method (the b-integrated dipole-proton amplitude); by
    default an IpsatAmplitude built from `ipsat` (parameters or a version
    name, "mzsat" / "mznonsat").
    """

    def __init__(self, A: int = 197,
                 ipsat: IpsatParams | str = MZSAT,
                 elementary=None,
                 thickness: Optional[NuclearThickness] = None) -> None:
        if int(A) <= 0:
            raise ConfigurationError(f"[Glauber] mass number must be positive, got A={A}")
        self.A = int(A)
        if elementary is None:
            params = ipsat_version(ipsat) if isinstance(ipsat, str) else ipsat
            elementary = IpsatAmplitude(params)
        self.elementary = elementary
        self.thickness = thickness if thickness is not None else \
            NuclearThickness.from_woods_saxon(self.A)

    def _check_config(self) -> None:
        if not self.elementary.saturation:
            log.error("SmoothWSNucleus.amplitude does not support nonsat yet")
            raise ConfigurationError(
                "[Glauber] non-saturated elementary amplitude is not supported for the nucleus")
        if self.A < LARGE_A:
            log.error(f"SmoothWSNucleus.amplitude assumes large A, got A={self.A}")
            raise ConfigurationError(
                f"[Glauber] optical limit needs A ≥ {LARGE_A}, got A={self.A}")

    def amplitude(self, xpom: float, q1: Sequence[float], q2: Sequence[float]) -> float:
        self._check_config()

        q1 = np.asarray(q1, float); q2 = np.asarray(q2, float)
        r = float(np.hypot(*(q1 - q2)))
        b = float(np.hypot(*(0.5 * (q1 + q2))))

        sigmap = 2.0 * self.elementary.N_bint(r, xpom)
        if sigmap < 0:
            log.warning(f"sigma_p={sigmap}, r={r}, xpom={xpom}")

        TA = self.thickness.evaluate(b)
        res = float(-np.expm1(-0.5 * self.A * TA * sigmap))
        if res < 0 or res > 1:
            log.warning(f"Smooth ws nuke dipole amplitude {res}, r={r}, b={b}, T(b)={TA}")
        return res

    def info_str(self) -> str:
        return f"Optical Glauber nucleus, A={self.A}"
