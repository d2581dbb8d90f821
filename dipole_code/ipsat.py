# -*- coding: utf-8 -*-
"""
ipsat.py
========
Elementary dipole-proton amplitude in the IPsat form

    N(r, b, x) = 1 - exp(-Ω)          (saturated)
    N(r, b, x) = Ω                    (non-saturated)
    Ω = π² r² / (2 Nc) α_s(μ) xg(x) T_p(b),   μ² = μ0² + C / r²

with a Gaussian proton T_p(b) = exp(-b²/(2B_p)) / (2π B_p) and the gluon
distribution at its initial-scale shape xg = A_g x^(-λ_g) (1-x)^5.6
(no DGLAP evolution). Units: r, b in GeV^-1, N_bint in GeV^-2.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from dipole_code.coupling import IPSAT_ALPHAS, AlphaSConfig, alpha_s
from dipole_code.dipole import NC, ConfigurationError, log


@dataclass(frozen=True)
class IpsatParams:
    C: float
    mu0: float          # GeV
    lambda_g: float
    A_g: float
    saturation: bool = True
    B_p: float = 4.0    # GeV^-2

# Fits to HERA data with and without saturation
MZSAT = IpsatParams(C=2.2894, mu0=math.sqrt(1.1), lambda_g=0.08289, A_g=2.1953,
                    saturation=True)
MZNONSAT = IpsatParams(C=4.2974, mu0=math.sqrt(1.1), lambda_g=-0.006657, A_g=3.0391,
                       saturation=False)

_VERSIONS: Dict[str, IpsatParams] = {"mzsat": MZSAT, "mznonsat": MZNONSAT}

def ipsat_version(name: str) -> IpsatParams:
    try:
        return _VERSIONS[name.lower()]
    except KeyError:
        log.error(f"Unknown ipsat version {name!r}")
        raise ConfigurationError(f"[IPsat] Unknown ipsat version {name!r}, "
                                 f"expected one of {sorted(_VERSIONS)}") from None


class IpsatAmplitude:
    """Nucleon-level amplitude, also usable as the elementary input of SmoothWSNucleus."""

    def __init__(self, params: IpsatParams = MZSAT,
                 alphas: AlphaSConfig = IPSAT_ALPHAS, nb: int = 64) -> None:
        self.params = params
        self.alphas = alphas
        self.bmax = 10.0 * math.sqrt(params.B_p)
        self._b_nodes, self._b_weights = np.polynomial.legendre.leggauss(int(nb))

    @property
    def saturation(self) -> bool:
        return self.params.saturation

    def mu_sqr(self, r: float) -> float:
        p = self.params
        return p.mu0 * p.mu0 + p.C / (r * r)

    def xg(self, x: float) -> float:
        p = self.params
        return p.A_g * x ** (-p.lambda_g) * (1.0 - x) ** 5.6

    def proton_thickness(self, b: np.ndarray | float) -> np.ndarray | float:
        Bp = self.params.B_p
        return np.exp(-np.square(b) / (2.0 * Bp)) / (2.0 * math.pi * Bp)

    def _omega_over_tp(self, r: float, x: float) -> float:
        if not 0.0 < x < 1.0:
            raise ValueError(f"[IPsat] x={x} outside (0,1)")
        musqr = self.mu_sqr(r)
        return (math.pi ** 2 * r * r / (2.0 * NC)
                * alpha_s(math.sqrt(musqr), self.alphas) * self.xg(x))

    def N(self, r: float, b: np.ndarray | float, x: float) -> np.ndarray | float:
        if r <= 0.0:
            return np.zeros_like(np.asarray(b, float))[()]
        omega = self._omega_over_tp(r, x) * self.proton_thickness(b)
        if self.saturation:
            return -np.expm1(-omega)
        return omega

    def N_bint(self, r: float, x: float) -> float:
        """∫ d²b N(r, b, x); the dipole-proton cross section is 2 N_bint."""
        if r <= 0.0:
            return 0.0
        half = 0.5 * self.bmax
        b = half * (self._b_nodes + 1.0)
        return float(2.0 * math.pi * half * np.sum(self._b_weights * b * self.N(r, b, x)))

    def info_str(self) -> str:
        p = self.params
        kind = "saturated" if p.saturation else "non-saturated"
        return (f"IPsat ({kind}), C={p.C}, mu0={p.mu0:.4f}, lambda_g={p.lambda_g}, "
                f"A_g={p.A_g}, B_p={p.B_p}")
