"""
QCD running coupling α_s(μ) for the dipole cross sections.

- One- to four-loop MS-bar β-function; 'asym' evaluates the asymptotic
  series in t = 2 ln(μ/Λ), 'ode' integrates da/d(ln μ) from α_s(muRef) = alphaRef.
- With freeze=True the result is capped to [0, alpha_max]; near the Landau
  pole the perturbative value blows up and this keeps it finite.
- IPSAT_ALPHAS is the one-loop, Nf=4, Λ=0.156 GeV setup used by the IPsat fits.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal

# ------------------------ Beta-function coefficients -------------------------

def _beta_coeffs(Nf: float, loops: int) -> Dict[str, float]:
    """{b0,b1,b2,b3}, coefficients above the loop order set to zero."""
    zeta3 = 1.2020569031595942
    b = dict(
        b0=11.0 - 2.0*Nf/3.0,
        b1=102.0 - 38.0*Nf/3.0,
        b2=2857.0/2.0 - (5033.0/18.0)*Nf + (325.0/54.0)*Nf*Nf,
        b3=((149753.0/6.0 + 3564.0*zeta3)
            - (1078361.0/162.0 + 6508.0*zeta3/27.0)*Nf
            + (50065.0/162.0 + 6472.0*zeta3/81.0)*Nf*Nf
            + 1093.0*Nf*Nf*Nf/729.0),
    )
    for k in range(max(loops, 1), 4):
        b[f"b{k}"] = 0.0
    return b

# ------------------------ Config dataclass -----------------------------------

@dataclass(frozen=True)
class AlphaSConfig:
    """
    Parameters
    ----------
    Nf : float
        Number of active flavours.
    loops : int
        Loop order (1..4).
    muRef, alphaRef : float
        Boundary condition α_s(muRef) = alphaRef for method='ode'.
    LambdaQCD : float
        Λ_QCD in GeV for method='asym'.
    freeze : bool
        Cap the result to [0, alpha_max].
    """
    Nf: float = 3.0
    loops: int = 4
    muRef: float = 1.5
    alphaRef: float = 0.326
    LambdaQCD: float = 0.308
    method: Literal["ode", "asym"] = "ode"
    freeze: bool = True
    alpha_max: float = 1.0

IPSAT_ALPHAS = AlphaSConfig(Nf=4.0, loops=1, LambdaQCD=0.156, method="asym")

def _cap(val: float, cfg: AlphaSConfig) -> float:
    return min(max(val, 0.0), cfg.alpha_max) if cfg.freeze else val

# ------------------------ Asymptotic series ----------------------------------

def _asym_series(mu: float, cfg: AlphaSConfig) -> float:
    b = _beta_coeffs(cfg.Nf, cfg.loops)
    b0, b1, b2, b3 = b["b0"], b["b1"], b["b2"], b["b3"]

    mu = max(mu, 1.01*cfg.LambdaQCD)
    t = 2.0*math.log(mu/cfg.LambdaQCD)
    a1 = 1.0/(b0*t)
    if cfg.loops == 1:
        return _cap(4.0*math.pi*a1, cfg)

    L = math.log(t)
    b02 = b0*b0
    res = 1.0 - (b1/b02)*L/t
    if cfg.loops >= 3:
        res += ((b1*b1)*(L*L - L - 1.0) + b0*b2)/(b02*b02*t*t)
    if cfg.loops >= 4:
        res += ((b1*b1*b1)*(-2*L**3 + 5*L*L + 4*L - 1.0)
                - 6*b0*b1*b2*L + b02*b3)/(2.0*b02*b02*b02*t**3)
    return _cap(4.0*math.pi*a1*res, cfg)

# ------------------------ ODE in ln μ ----------------------------------------

def _rhs_a(a: float, b0: float, b1: float, b2: float, b3: float) -> float:
    # da/d(ln μ) = -2 [ b0 a^2 + b1 a^3 + b2 a^4 + b3 a^5 ],  a = α_s/(4π)
    a2 = a*a
    return -2.0*a2*(b0 + a*(b1 + a*(b2 + a*b3)))

def _ode_solve(mu: float, cfg: AlphaSConfig) -> float:
    b = _beta_coeffs(cfg.Nf, cfg.loops)
    coeffs = (b["b0"], b["b1"], b["b2"], b["b3"])

    mu = max(float(mu), 1.01*cfg.LambdaQCD)
    a = cfg.alphaRef/(4.0*math.pi)
    ln0, ln1 = math.log(cfg.muRef), math.log(mu)
    if abs(ln1 - ln0) < 1e-15:
        return _cap(4.0*math.pi*a, cfg)

    nstep = max(30, int(300*abs(ln1 - ln0)))
    h = (ln1 - ln0)/nstep
    for i in range(nstep):
        k1 = _rhs_a(a, *coeffs)
        k2 = _rhs_a(a + 0.5*h*k1, *coeffs)
        k3 = _rhs_a(a + 0.5*h*k2, *coeffs)
        k4 = _rhs_a(a + h*k3, *coeffs)
        a += (h/6.0)*(k1 + 2*k2 + 2*k3 + k4)
        if not math.isfinite(a) or a < 0.0:
            # ran into the pole, use the series at the current scale
            return _asym_series(math.exp(ln0 + (i + 1)*h), cfg)
    return _cap(4.0*math.pi*a, cfg)

# ------------------------ Public API -----------------------------------------

@lru_cache(maxsize=8192)
def alpha_s(mu: float, cfg: AlphaSConfig = IPSAT_ALPHAS) -> float:
    """α_s at the scale μ [GeV]."""
    if cfg.method == "asym":
        return _asym_series(float(mu), cfg)
    return _ode_solve(float(mu), cfg)
