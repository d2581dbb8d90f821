# -*- coding: utf-8 -*-
"""
dipole.py
=========
Shared dipole-amplitude contract and target selection.

Every target model answers N(xpom, q1, q2), the scattering amplitude of a
colour-singlet quark (at q1) / antiquark (at q2) pair, with transverse
positions in GeV^-1.

Public API
----------
from dipole_code.dipole import (
    DipoleAmplitude, make_dipole, ConfigurationError, make_logger, log,
)
"""
from __future__ import annotations

import logging
from typing import Literal, Sequence

import numpy as np

# ----------------------- constants -----------------------
NC = 3
FMGEV = 5.068  # 1 fm = 5.068 GeV^-1

DipoleKind = Literal["ipglasma", "smooth_ws_nuke"]


# ----------------------- logging -----------------------
def make_logger(name: str = "dipole", level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level)
        h = logging.StreamHandler()
        h.setLevel(level)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)
    else:
        logger.setLevel(level)
        for h in logger.handlers:
            h.setLevel(level)
    return logger
log = make_logger()


# ----------------------- errors -----------------------
class ConfigurationError(ValueError):
    """Unsupported model configuration, detected before any amplitude is returned."""


# ----------------------- contract -----------------------
class DipoleAmplitude:
    """Base class of all target models."""

    def amplitude(self, xpom: float, q1: Sequence[float], q2: Sequence[float]) -> float:
        raise NotImplementedError

    def amplitudes(self, xpom: float, q1s: np.ndarray, q2s: np.ndarray) -> np.ndarray:
        """Batch form over (N, 2) position arrays."""
        q1s = np.asarray(q1s, float).reshape(-1, 2)
        q2s = np.asarray(q2s, float).reshape(-1, 2)
        if q1s.shape != q2s.shape:
            raise ValueError(f"q1s.shape={q1s.shape} and q2s.shape={q2s.shape} mismatch")
        return np.array([self.amplitude(xpom, a, b) for a, b in zip(q1s, q2s)], dtype=float)

    def initialize_target(self) -> None:
        pass

    def info_str(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.info_str()


def make_dipole(kind: DipoleKind, **kwargs) -> DipoleAmplitude:
    """
    Build one of the supported target models.

    kind="ipglasma"       : IPGlasma(file=..., ...)
    kind="smooth_ws_nuke" : SmoothWSNucleus(A=..., ipsat=..., ...)
    """
    # imported here, the model modules import this one
    if kind == "ipglasma":
        from dipole_code.ipglasma import IPGlasma
        return IPGlasma(**kwargs)
    if kind == "smooth_ws_nuke":
        from dipole_code.glauber import SmoothWSNucleus
        return SmoothWSNucleus(**kwargs)
    log.error(f"Unknown dipole {kind!r}")
    raise ConfigurationError(f"[Dipole] Unknown dipole {kind!r}")
