"""
Dipole amplitudes for diffractive vector-meson production.

Target models
-------------
IPGlasma        : Wilson lines from an IP-Glasma lattice file
SmoothWSNucleus : smooth Woods–Saxon nucleus, optical Glauber limit

Both implement DipoleAmplitude.amplitude(xpom, q1, q2); pick one with
make_dipole("ipglasma", file=...) or make_dipole("smooth_ws_nuke", A=...).
"""
from dipole_code.dipole import (
    FMGEV, NC, ConfigurationError, DipoleAmplitude, log, make_dipole, make_logger,
)
from dipole_code.wilson_lines import (
    LatticeFileError, WilsonLineGrid, find_index, find_indices,
    hermitian_conjugate, load_wilson_lines, multiply, trace,
)
from dipole_code.ipglasma import IPGlasma, plot_scan, scan_lattice, write_scan
from dipole_code.coupling import IPSAT_ALPHAS, AlphaSConfig, alpha_s
from dipole_code.ipsat import MZNONSAT, MZSAT, IpsatAmplitude, IpsatParams, ipsat_version
from dipole_code.glauber import NuclearThickness, SmoothWSNucleus, WoodsSaxon

__all__ = [
    "FMGEV", "NC", "ConfigurationError", "DipoleAmplitude", "log", "make_dipole",
    "make_logger",
    "LatticeFileError", "WilsonLineGrid", "find_index", "find_indices",
    "hermitian_conjugate", "load_wilson_lines", "multiply", "trace",
    "IPGlasma", "plot_scan", "scan_lattice", "write_scan",
    "IPSAT_ALPHAS", "AlphaSConfig", "alpha_s",
    "MZNONSAT", "MZSAT", "IpsatAmplitude", "IpsatParams", "ipsat_version",
    "NuclearThickness", "SmoothWSNucleus", "WoodsSaxon",
]
