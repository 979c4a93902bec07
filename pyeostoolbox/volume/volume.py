#!/usr/bin/python3
# -*- coding: utf-8 -*-

"""
    pyEoSToolbox - Equation of State Equilibrium Solvers
              Copyright (C) 2022, Mark Burgoyne

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    The GNU General Public License can be found in the LICENSE directory,
    and at  <https://www.gnu.org/licenses/>.

          Contact author at mark.w.burgoyne@gmail.com
"""

import logging
import warnings
from typing import Optional

import numpy as np
import jax
from scipy.optimize import brentq

from pyeostoolbox.constants import R, EPS, IMAG_TOL, DEGEN_RTOL, MU_RTOL, VOLUME_ABSTOL, VOLUME_MAXITERS
from pyeostoolbox.classes import ConvergenceReport, VolumeSolution, VolumeRootSet
from pyeostoolbox.errors import DomainError, ConvergenceWarning, DegenerateRoots
from pyeostoolbox.models import CubicParameters
from pyeostoolbox.guesses import volume_guess, liquid_volume_guess
from pyeostoolbox.shared_fns import resolve_options
from pyeostoolbox.validate import validate_methods

logger = logging.getLogger(__name__)

def _check_state(p, T):
    if not (p > 0 and T > 0):
        raise DomainError(f"Pressure and temperature must be positive, got p = {p} Pa, T = {T} K")

# Analytic solution for all three roots of a cubic polynomial
# Z**3 + c2*Z**2 + c1*Z + c0 = 0, returned as complex numbers
def cubic_roots(c2: float, c1: float, c0: float) -> np.ndarray:
    p = (3 * c1 - c2**2) / 3
    q = (2 * c2**3 - 9 * c2 * c1 + 27 * c0) / 27
    root_diagnostic = q**2 / 4 + p**3 / 27

    if root_diagnostic < 0:  # Three distinct real roots, trigonometric form
        m = 2 * np.sqrt(-p / 3)
        qpm = np.clip(3 * q / p / m, -1.0, 1.0)
        theta1 = np.arccos(qpm) / 3
        ts = np.array([m * np.cos(theta1), m * np.cos(theta1 + 4 * np.pi / 3), m * np.cos(theta1 + 2 * np.pi / 3)], dtype=complex)
    else:  # One real root and a complex conjugate pair (equal and real when the diagnostic is zero)
        P = np.cbrt(-q / 2 + np.sqrt(root_diagnostic))
        Q = np.cbrt(-q / 2 - np.sqrt(root_diagnostic))
        re, im = -(P + Q) / 2, np.sqrt(3) / 2 * (P - Q)
        ts = np.array([P + Q, complex(re, im), complex(re, -im)])
    Zs = ts - c2 / 3

    # One Halley step on the real roots to recover accuracy lost near a zero discriminant
    for k, Z in enumerate(Zs):
        if Z.imag != 0:
            continue
        Z = Z.real
        F = Z**3 + c2 * Z**2 + c1 * Z + c0
        Fp = 3 * Z**2 + 2 * c2 * Z + c1
        Fpp = 6 * Z + 2 * c2
        if abs(Fp) > 1e-30:
            DZ = F / Fp
            denom = 1 - 0.5 * DZ * Fpp / Fp
            if abs(denom) > 1e-15:
                DZ = DZ / denom
            Zs[k] = Z - DZ
    return Zs

def cubic_volume_roots(eos, p: float, T: float) -> VolumeRootSet:
    """ All three volume roots of a cubic EoS at (p, T), via the compressibility factor cubic
        Z**3 + [(d1+d2-1)B - 1]Z**2 + [A + d1*d2*B**2 - (d1+d2)B(B+1)]Z - [AB + d1*d2*B**2(B+1)] = 0
        which reduces to Z**3 - (1+B)Z**2 + AZ - AB = 0 for van der Waals.
        Complex roots and real roots at or below the co-volume are excluded from real_roots.
    """
    if not isinstance(eos, CubicParameters):
        raise ValueError(f"{type(eos).__name__} does not expose cubic (a, b) parameters")
    _check_state(p, T)
    a, b = eos.cubic_ab(T)
    a, b = float(a), float(b)
    d1, d2 = eos.delta1, eos.delta2
    RT = R * T
    A = a * p / RT**2
    B = b * p / RT

    c2 = (d1 + d2 - 1) * B - 1
    c1 = A + d1 * d2 * B**2 - (d1 + d2) * B * (B + 1)
    c0 = -(A * B + d1 * d2 * B**2 * (B + 1))

    Vs = cubic_roots(c2, c1, c0) * RT / p
    is_real = np.abs(Vs.imag) <= IMAG_TOL * np.abs(Vs)
    real = np.sort(Vs.real[is_real & (Vs.real > b)])
    logger.debug("Cubic volume roots at p = %s Pa, T = %s K: %s", p, T, Vs)
    return VolumeRootSet(roots=Vs, real_roots=real)

def cubic_volume(eos, p: float, T: float, all_roots: bool = False):
    """ Returns the physically stable volume root of a cubic EoS at (p, T) as a VolumeSolution.
        With several real roots the one with the lowest chemical potential is taken. If the two lowest
        chemical potentials are indistinguishable (saturated state), the solution is flagged ambiguous.
        Coincident roots raise a DegenerateRoots warning and their mean is returned.
        all_roots: If True, return the VolumeRootSet (raw complex roots, real roots and their chemical potentials)
    """
    rootset = cubic_volume_roots(eos, p, T)
    real = rootset.real_roots
    if len(real) == 0:
        raise DomainError(f"No real volume root above the co-volume at p = {p} Pa, T = {T} K. Roots: {rootset.roots}")

    if all_roots:
        rootset.chemical_potentials = np.array([float(eos.chemical_potential(V, T)) for V in real])
        return rootset

    def solution(V, ambiguous=False):
        residual = float(eos.pressure(V, T)) / p - 1
        return VolumeSolution(V=float(V), report=ConvergenceReport(iterations=0, residual=residual, converged=True), ambiguous=ambiguous, roots=real)

    if len(real) == 1:
        return solution(real[0])

    if real[-1] - real[0] <= DEGEN_RTOL * real[-1]:
        warnings.warn(DegenerateRoots(f"Coincident volume roots at p = {p} Pa, T = {T} K: {real}", roots=real), stacklevel=2)
        return solution(np.mean(real))

    mus = np.array([float(eos.chemical_potential(V, T)) for V in real])
    order = np.argsort(mus)
    ambiguous = bool(abs(mus[order[1]] - mus[order[0]]) <= MU_RTOL * R * T and abs(real[order[1]] - real[order[0]]) > DEGEN_RTOL * real[-1])
    if ambiguous:
        logger.info("Volume roots %.6e and %.6e have equal chemical potential at p = %s Pa, T = %s K", real[order[0]], real[order[1]], p, T)
    return solution(real[order[0]], ambiguous)

def volume_solve(
    eos,
    p: float,
    T: float,
    phase: str = 'liquid',
    V0: Optional[float] = None,
    abstol: Optional[float] = None,
    maxiters: Optional[int] = None,
    options=None,
) -> VolumeSolution:
    """ Volume root of any Helmholtz-explicit EoS at (p, T), found by successive substitution in log-volume
        ln(V_i+1) = ln(V_i) + beta(V_i) * (p(V_i) - p)
        which is a Newton step on p(V) - p = 0 in ln(V) using the isothermal compressibility as the sensitivity.
        The root reached is chosen by the initial guess. Returns the last iterate with a ConvergenceWarning
        if the iteration budget is exhausted.
        p: Pressure (Pa)
        T: Temperature (K)
        phase: 'liquid' or 'vapour', used only to select the initial guess
        V0: Explicit initial volume (m3/mol), overrides the phase guess
        abstol: Convergence tolerance on |V_i+1 - V_i| / V_i+1. Defaults to 1e-9
        maxiters: Iteration budget. Defaults to 100
        options: SolverOptions. Explicit keyword arguments take precedence
    """
    _check_state(p, T)
    opts = resolve_options(options, {'abstol': VOLUME_ABSTOL, 'maxiters': VOLUME_MAXITERS, 'x0': None}, abstol=abstol, maxiters=maxiters, x0=V0)
    phase = validate_methods(['phase'], [phase])
    V = float(opts['x0']) if opts['x0'] is not None else volume_guess(eos, p, T, phase)
    if V <= 0:
        raise DomainError(f"Initial volume must be positive, got V0 = {V}")

    lnV = np.log(V)
    iters, converged = 0, False
    while iters < opts['maxiters']:
        step = float(eos.isothermal_compressibility(V, T)) * (float(eos.pressure(V, T)) - p)
        lnV_new = lnV + step
        iters += 1
        if not np.isfinite(lnV_new):
            logger.warning("Volume iteration left the domain of the EoS at iteration %d, last V = %.6e", iters, V)
            break
        V_old, V, lnV = V, np.exp(lnV_new), lnV_new
        logger.debug("Volume iteration %d: V = %.10e", iters, V)
        if abs(V - V_old) <= opts['abstol'] * V:
            converged = True
            break

    residual = float(eos.pressure(V, T)) / p - 1
    report = ConvergenceReport(iterations=iters, residual=residual, converged=converged)
    if not converged:
        msg = f"Volume iteration failed to converge in {iters} iterations at p = {p} Pa, T = {T} K (V = {V:.6e}, relative pressure residual {residual:.3e})"
        logger.warning(msg)
        warnings.warn(ConvergenceWarning(msg, iterations=iters, residual=residual), stacklevel=2)
    return VolumeSolution(V=float(V), report=report)

def stable_volume(eos, p: float, T: float, **kwargs) -> VolumeSolution:
    """ Volume at (p, T) when the phase is not known beforehand.
        Solves from both liquid and vapour guesses and keeps the root with the lower chemical potential,
        preferring converged solutions. Keyword arguments are passed to volume_solve
    """
    candidates = [volume_solve(eos, p, T, phase=ph, **kwargs) for ph in ('liquid', 'vapour')]
    converged = [c for c in candidates if c.report.converged] or candidates
    mus = [float(eos.chemical_potential(c.V, T)) for c in converged]
    best = converged[int(np.argmin(mus))]
    if len(converged) == 2:
        roots = np.array(sorted(c.V for c in converged))
        distinct = roots[1] - roots[0] > DEGEN_RTOL * roots[1]
        best.ambiguous = bool(distinct and abs(mus[0] - mus[1]) <= MU_RTOL * R * T)
        best.roots = roots
    return best

def volume_roots(eos, p: float, T: float, npoints: int = 2000, V_min: Optional[float] = None, V_max: Optional[float] = None) -> np.ndarray:
    """ All real volume roots (ascending, m3/mol) of any EoS at (p, T), from a scan of p(V) - p on a
        logarithmic grid with each sign change refined by Brent's method. Helmholtz-explicit and SAFT models
        can have up to five.
        V_min: Lower end of the scan. Defaults to just above the close packed (or co-) volume
        V_max: Upper end of the scan. Defaults to 100 times the ideal gas volume
    """
    _check_state(p, T)
    if V_min is None:
        V_min = liquid_volume_guess(eos, factor=1.0) * (1 + 1e-6)
    if V_max is None:
        V_max = 100 * R * T / p
    grid = np.geomspace(V_min, V_max, npoints)
    f = np.asarray(jax.vmap(eos.pressure, in_axes=(0, None))(grid, T)) - p

    def residual(V):
        return float(eos.pressure(V, T)) - p

    roots = []
    for i in range(npoints - 1):
        if not (np.isfinite(f[i]) and np.isfinite(f[i + 1])):
            continue
        if f[i] == 0:
            roots.append(grid[i])
        elif f[i] * f[i + 1] < 0:
            roots.append(brentq(residual, grid[i], grid[i + 1], xtol=1e-14 * grid[i], rtol=4 * EPS))
    logger.debug("Scanned volume roots at p = %s Pa, T = %s K: %s", p, T, roots)
    return np.array(roots)
