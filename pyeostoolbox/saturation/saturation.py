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
import pandas as pd
import jax
import jax.numpy as jnp

from pyeostoolbox.constants import R, SAT_ABSTOL, SAT_MAXITERS, TRIVIAL_RTOL
from pyeostoolbox.classes import SaturationPoint
from pyeostoolbox.errors import DomainError, ConvergenceWarning, TrivialSolution, CriticalPointNotFound
from pyeostoolbox.guesses import pressure_scale, vdw_saturation_guess, critical_constants
from pyeostoolbox.shared_fns import convert_to_numpy, resolve_options, newton_solve

logger = logging.getLogger(__name__)

def saturation_objective(eos, T: float):
    """ Returns the scaled saturation residual F(ln V) = [(p_liq - p_vap)/p_scale, (mu_liq - mu_vap)/RT]
        as a jax-traceable function of lnV = [ln V_liq, ln V_vap]
    """
    ps = pressure_scale(eos)
    RT = R * T

    def F(lnV):
        Vl, Vv = jnp.exp(lnV[0]), jnp.exp(lnV[1])
        f1 = (eos.pressure(Vl, T) - eos.pressure(Vv, T)) / ps
        f2 = (eos.chemical_potential(Vl, T) - eos.chemical_potential(Vv, T)) / RT
        return jnp.stack([f1, f2])
    return F

def saturation_pressure(
    eos,
    T: float,
    V0=None,
    abstol: Optional[float] = None,
    maxiters: Optional[int] = None,
    options=None,
) -> SaturationPoint:
    """ Saturation pressure and coexisting volumes of a pure fluid at temperature T.
        Newton's method in (ln V_liq, ln V_vap) on equal pressure and chemical potential, with an
        automatic differentiation Jacobian. Unpacks as (psat, V_liq, V_vap).
        Returns the last iterate with a ConvergenceWarning if the budget is exhausted or the iteration breaks down.
        Above the critical temperature the solve fails or collapses onto V_liq ~ V_vap; check with
        SaturationPoint.is_trivial() or check_nontrivial().
        T: Temperature (K)
        V0: Initial [V_liq, V_vap] (m3/mol). Defaults to the van der Waals corresponding states guess
        abstol: Tolerance on every scaled residual component. Defaults to 1e-10
        maxiters: Iteration budget. Defaults to 100
        options: SolverOptions. Explicit keyword arguments take precedence
    """
    if T <= 0:
        raise DomainError(f"Temperature must be positive, got T = {T} K")
    opts = resolve_options(options, {'abstol': SAT_ABSTOL, 'maxiters': SAT_MAXITERS, 'x0': None}, abstol=abstol, maxiters=maxiters, x0=V0)
    V0 = vdw_saturation_guess(eos, T) if opts['x0'] is None else np.asarray(opts['x0'], dtype=float)
    if V0.shape != (2,) or np.any(V0 <= 0):
        raise DomainError(f"Initial saturation volumes must be two positive values, got {V0}")

    F = saturation_objective(eos, T)
    J = jax.jacfwd(F)
    x, report = newton_solve(lambda x: np.asarray(F(jnp.asarray(x))), lambda x: np.asarray(J(jnp.asarray(x))),
                             np.log(V0), opts['abstol'], opts['maxiters'], criterion='residual')
    Vl, Vv = np.exp(x)
    psat = float(eos.pressure(Vl, T))

    if not report.converged:
        msg = f"Saturation solver did not converge in {report.iterations} iterations at T = {T} K, F = {report.residual}"
        logger.warning(msg)
        warnings.warn(ConvergenceWarning(msg, iterations=report.iterations, residual=report.residual), stacklevel=2)
    else:
        logger.debug("Saturation point at T = %s K: psat = %.6e Pa, V_liq = %.6e, V_vap = %.6e in %d iterations", T, psat, Vl, Vv, report.iterations)
    return SaturationPoint(T=float(T), p=psat, V_liq=float(Vl), V_vap=float(Vv), report=report)

def check_nontrivial(point: SaturationPoint, rtol: float = TRIVIAL_RTOL) -> SaturationPoint:
    """ Raises TrivialSolution if the liquid and vapour volumes of a saturation point coincide, else returns the point """
    if point.is_trivial(rtol):
        raise TrivialSolution(f"Trivial saturation solution at T = {point.T} K: V_liq = {point.V_liq:.6e}, V_vap = {point.V_vap:.6e}, p = {point.p:.6e} Pa",
                              T=point.T, V_liq=point.V_liq, V_vap=point.V_vap)
    return point

def saturation_curve(
    eos,
    temperatures,
    V0=None,
    abstol: Optional[float] = None,
    maxiters: Optional[int] = None,
    options=None,
    rtol_trivial: float = TRIVIAL_RTOL,
) -> pd.DataFrame:
    """ Traces the saturation curve over an ordered sequence of temperatures.
        Each point is warm started from the previous converged, nontrivial point. Where there is none,
        or the warm started solve fails, the van der Waals corresponding states guess is used instead.
        Points run in sequence, in the order given; a failed point yields converged=False and leaves no warm start.
        psat, V_liq and V_vap are NaN on rows that did not converge. Temperatures above Tc, and models whose
        critical point cannot be found, give such rows rather than raising.
        temperatures: Single float, list or array of temperatures (K)
        V0: Optional [V_liq, V_vap] guess for the first temperature
        Returns DataFrame with columns T, psat, V_liq, V_vap, converged, trivial, iterations, warm_start
    """
    temps = convert_to_numpy(temperatures).astype(float)
    previous = None if V0 is None else np.asarray(V0, dtype=float)
    crit, crit_error = None, None
    rows = []

    def solve(T, guess):
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', ConvergenceWarning)
            return saturation_pressure(eos, T, V0=guess, abstol=abstol, maxiters=maxiters, options=options)

    def acceptable(point):
        return point.report.converged and not point.is_trivial(rtol_trivial)

    for T in temps:
        point, warm = None, previous is not None
        if warm:
            point = solve(T, previous)
            if not acceptable(point):
                logger.warning("Warm started saturation solve failed at T = %s K, falling back to vdW guess", T)
                warm = False
        if not warm:
            try:
                if crit_error is not None:
                    raise crit_error
                if crit is None:
                    try:
                        crit = critical_constants(eos)
                    except CriticalPointNotFound as err:
                        crit_error = err
                        raise
                point = solve(T, vdw_saturation_guess(eos, T, crit=crit))
            except (DomainError, CriticalPointNotFound) as err:
                logger.warning("No saturation point at T = %s K: %s", T, err)
                point = None

        if point is None:
            rows.append({'T': T, 'psat': np.nan, 'V_liq': np.nan, 'V_vap': np.nan, 'converged': False,
                         'trivial': False, 'iterations': 0, 'warm_start': False})
            previous = None
            continue

        converged = point.report.converged
        trivial = converged and point.is_trivial(rtol_trivial)
        if converged:
            psat, Vl, Vv = point
        else:
            psat, Vl, Vv = np.nan, np.nan, np.nan
        rows.append({'T': T, 'psat': psat, 'V_liq': Vl, 'V_vap': Vv, 'converged': converged,
                     'trivial': trivial, 'iterations': point.report.iterations, 'warm_start': warm})
        previous = np.array([point.V_liq, point.V_vap]) if acceptable(point) else None

    return pd.DataFrame(rows, columns=['T', 'psat', 'V_liq', 'V_vap', 'converged', 'trivial', 'iterations', 'warm_start'])
