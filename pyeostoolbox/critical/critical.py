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
from typing import Optional

import numpy as np
import jax
import jax.numpy as jnp

from pyeostoolbox.constants import CRIT_XTOL, CRIT_MAXITERS
from pyeostoolbox.classes import CriticalPoint
from pyeostoolbox.errors import CriticalPointNotFound
from pyeostoolbox.guesses import pressure_scale, temperature_scale, critical_point_guess
from pyeostoolbox.shared_fns import resolve_options, newton_solve

logger = logging.getLogger(__name__)

def critical_objective(eos):
    """ Scaled critical conditions [dp/dV, d2p/dV2] / p_scale as a jax-traceable function of
        x = [log10(V), T/T_scale]
    """
    ps = pressure_scale(eos)
    Ts = temperature_scale(eos)

    def F(x):
        V = 10.0 ** x[0]
        T = Ts * x[1]
        return jnp.stack([eos.pressure_derivative(V, T, 1) / ps, eos.pressure_derivative(V, T, 2) / ps])
    return F

def critical_point(
    eos,
    x0=None,
    abstol: Optional[float] = None,
    maxiters: Optional[int] = None,
    options=None,
    check_stability: bool = True,
) -> CriticalPoint:
    """ Critical point of a pure fluid, solved directly without a bracket.
        Newton's method on dp/dV = d2p/dV2 = 0 in x = [log10(V), T/T_scale], with derivatives and Jacobian
        from nested automatic differentiation. Converged when the largest Newton step is below abstol.
        Unpacks as (pc, Tc, Vc).
        Raises CriticalPointNotFound with the guess, last iterate and residual if Newton fails,
        or if the converged point is unphysical.
        x0: Initial [log10(V), T/T_scale]. Defaults to the packing fraction guess with T0 = 2 * T_scale
        abstol: Step tolerance. Defaults to 1e-9
        maxiters: Iteration budget. Defaults to 100
        options: SolverOptions. Explicit keyword arguments take precedence
        check_stability: Evaluate d3p/dV3 < 0 at the solution and store it in CriticalPoint.stable
    """
    opts = resolve_options(options, {'abstol': CRIT_XTOL, 'maxiters': CRIT_MAXITERS, 'x0': None}, abstol=abstol, maxiters=maxiters, x0=x0)
    x_init = critical_point_guess(eos) if opts['x0'] is None else np.asarray(opts['x0'], dtype=float)
    if x_init.shape != (2,):
        raise ValueError(f"Critical point guess must be [log10(V), T/T_scale], got {x_init}")

    F = critical_objective(eos)
    J = jax.jacfwd(F)
    x, report = newton_solve(lambda x: np.asarray(F(jnp.asarray(x))), lambda x: np.asarray(J(jnp.asarray(x))),
                             x_init, opts['abstol'], opts['maxiters'], criterion='step')

    if not report.converged:
        raise CriticalPointNotFound(f"Critical point solver did not converge in {report.iterations} iterations from x0 = {x_init}. "
                                    f"Last iterate x = {x}, residual = {report.residual}",
                                    x0=x_init, x=x, residual=report.residual, iterations=report.iterations)

    Vc = float(10.0 ** x[0])
    Tc = float(temperature_scale(eos) * x[1])
    pc = float(eos.pressure(Vc, Tc))
    if not (np.isfinite(pc) and pc > 0 and Tc > 0 and np.isfinite(Vc)):
        raise CriticalPointNotFound(f"Critical point solver converged to an unphysical point Tc = {Tc} K, Vc = {Vc} m3/mol, pc = {pc} Pa",
                                    x0=x_init, x=x, residual=report.residual, iterations=report.iterations)

    stable = None
    if check_stability:
        stable = bool(eos.pressure_derivative(Vc, Tc, 3) < 0)
        if not stable:
            logger.warning("d3p/dV3 >= 0 at Tc = %s K, Vc = %s m3/mol. Point is not a stable critical point", Tc, Vc)

    logger.debug("Critical point: Tc = %.6f K, pc = %.6e Pa, Vc = %.6e m3/mol in %d iterations", Tc, pc, Vc, report.iterations)
    return CriticalPoint(p=pc, T=Tc, V=Vc, report=report, stable=stable)
