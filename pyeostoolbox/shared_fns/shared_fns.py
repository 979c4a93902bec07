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
from typing import Callable, Tuple

import numpy as np

from pyeostoolbox.classes import ConvergenceReport, SolverOptions

logger = logging.getLogger(__name__)

def convert_to_numpy(input_data):
    # Convert input data to a numpy array ensuring it is always sizeable
    if isinstance(input_data, np.ndarray):
        # Input is already a numpy array, just return it
        return input_data
    else:
        # Convert list, tuple, scalar, or other types to numpy array
        # Ensuring even scalars become arrays with one element
        return np.atleast_1d(input_data)

def resolve_options(options, defaults, **explicit):
    """ Merge solver settings. Explicit (non-None) keyword arguments beat the options object, which beats defaults
        options: SolverOptions or None
        defaults: dict of default values keyed by SolverOptions field name
    """
    if options is not None and not isinstance(options, SolverOptions):
        raise ValueError(f"options must be a SolverOptions instance, got {type(options).__name__}")
    resolved = dict(defaults)
    for key in resolved:
        if options is not None and getattr(options, key) is not None:
            resolved[key] = getattr(options, key)
        if explicit.get(key) is not None:
            resolved[key] = explicit[key]
    return resolved

def newton_solve(
    f: Callable,
    jac: Callable,
    x0: np.ndarray,
    abstol: float,
    maxiters: int,
    criterion: str = 'residual',
) -> Tuple[np.ndarray, ConvergenceReport]:
    """ Full multivariate Newton iteration, x_{k+1} = x_k - J(x_k)^-1 F(x_k)
        Returns the last finite iterate and a ConvergenceReport. Never raises on non-convergence.
        criterion: 'residual' - converged when every |F_i| < abstol
                   'step'     - converged when max |dx_i| <= abstol
    """
    if criterion not in ('residual', 'step'):
        raise ValueError(f"Unknown convergence criterion: {criterion}. Use 'residual' or 'step'")

    x = np.array(x0, dtype=float)
    fx = np.asarray(f(x), dtype=float)
    iters = 0
    converged = False

    def residual_ok(fx):
        return criterion == 'residual' and np.all(np.abs(fx) < abstol)

    while iters < maxiters:
        if not np.all(np.isfinite(fx)):
            logger.warning("Non-finite residual at x = %s, stopping Newton iteration", x)
            break
        if residual_ok(fx):
            converged = True
            break
        try:
            dx = -np.linalg.solve(np.asarray(jac(x), dtype=float), fx)
        except np.linalg.LinAlgError:
            logger.warning("Singular Jacobian at x = %s, stopping Newton iteration", x)
            break
        if not np.all(np.isfinite(dx)):
            logger.warning("Non-finite Newton step at x = %s, stopping Newton iteration", x)
            break

        x_new = x + dx
        fx_new = np.asarray(f(x_new), dtype=float)
        iters += 1
        if not np.all(np.isfinite(fx_new)):
            logger.warning("Newton step left the domain of the residual at iteration %d", iters)
            break
        x, fx = x_new, fx_new
        logger.debug("Newton iteration %d: x = %s, |F| = %.3e, |dx| = %.3e", iters, x, np.max(np.abs(fx)), np.max(np.abs(dx)))

        if criterion == 'step' and np.max(np.abs(dx)) <= abstol:
            converged = True
            break
    else:
        converged = bool(np.all(np.isfinite(fx)) and residual_ok(fx))

    return x, ConvergenceReport(iterations=iters, residual=fx, converged=converged)
