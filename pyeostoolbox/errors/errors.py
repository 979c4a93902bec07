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

class DomainError(ValueError):
    """ An input lies outside the validity range of a correlation. Fatal, never retried internally """


class TrivialSolution(ValueError):
    """ A saturation solve returned coincident liquid and vapour volumes """
    def __init__(self, message, T=None, V_liq=None, V_vap=None):
        super().__init__(message)
        self.T = T
        self.V_liq = V_liq
        self.V_vap = V_vap


class CriticalPointNotFound(RuntimeError):
    """ Newton iteration for the critical point failed. Carries the guess, last iterate and residual """
    def __init__(self, message, x0=None, x=None, residual=None, iterations=None):
        super().__init__(message)
        self.x0 = x0
        self.x = x
        self.residual = residual
        self.iterations = iterations


class ConvergenceWarning(UserWarning):
    """ Iteration budget exhausted. The best available iterate is still returned """
    def __init__(self, message, iterations=None, residual=None):
        super().__init__(message)
        self.iterations = iterations
        self.residual = residual


class DegenerateRoots(UserWarning):
    """ Cubic volume roots are coincident, so no physical root can be singled out """
    def __init__(self, message, roots=None):
        super().__init__(message)
        self.roots = roots
