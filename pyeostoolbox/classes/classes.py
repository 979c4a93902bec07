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

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Union, List

import numpy as np
from tabulate import tabulate

from pyeostoolbox.constants import TRIVIAL_RTOL

class phase(Enum):  # Phase hint used to pick an initial volume guess
    LIQUID = 0
    VAPOUR = 1
    VAPOR = 1  # Alias

class_dic = {
    "phase": phase,
}


@dataclass
class SolverOptions:
    """ Optional solver configuration. Unset fields fall back to each solver's defaults
        abstol: Convergence threshold on residual or step norm
        maxiters: Iteration budget
        x0: Explicit initial guess, overriding the guess generator (V0 for volume solvers)
    """
    abstol: Optional[float] = None
    maxiters: Optional[int] = None
    x0: Optional[Union[float, List[float], np.ndarray]] = None


@dataclass
class ConvergenceReport:
    """Per-solve diagnostic."""
    iterations: int
    residual: Union[float, np.ndarray]
    converged: bool

    @property
    def residual_norm(self) -> float:
        return float(np.max(np.abs(np.atleast_1d(self.residual))))

    def __str__(self):
        table = [['Converged', self.converged], ['Iterations', self.iterations], ['Residual norm', f'{self.residual_norm:.3e}']]
        return tabulate(table)


@dataclass
class VolumeSolution:
    """ Volume root at a specified (p, T)
        ambiguous is set when two roots have chemical potentials that cannot be told apart (saturated state)
        roots holds the real candidate roots that were compared, where applicable
    """
    V: float
    report: ConvergenceReport
    ambiguous: bool = False
    roots: Optional[np.ndarray] = None


@dataclass
class VolumeRootSet:
    """ Candidate volume roots at a fixed (p, T). Transient, consumed by root selection """
    roots: np.ndarray                    # All roots, possibly complex
    real_roots: np.ndarray               # Real roots above the co-volume, ascending
    chemical_potentials: np.ndarray = field(default_factory=lambda: np.array([]))


@dataclass
class SaturationPoint:
    """ Coexisting liquid and vapour at temperature T. Unpacks as (p, V_liq, V_vap) """
    T: float
    p: float
    V_liq: float
    V_vap: float
    report: ConvergenceReport

    def __iter__(self):
        return iter((self.p, self.V_liq, self.V_vap))

    def is_trivial(self, rtol: float = TRIVIAL_RTOL) -> bool:
        """ True if the two phases have collapsed onto one volume """
        return abs(self.V_liq - self.V_vap) < rtol * max(abs(self.V_liq), abs(self.V_vap))


@dataclass
class CriticalPoint:
    """ Critical point. stable is the post-hoc d3p/dV3 < 0 check, None if not evaluated """
    p: float
    T: float
    V: float
    report: ConvergenceReport
    stable: Optional[bool] = None

    def __iter__(self):
        return iter((self.p, self.T, self.V))

    def summary(self) -> str:
        table = [['Tc (K)', self.T], ['pc (Pa)', self.p], ['Vc (m3/mol)', self.V],
                 ['Iterations', self.report.iterations], ['d3p/dV3 < 0', self.stable]]
        return tabulate(table, headers=['Property', 'Value'])
