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

import numpy as np

# Constants
R = 8.31446261815324  # Universal gas constant, J/(mol·K)
N_A = 6.02214076e23  # Avogadro's number, 1/mol
k_B = R / N_A  # Boltzmann constant, J/K
ANGSTROM = 1e-10  # m

EPS = np.finfo(float).eps

# Cubic root handling
IMAG_TOL = 1e-10  # Roots with |Im(V)| above IMAG_TOL * |V| are complex, and discarded
DEGEN_RTOL = 1e-8  # Roots closer than this (relative) are considered coincident
MU_RTOL = 1e-10  # Chemical potentials within MU_RTOL * RT are indistinguishable

# Packing fraction multipliers for liquid volume guesses
LIQ_PACKING_FACTOR = 1.25  # Ordinary volume solving
CRIT_PACKING_FACTOR = 1 / 0.30  # Critical point solving, applied on top of LIQ_PACKING_FACTOR
CRIT_TEMP_FACTOR = 2.0  # T0 = CRIT_TEMP_FACTOR * T_scale

# vdW corresponding states saturation guess margins
VDW_LIQ_MARGIN = 0.5
VDW_VAP_MARGIN = 2.0
VDW_TR_SPLIT = 0.64  # Reduced temperature at which vapour correlation switches branch

# Solver defaults
VOLUME_ABSTOL = 1e-9  # Relative step in volume
VOLUME_MAXITERS = 100
SAT_ABSTOL = 1e-10  # Scaled residual components
SAT_MAXITERS = 100
CRIT_XTOL = 1e-9  # Newton step size, dimensionless
CRIT_MAXITERS = 100
TRIVIAL_RTOL = 1e-3  # |V_liq - V_vap| / V_vap below which a saturation point is trivial
