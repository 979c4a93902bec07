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
from typing import Tuple, Optional

import numpy as np

from pyeostoolbox.constants import R, N_A, LIQ_PACKING_FACTOR, CRIT_PACKING_FACTOR, CRIT_TEMP_FACTOR, VDW_LIQ_MARGIN, VDW_VAP_MARGIN, VDW_TR_SPLIT
from pyeostoolbox.classes import phase
from pyeostoolbox.errors import DomainError
from pyeostoolbox.models import CubicParameters, SegmentParameters
from pyeostoolbox.validate import validate_methods

logger = logging.getLogger(__name__)

def pressure_scale(eos) -> float:
    """ Characteristic pressure (Pa). Critical pressure for cubics, R*epsilon/(N_A*sigma^3) for SAFT-like models """
    return float(eos.p_scale())

def temperature_scale(eos) -> float:
    """ Characteristic temperature (K). Critical temperature for cubics, epsilon/k for SAFT-like models """
    return float(eos.T_scale())

def critical_constants(eos) -> Tuple[float, float]:
    """ Returns (Tc, pc). Read directly from cubic models, otherwise solved for """
    if isinstance(eos, CubicParameters):
        return eos.Tc, eos.pc
    from pyeostoolbox.critical import critical_point
    crit = critical_point(eos)
    return crit.T, crit.p

def liquid_volume_guess(eos, factor: float = LIQ_PACKING_FACTOR) -> float:
    """ Liquid-like volume (m3/mol)
        Cubics: the co-volume b
        SAFT-like: factor * pi/6 * N_A * sigma^3 * segment, a multiple of the close packed volume
    """
    if isinstance(eos, CubicParameters):
        return float(eos.cubic_ab(eos.Tc)[1])
    if isinstance(eos, SegmentParameters):
        return factor * np.pi / 6 * N_A * eos.sigma**3 * eos.segment
    raise ValueError(f"No liquid volume guess available for {type(eos).__name__}. "
                     "It exposes neither cubic (a, b) nor segment (sigma, segment) parameters - supply V0 explicitly")

def vdw_saturation_guess(eos, T: float, crit: Optional[Tuple[float, float]] = None) -> np.ndarray:
    """ Approximate [V_liq, V_vap] (m3/mol) from the van der Waals saturation curve at the same reduced temperature.
        Margins of 0.5x (liquid) and 2x (vapour) keep the guesses outside the saturation envelope.
        Valid for 0 <= T/Tc <= 1 only.
        crit: Optional (Tc, pc) tuple. Obtained from critical_constants(eos) if not given
    """
    Tc, pc = crit if crit is not None else critical_constants(eos)
    Tr = T / Tc
    if not 0 <= Tr <= 1:
        raise DomainError(f"Invalid reduced temperature, Tr = {Tr:.6g} (T = {T} K, Tc = {Tc:.6g} K). Use a value between 0 and 1")

    x = 1 - Tr
    cL = 1 + 2 * x**0.5 + 2 / 5 * x - 13 / 25 * x**1.5 + 0.115 * x**2
    if Tr >= VDW_TR_SPLIT:
        cG = 2 * (1 + 2 / 5 * x + 0.161 * x**2) - cL
    else:
        cG = 2 * (3 / 2 - 4 / 9 * Tr - 0.15 * Tr**2) - cL

    b = R * Tc / (8 * pc)  # vdW co-volume
    return np.array([VDW_LIQ_MARGIN * 3 * b / cL, VDW_VAP_MARGIN * 3 * b / cG])

def vapour_volume_guess(eos, T: float, p: Optional[float] = None) -> float:
    """ Vapour-like volume (m3/mol)
        With pressure known: ideal gas, RT/p
        Temperature only: -2B(T) from the second virial coefficient, or the vdW saturation correlation where B(T) >= 0
    """
    if p is not None:
        if p <= 0:
            raise DomainError(f"Pressure must be positive for an ideal gas volume guess, got p = {p}")
        return R * T / p
    B = float(eos.second_virial(T))
    if B < 0:
        return -2 * B
    logger.debug("B(T) = %.4e >= 0 at T = %s K, using vdW saturation correlation for vapour guess", B, T)
    return float(vdw_saturation_guess(eos, T)[1])

def volume_guess(eos, p: float, T: float, phase_hint='liquid') -> float:
    """ Initial guess for a volume solve at (p, T), picked by phase hint ('liquid' or 'vapour') """
    phase_hint = validate_methods(['phase'], [phase_hint])
    if phase_hint == phase.LIQUID:
        if isinstance(eos, CubicParameters):
            return LIQ_PACKING_FACTOR * liquid_volume_guess(eos)  # p(V) is singular at V = b
        return liquid_volume_guess(eos)
    return vapour_volume_guess(eos, T, p)

def critical_point_guess(eos) -> np.ndarray:
    """ Dimensionless starting point [log10(V0), T0/T_scale] for the critical point solver.
        V0 is the liquid guess loosened by 1/0.30, T0 = 2 * T_scale
    """
    V0 = CRIT_PACKING_FACTOR * liquid_volume_guess(eos)
    return np.array([np.log10(V0), CRIT_TEMP_FACTOR])
