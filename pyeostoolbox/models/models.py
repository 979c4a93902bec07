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

# Equation of state property oracles.
#
# Every model is written as a residual reduced Helmholtz energy, a_res(rho, T) = A_res / (nRT),
# for one mole of a pure fluid, in jax.numpy. Pressure, chemical potential and their volume
# and temperature derivatives follow by forward-mode automatic differentiation.
# Models are immutable once constructed; the jitted property functions close over the parameters.
# Units are SI throughout (Pa, K, m3/mol), except where constructor arguments say otherwise.

from typing import Protocol, runtime_checkable

import numpy as np
import jax
import jax.numpy as jnp

from pyeostoolbox.constants import R, N_A, ANGSTROM

jax.config.update("jax_enable_x64", True)


def _real(x):
    # Works on floats, ints and jax tracers alike
    return jnp.asarray(x, dtype=jnp.float64)


@runtime_checkable
class EoSOracle(Protocol):
    """ Capability every solver needs. All functions must be jax-traceable in V and T """
    def pressure(self, V, T): ...
    def chemical_potential(self, V, T): ...
    def isothermal_compressibility(self, V, T): ...
    def pressure_derivative(self, V, T, order=1): ...
    def p_scale(self): ...
    def T_scale(self): ...


@runtime_checkable
class CubicParameters(Protocol):
    """ Extension capability of two-parameter cubics: p = RT/(V-b) - a(T)/((V+delta1*b)(V+delta2*b)) """
    Tc: float
    pc: float
    delta1: float
    delta2: float
    def cubic_ab(self, T): ...


@runtime_checkable
class SegmentParameters(Protocol):
    """ Extension capability of segment based (SAFT-like) models. sigma in m, epsilon in K """
    segment: float
    sigma: float
    epsilon: float


class HelmholtzModel:
    """ Base class deriving the oracle functions from a_res(rho, T).
        Subclasses set their parameters, implement _a_res, p_scale and T_scale, then call super().__init__()
    """
    def __init__(self):
        a_res = self._a_res

        def pressure(V, T):
            rho = 1.0 / V
            return rho * R * T * (1.0 + rho * jax.grad(a_res, 0)(rho, T))

        def chemical_potential(V, T):
            # Ideal gas part referenced to rho = 1 mol/m3; temperature-only terms omitted
            rho = 1.0 / V
            Z = pressure(V, T) * V / (R * T)
            return R * T * (jnp.log(rho) - 1.0 + a_res(rho, T) + Z)

        dpdV = jax.grad(pressure, 0)
        d2pdV2 = jax.grad(dpdV, 0)
        d3pdV3 = jax.grad(d2pdV2, 0)

        self._pressure = jax.jit(pressure)
        self._chemical_potential = jax.jit(chemical_potential)
        self._dp = {1: jax.jit(dpdV), 2: jax.jit(d2pdV2), 3: jax.jit(d3pdV3)}
        self._da_drho = jax.jit(jax.grad(a_res, 0))

    def _a_res(self, rho, T):
        raise NotImplementedError

    def pressure(self, V, T):
        """ Pressure (Pa) at molar volume V (m3/mol) and temperature T (K) """
        return self._pressure(_real(V), _real(T))

    def chemical_potential(self, V, T):
        """ Chemical potential (J/mol), up to a function of temperature only """
        return self._chemical_potential(_real(V), _real(T))

    def isothermal_compressibility(self, V, T):
        """ beta = -1/V (dV/dp)_T, 1/Pa """
        V, T = _real(V), _real(T)
        return -1.0 / (V * self._dp[1](V, T))

    def pressure_derivative(self, V, T, order=1):
        """ d^n p / dV^n at constant T, for n = 1, 2 or 3 """
        if order not in self._dp:
            raise ValueError(f"Pressure derivative order must be 1, 2 or 3, got {order}")
        return self._dp[order](_real(V), _real(T))

    def second_virial(self, T):
        """ Second virial coefficient B(T) (m3/mol), the zero density limit of d(a_res)/d(rho) """
        return self._da_drho(0.0, _real(T))

    def p_scale(self):
        raise NotImplementedError

    def T_scale(self):
        raise NotImplementedError


class CubicModel(HelmholtzModel):
    """ Generic two-parameter cubic. Subclasses set omega_a, omega_b, delta1, delta2 and may override alpha """
    omega_a = 27 / 64
    omega_b = 1 / 8
    delta1 = 0.0
    delta2 = 0.0

    def __init__(self, Tc: float, pc: float):
        if Tc <= 0 or pc <= 0:
            raise ValueError(f"Critical temperature and pressure must be positive, got Tc={Tc}, pc={pc}")
        self.Tc = float(Tc)
        self.pc = float(pc)
        self.a = self.omega_a * (R * self.Tc)**2 / self.pc
        self.b = self.omega_b * R * self.Tc / self.pc
        super().__init__()

    def alpha(self, T):
        return 1.0

    def cubic_ab(self, T):
        """ Returns temperature dependent (a*alpha(T), b) """
        return self.a * self.alpha(T), self.b

    def _a_res(self, rho, T):
        a, b = self.cubic_ab(T)
        d1, d2 = self.delta1, self.delta2
        repulsive = -jnp.log(1.0 - b * rho)
        if d1 == d2:
            attractive = -a * rho / (R * T * (1.0 + d1 * b * rho))
        else:
            attractive = -a / (R * T * b * (d1 - d2)) * jnp.log((1.0 + d1 * b * rho) / (1.0 + d2 * b * rho))
        return repulsive + attractive

    def p_scale(self):
        return self.pc

    def T_scale(self):
        return self.Tc

    def __repr__(self):
        return f"{type(self).__name__}(Tc={self.Tc}, pc={self.pc})"


class VanDerWaals(CubicModel):
    """ van der Waals EoS, p = RT/(V-b) - a/V^2, parameterised from critical constants """


class PengRobinson(CubicModel):
    """ Peng-Robinson (1976) EoS with the standard alpha function """
    omega_a = 0.45724
    omega_b = 0.07780
    delta1 = 1.0 + np.sqrt(2.0)
    delta2 = 1.0 - np.sqrt(2.0)

    def __init__(self, Tc: float, pc: float, omega: float):
        self.omega = float(omega)
        self.kappa = 0.37464 + 1.54226 * self.omega - 0.26992 * self.omega**2
        super().__init__(Tc, pc)

    def alpha(self, T):
        return (1.0 + self.kappa * (1.0 - jnp.sqrt(T / self.Tc)))**2

    def __repr__(self):
        return f"PengRobinson(Tc={self.Tc}, pc={self.pc}, omega={self.omega})"


# Universal PC-SAFT dispersion constants, Gross & Sadowski (2001)
A0 = np.array([0.910563145, 0.636128145, 2.686134789, -26.54736249, 97.75920878, -159.5915409, 91.29777408])
A1 = np.array([-0.308401692, 0.186053116, -2.503004726, 21.41979363, -65.25588533, 83.31868048, -33.74692293])
A2 = np.array([-0.090614835, 0.452784281, 0.596270073, -1.724182913, -4.130211253, 13.77663187, -8.672847037])
B0 = np.array([0.724094694, 2.238279186, -4.002584949, -21.00357682, 26.85564136, 206.5513384, -355.6023561])
B1 = np.array([-0.575549808, 0.699509552, 3.892567339, -17.21547165, 192.6722645, -161.8264617, -165.2076935])
B2 = np.array([0.097688312, -0.255757498, -9.155856153, 20.64207597, -38.80443005, 93.62677408, -29.66690559])


class PCSAFT(HelmholtzModel):
    """ Pure component PC-SAFT (Gross & Sadowski 2001, 2002)
        segment: Number of segments, m
        sigma: Segment diameter (Angstrom)
        epsilon: Dispersion energy over Boltzmann's constant (K)
        epsilon_assoc: Association energy over Boltzmann's constant (K). Zero for non-associating fluids
        kappa_assoc: Association volume (dimensionless). 2B scheme
    """
    def __init__(self, segment: float, sigma: float, epsilon: float, epsilon_assoc: float = 0.0, kappa_assoc: float = 0.0):
        if segment <= 0 or sigma <= 0 or epsilon <= 0:
            raise ValueError(f"PC-SAFT segment, sigma and epsilon must be positive, got {segment}, {sigma}, {epsilon}")
        self.segment = float(segment)
        self.sigma = float(sigma) * ANGSTROM
        self.epsilon = float(epsilon)
        self.epsilon_assoc = float(epsilon_assoc)
        self.kappa_assoc = float(kappa_assoc)
        m = self.segment
        self._a_coef = A0 + (m - 1) / m * A1 + (m - 1) / m * (m - 2) / m * A2
        self._b_coef = B0 + (m - 1) / m * B1 + (m - 1) / m * (m - 2) / m * B2
        super().__init__()

    def _a_res(self, rho, T):
        m, s, e = self.segment, self.sigma, self.epsilon
        d = s * (1.0 - 0.12 * jnp.exp(-3.0 * e / T))
        den = rho * N_A  # Number density, 1/m3
        eta = np.pi / 6.0 * den * m * d**3

        # Hard chain
        a_hs = (4.0 * eta - 3.0 * eta**2) / (1.0 - eta)**2
        ghs = (1.0 - eta / 2.0) / (1.0 - eta)**3
        a_hc = m * a_hs - (m - 1.0) * jnp.log(ghs)

        # Dispersion
        powers = jnp.stack([eta**k for k in range(7)])
        I1 = jnp.sum(self._a_coef * powers)
        I2 = jnp.sum(self._b_coef * powers)
        C1 = 1.0 / (1.0 + m * (8.0 * eta - 2.0 * eta**2) / (1.0 - eta)**4
                    + (1.0 - m) * (20.0 * eta - 27.0 * eta**2 + 12.0 * eta**3 - 2.0 * eta**4) / ((1.0 - eta) * (2.0 - eta))**2)
        m2es3 = m**2 * (e / T) * s**3
        m2e2s3 = m**2 * (e / T)**2 * s**3
        a_disp = -2.0 * np.pi * den * I1 * m2es3 - np.pi * den * m * C1 * I2 * m2e2s3

        if self.epsilon_assoc <= 0 or self.kappa_assoc <= 0:
            return a_hc + a_disp

        # 2B association, closed form for a pure fluid with one donor and one acceptor site
        delta = ghs * (jnp.exp(self.epsilon_assoc / T) - 1.0) * s**3 * self.kappa_assoc
        XA = 2.0 / (1.0 + jnp.sqrt(1.0 + 4.0 * den * delta))
        a_assoc = 2.0 * (jnp.log(XA) - XA / 2.0 + 0.5)
        return a_hc + a_disp + a_assoc

    def p_scale(self):
        return R * self.epsilon / (N_A * self.sigma**3)

    def T_scale(self):
        return self.epsilon

    def __repr__(self):
        return (f"PCSAFT(segment={self.segment}, sigma={self.sigma / ANGSTROM}, epsilon={self.epsilon}, "
                f"epsilon_assoc={self.epsilon_assoc}, kappa_assoc={self.kappa_assoc})")
