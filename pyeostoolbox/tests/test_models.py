#!/usr/bin/env python3
"""
Validation tests for models module.
"""

import sys
import os
import numpy as np
import jax
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
import pyeostoolbox.models as models
from pyeostoolbox.constants import R, N_A

RTOL = 1e-10

CO2_TC, CO2_PC = 304.1282, 7.3773e6

def vdw():
    return models.VanDerWaals(Tc=CO2_TC, pc=CO2_PC)

def pr_hexane():
    return models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013)

def saft_co2():
    return models.PCSAFT(segment=2.0729, sigma=2.7852, epsilon=169.21)

def test_vdw_parameters():
    """vdW a and b from critical constants"""
    eos = vdw()
    assert abs(eos.b - R * CO2_TC / (8 * CO2_PC)) / eos.b < RTOL
    assert abs(eos.a - 27 * (R * CO2_TC)**2 / (64 * CO2_PC)) / eos.a < RTOL

def test_vdw_pressure_analytic():
    """vdW pressure from the Helmholtz energy matches p = RT/(V-b) - a/V^2"""
    eos = vdw()
    T = 273.15
    for V in [6e-5, 1e-4, 1e-3, 1e-2]:
        expected = R * T / (V - eos.b) - eos.a / V**2
        assert abs(float(eos.pressure(V, T)) - expected) / abs(expected) < 1e-9, f"V={V}"

def test_pr_pressure_analytic():
    """PR pressure matches p = RT/(V-b) - a*alpha/(V^2 + 2bV - b^2)"""
    eos = pr_hexane()
    T = 373.15
    a, b = eos.cubic_ab(T)
    a = float(a)
    for V in [1.4e-4, 1e-3, 1e-2]:
        expected = R * T / (V - b) - a / (V**2 + 2 * b * V - b**2)
        assert abs(float(eos.pressure(V, T)) - expected) / abs(expected) < 1e-9, f"V={V}"

def test_pr_alpha_unity_at_tc():
    """PR alpha function is 1 at the critical temperature"""
    eos = pr_hexane()
    assert abs(float(eos.alpha(eos.Tc)) - 1.0) < RTOL

def test_saft_ideal_gas_limit():
    """PC-SAFT tends to the ideal gas at large volume"""
    eos = saft_co2()
    T, V = 300.0, 1e3
    Z = float(eos.pressure(V, T)) * V / (R * T)
    assert abs(Z - 1) < 1e-5

def test_saft_second_virial_negative():
    """Subcritical second virial coefficient is negative"""
    assert float(saft_co2().second_virial(273.15)) < 0

def test_gibbs_duhem():
    """Isothermal d(mu)/dV equals V*dp/dV"""
    T = 273.15
    for eos, V in [(vdw(), 1e-4), (pr_hexane(), 2e-4), (saft_co2(), 5e-5)]:
        dmu = float(jax.grad(eos.chemical_potential, 0)(V, T))
        expected = V * float(eos.pressure_derivative(V, T, 1))
        assert abs(dmu - expected) / abs(expected) < 1e-8, f"{eos}"

def test_isothermal_compressibility_ideal():
    """beta tends to 1/p for a dilute gas"""
    eos = saft_co2()
    T, V = 300.0, 10.0
    p = float(eos.pressure(V, T))
    assert abs(float(eos.isothermal_compressibility(V, T)) * p - 1) < 1e-4

def test_pressure_derivative_order():
    """Only first to third volume derivatives are available"""
    eos = vdw()
    with pytest.raises(ValueError):
        eos.pressure_derivative(1e-4, 300.0, 4)

def test_pressure_derivative_analytic():
    """Second volume derivative of vdW pressure"""
    eos = vdw()
    T, V = 300.0, 2e-4
    expected = 2 * R * T / (V - eos.b)**3 - 6 * eos.a / V**4
    assert abs(float(eos.pressure_derivative(V, T, 2)) - expected) / abs(expected) < 1e-9

def test_association_lowers_pressure():
    """Association makes the fluid less volatile at the same state"""
    plain = models.PCSAFT(1.0656, 3.0007, 366.51)
    water = models.PCSAFT(1.0656, 3.0007, 366.51, epsilon_assoc=2500.7, kappa_assoc=0.034868)
    V, T = 1e-3, 500.0
    assert float(water.pressure(V, T)) < float(plain.pressure(V, T))

def test_protocols():
    """Capability protocols identify model families"""
    assert isinstance(vdw(), models.CubicParameters)
    assert isinstance(pr_hexane(), models.CubicParameters)
    assert not isinstance(saft_co2(), models.CubicParameters)
    assert isinstance(saft_co2(), models.SegmentParameters)
    for eos in [vdw(), pr_hexane(), saft_co2()]:
        assert isinstance(eos, models.EoSOracle)

def test_scales():
    """Pressure and temperature scales"""
    eos = saft_co2()
    assert abs(eos.p_scale() - R * 169.21 / (N_A * (2.7852e-10)**3)) / eos.p_scale() < RTOL
    assert eos.T_scale() == 169.21
    assert vdw().p_scale() == CO2_PC
    assert vdw().T_scale() == CO2_TC

def test_invalid_parameters():
    """Non-positive parameters are rejected"""
    with pytest.raises(ValueError):
        models.VanDerWaals(Tc=-1, pc=1e6)
    with pytest.raises(ValueError):
        models.PCSAFT(segment=0, sigma=3.0, epsilon=200)
