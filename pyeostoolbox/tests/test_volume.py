#!/usr/bin/env python3
"""
Validation tests for volume module.
"""

import sys
import os
import warnings
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
import pyeostoolbox.volume as volume
import pyeostoolbox.saturation as saturation
import pyeostoolbox.models as models
from pyeostoolbox.classes import SolverOptions
from pyeostoolbox.constants import R
from pyeostoolbox.errors import DomainError, ConvergenceWarning, DegenerateRoots

P, T = 50e5, 273.15
PRESSURE_RTOL = 1e-8

def vdw_co2():
    return models.VanDerWaals(Tc=304.1282, pc=7.3773e6)

def saft_co2():
    return models.PCSAFT(segment=2.0729, sigma=2.7852, epsilon=169.21)

def test_cubic_roots_known():
    """Roots of (Z-1)(Z-2)(Z-3)"""
    Zs = volume.cubic_roots(-6.0, 11.0, -6.0)
    assert np.allclose(np.sort(Zs.real), [1.0, 2.0, 3.0], rtol=1e-12)
    assert np.all(Zs.imag == 0)

def test_cubic_roots_complex_pair():
    """Z^3 - 1 has one real root and a complex pair"""
    Zs = volume.cubic_roots(0.0, 0.0, -1.0)
    real = Zs[Zs.imag == 0]
    assert len(real) == 1
    assert abs(real[0].real - 1.0) < 1e-12
    for Z in Zs:
        assert abs(Z**3 - 1) < 1e-12

def test_vdw_co2_three_roots():
    """vdW CO2 at 50 bar, 273.15 K has three real roots; the minimum chemical potential root is selected"""
    eos = vdw_co2()
    rootset = volume.cubic_volume(eos, P, T, all_roots=True)
    assert len(rootset.real_roots) == 3
    assert len(rootset.chemical_potentials) == 3
    sol = volume.cubic_volume(eos, P, T)
    expected = rootset.real_roots[np.argmin(rootset.chemical_potentials)]
    assert sol.V == expected
    assert sol.V == rootset.real_roots[0]  # compressed liquid
    assert not sol.ambiguous

def test_cubic_volume_pressure_roundtrip():
    """Every real root reproduces the specified pressure"""
    eos = vdw_co2()
    for V in volume.cubic_volume_roots(eos, P, T).real_roots:
        assert abs(float(eos.pressure(V, T)) / P - 1) < PRESSURE_RTOL, f"V={V}"

def test_volume_recovered_from_pressure():
    """Volumes on the liquid, unstable and vapour branches are recovered among the cubic roots of p(V)"""
    cases = [
        (vdw_co2(), 273.15, [6e-5, 1.1e-4, 1e-3]),
        (models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013), 400.0, [1.5e-4, 7e-4, 2e-2]),
    ]
    for eos, temp, volumes in cases:
        for V in volumes:
            p = float(eos.pressure(V, temp))
            assert p > 0, f"{eos} V={V}"
            real = volume.cubic_volume_roots(eos, p, temp).real_roots
            assert np.min(np.abs(real - V)) / V < 1e-8, f"{eos} V={V}, roots {real}"

def test_cubic_volume_ambiguous_at_saturation():
    """At the saturation pressure liquid and vapour roots share a chemical potential and are flagged"""
    eos = models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013)
    T_sat = 373.15
    psat, Vl, Vv = saturation.saturation_pressure(eos, T_sat)
    sol = volume.cubic_volume(eos, psat, T_sat)
    assert sol.ambiguous
    assert len(sol.roots) == 3
    assert min(abs(sol.V - Vl) / Vl, abs(sol.V - Vv) / Vv) < 1e-6

def test_stable_volume_ambiguous_at_saturation():
    """Phase-unknown volume solve flags the saturated state too"""
    eos = models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013)
    T_sat = 373.15
    psat, Vl, Vv = saturation.saturation_pressure(eos, T_sat)
    sol = volume.stable_volume(eos, psat, T_sat)
    assert sol.ambiguous
    assert abs(sol.roots[0] - Vl) / Vl < 1e-6
    assert abs(sol.roots[1] - Vv) / Vv < 1e-6

def test_cubic_volume_single_root():
    """Supercritical state returns the single real root directly"""
    eos = vdw_co2()
    sol = volume.cubic_volume(eos, 100e5, 400.0)
    assert len(sol.roots) == 1
    assert sol.report.iterations == 0
    assert abs(sol.report.residual) < PRESSURE_RTOL

def test_cubic_volume_pr_matches_solver():
    """PR cubic root agrees with the log-volume solver"""
    eos = models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013)
    cubic = volume.cubic_volume(eos, 1e6, 350.0)
    iterative = volume.volume_solve(eos, 1e6, 350.0, phase='liquid')
    assert iterative.report.converged
    assert abs(cubic.V - iterative.V) / cubic.V < 1e-7

def test_cubic_volume_at_critical_point():
    """vdW at its own critical point warns of coincident roots and collapses onto V = 3b"""
    eos = vdw_co2()
    with pytest.warns(DegenerateRoots) as record:
        sol = volume.cubic_volume(eos, eos.pc, eos.Tc)
    degenerate = [w.message for w in record if issubclass(w.category, DegenerateRoots)]
    assert len(degenerate[0].roots) >= 2
    assert np.allclose(degenerate[0].roots, 3 * eos.b, rtol=1e-4)
    assert abs(sol.V - 3 * eos.b) / sol.V < 1e-4

def test_cubic_volume_domain():
    """Non-positive pressure or temperature is a domain error"""
    eos = vdw_co2()
    with pytest.raises(DomainError):
        volume.cubic_volume(eos, -1.0, T)
    with pytest.raises(DomainError):
        volume.cubic_volume(eos, P, 0.0)
    with pytest.raises(ValueError):
        volume.cubic_volume_roots(saft_co2(), P, T)

def test_saft_co2_liquid_volume():
    """PC-SAFT CO2 liquid root matches an independent root scan"""
    eos = saft_co2()
    sol = volume.volume_solve(eos, P, T, phase='liquid')
    assert sol.report.converged
    assert abs(float(eos.pressure(sol.V, T)) / P - 1) < 1e-6
    roots = volume.volume_roots(eos, P, T)
    assert len(roots) >= 1
    assert np.min(np.abs(roots - sol.V)) / sol.V < 1e-6

def test_saft_co2_stable_volume_is_liquid():
    """Above the vapour pressure the stable root is the liquid one"""
    eos = saft_co2()
    liquid = volume.volume_solve(eos, P, T, phase='liquid')
    stable = volume.stable_volume(eos, P, T)
    assert abs(stable.V - liquid.V) / liquid.V < 1e-8

def test_volume_solve_idempotent():
    """Restarting from a converged volume converges immediately"""
    eos = saft_co2()
    sol = volume.volume_solve(eos, P, T, phase='liquid')
    again = volume.volume_solve(eos, P, T, V0=sol.V)
    assert again.report.converged
    assert again.report.iterations <= 2
    assert abs(again.V - sol.V) / sol.V < 1e-8

def test_volume_solve_vapour():
    """Vapour solve at low pressure is close to ideal gas"""
    eos = saft_co2()
    sol = volume.volume_solve(eos, 1e5, 300.0, phase='vapour')
    assert sol.report.converged
    assert abs(sol.V * 1e5 / (R * 300.0) - 1) < 0.01

def test_volume_solve_budget_exhausted():
    """Exhausting the iteration budget warns and returns the last iterate"""
    eos = saft_co2()
    with pytest.warns(ConvergenceWarning):
        sol = volume.volume_solve(eos, P, T, phase='liquid', maxiters=1)
    assert not sol.report.converged
    assert sol.report.iterations == 1
    assert np.isfinite(sol.V)

def test_volume_solve_options():
    """Explicit keyword arguments take precedence over SolverOptions"""
    eos = saft_co2()
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', ConvergenceWarning)
        sol = volume.volume_solve(eos, P, T, options=SolverOptions(maxiters=1), maxiters=100)
    assert sol.report.converged
    with pytest.raises(ValueError):
        volume.volume_solve(eos, P, T, options={'maxiters': 1})

def test_volume_roots_vdw_matches_cubic():
    """Root scan finds the same three vdW roots as the closed form"""
    eos = vdw_co2()
    scanned = volume.volume_roots(eos, P, T)
    closed = volume.cubic_volume_roots(eos, P, T).real_roots
    assert len(scanned) == 3
    assert np.allclose(scanned, closed, rtol=1e-8)
