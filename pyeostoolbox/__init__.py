"""
pyeostoolbox
===================================

-----------------------------------------------
Equation of State Equilibrium Solvers
-----------------------------------------------

Numerical methods for pure fluid phase equilibrium with an equation of state: volume roots at
a specified pressure and temperature, saturation pressures and curves, and critical points.
Derivatives are supplied by automatic differentiation (jax) of the residual Helmholtz energy.

Modules are imported on first access, e.g.

    import pyeostoolbox as eos
    model = eos.models.PengRobinson(Tc=507.6, pc=3.025e6, omega=0.3013)
    psat, Vl, Vv = eos.saturation.saturation_pressure(model, 373.15)

Includes;

- Van der Waals, Peng-Robinson and PC-SAFT (with 2B association) reference models
- Scaling factors and initial guesses (packing fraction, van der Waals corresponding states)
- Closed form cubic volume roots with chemical potential root selection
- Log-volume successive substitution volume solver for any model
- Two phase saturation pressure by Newton's method in log-volume, with warm started saturation curves
- Critical point by Newton's method on the first and second pressure derivatives

"""

submodules = [
    'classes',
    'constants',
    'critical',
    'errors',
    'guesses',
    'models',
    'saturation',
    'shared_fns',
    'validate',
    'volume'
]

__all__ = submodules 

import importlib

def __dir__():
    return __all__


def __getattr__(name):
    if name in submodules:
        return importlib.import_module(f'pyeostoolbox.{name}')
    else:
        try:
            return globals()[name]
        except KeyError:
            raise AttributeError(
                f"Module 'pyeostoolbox' has no attribute '{name}'"
            )
