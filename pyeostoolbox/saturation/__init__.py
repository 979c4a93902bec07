from .saturation import saturation_objective, saturation_pressure, check_nontrivial, saturation_curve
