from .guesses import pressure_scale, temperature_scale, critical_constants, liquid_volume_guess, vdw_saturation_guess, vapour_volume_guess, volume_guess, critical_point_guess
