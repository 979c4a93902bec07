from .shared_fns import convert_to_numpy, resolve_options, newton_solve
