from .volume import cubic_roots, cubic_volume_roots, cubic_volume, volume_solve, stable_volume, volume_roots
