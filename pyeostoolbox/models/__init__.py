from .models import EoSOracle, CubicParameters, SegmentParameters, HelmholtzModel, CubicModel, VanDerWaals, PengRobinson, PCSAFT
