from .classes import phase, class_dic, SolverOptions, ConvergenceReport, VolumeSolution, VolumeRootSet, SaturationPoint, CriticalPoint
