from .errors import DomainError, TrivialSolution, CriticalPointNotFound, ConvergenceWarning, DegenerateRoots
