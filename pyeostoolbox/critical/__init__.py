from .critical import critical_objective, critical_point
