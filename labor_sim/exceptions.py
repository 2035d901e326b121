"""
Exceptions raised by the labor market simulator.
"""


class SimulationError(Exception):
    """Base class for simulator errors."""


class ScenarioNotConfiguredError(SimulationError):
    """Raised when a run is requested before a scenario exists."""

    def __init__(self, message: str = "No scenario configured"):
        super().__init__(message)


class SimulationCancelled(SimulationError):
    """Raised when the cancellation hook asks a run to stop."""

    def __init__(self, step: int):
        self.step = step
        super().__init__(f"Simulation cancelled at step {step}")


class InvalidParameterPathError(SimulationError):
    """Raised when a dotted scenario parameter path does not resolve."""


class UnknownInterventionError(SimulationError, KeyError):
    """Raised for an intervention type outside the catalog."""

    def __init__(self, intervention_type):
        self.intervention_type = intervention_type
        super().__init__(f"Unknown intervention type: {intervention_type}")

    def __str__(self) -> str:
        return self.args[0]


class InterventionParameterError(SimulationError, ValueError):
    """Raised when an intervention parameter fails its schema."""
