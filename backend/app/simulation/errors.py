"""Exceptions raised by the simulation core."""


class SimulationError(Exception):
    """Base class for all simulation failures."""


class SimulationValidationError(SimulationError, ValueError):
    """Invalid scenario or simulation parameters. Raised before any work starts."""


class SimulationCancelledError(SimulationError):
    """A run was cancelled between iterations."""
