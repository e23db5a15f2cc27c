"""Runtime services shared by the core and the adapters."""

from . import telemetry

__all__ = ["telemetry"]
