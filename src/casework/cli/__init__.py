"""Command-line tools for Casework."""

from .simulate import main, run_simulation
from .trace import DecisionTraceLogger

__all__ = ["DecisionTraceLogger", "main", "run_simulation"]
