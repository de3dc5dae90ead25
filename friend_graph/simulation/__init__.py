"""Simulation module - Force model and layout engine."""

from .forces import ForceConfig, ForceSimulator, JITTER
from .engine import LayoutEngine, LayoutConfig, LayoutState, SimulationPhase

__all__ = [
    "ForceConfig",
    "ForceSimulator",
    "JITTER",
    "LayoutEngine",
    "LayoutConfig",
    "LayoutState",
    "SimulationPhase",
]
