"""
Tick driver for the friend graph layout.

Advances the force simulation once per rendering frame, keeps a dragged
node under the pointer and reports when the layout has come to rest.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Any, TYPE_CHECKING
from enum import Enum
import logging

from ..vector import Vec2

if TYPE_CHECKING:
    from ..network.graph import FriendGraph

logger = logging.getLogger(__name__)


class SimulationPhase(Enum):
    """Phases of a layout run."""
    SETUP = "setup"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class LayoutConfig:
    """Configuration for the tick driver."""
    # Larger steps make the explicit Euler integration oscillate
    max_dt: float = 0.05
    default_dt: float = 1.0 / 60.0

    # Max per-tick displacement below which the layout counts as at rest
    rest_threshold: float = 0.05

    def __post_init__(self):
        if self.max_dt <= 0:
            raise ValueError("max_dt must be positive")
        if self.default_dt < 0:
            raise ValueError("default_dt must not be negative")


@dataclass
class LayoutState:
    """Current state of a layout run."""
    phase: SimulationPhase = SimulationPhase.SETUP
    step_count: int = 0
    elapsed_seconds: float = 0.0
    last_dt: float = 0.0
    max_displacement: float = 0.0


class LayoutEngine:
    """
    Runs the layout simulation of a FriendGraph tick by tick.

    Each tick:
    1. dt is clamped to the configured maximum
    2. a dragged node is pinned to the pointer
    3. the graph advances one simulation step
    4. the dragged node is pinned again and step callbacks run
    """

    def __init__(
        self,
        graph: "FriendGraph",
        config: Optional[LayoutConfig] = None,
    ):
        self.config = config or LayoutConfig()
        self._graph = graph
        self._state = LayoutState()

        # Dragging
        self._drag_index: Optional[int] = None
        self._drag_offset = Vec2()
        self._drag_target = Vec2()

        self._on_step: List[Callable[[LayoutState], None]] = []

    @property
    def graph(self) -> "FriendGraph":
        return self._graph

    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def dragging(self) -> Optional[int]:
        """Index of the node being dragged, if any."""
        return self._drag_index

    def on_step(self, callback: Callable[[LayoutState], None]) -> None:
        """Register a callback for tick completion."""
        self._on_step.append(callback)

    def pause(self) -> None:
        self._state.phase = SimulationPhase.PAUSED

    def resume(self) -> None:
        if self._state.phase == SimulationPhase.PAUSED:
            self._state.phase = SimulationPhase.RUNNING

    # Dragging

    def begin_drag(self, index: int, pointer: Vec2) -> bool:
        """
        Start dragging a node, keeping the grab offset to the pointer.

        Returns False (and does nothing) if the slot is free.
        """
        if self._graph.is_free(index):
            return False
        position = self._graph.position(index)
        self._drag_index = index
        self._drag_offset = pointer - position
        self._drag_target = position
        return True

    def drag_to(self, pointer: Vec2) -> None:
        if self._drag_index is None:
            return
        self._drag_target = pointer - self._drag_offset
        self._pin_dragged()

    def end_drag(self) -> None:
        self._drag_index = None

    def _pin_dragged(self) -> None:
        index = self._drag_index
        if index is None:
            return
        if index >= self._graph.slot_count or self._graph.is_free(index):
            # The dragged node was deleted under the pointer.
            self._drag_index = None
            return
        self._graph.set_position(index, self._drag_target.x, self._drag_target.y)

    # Stepping

    def tick(self, dt: Optional[float] = None) -> LayoutState:
        """
        Advance the layout by one frame of dt seconds.

        Does nothing while paused.
        """
        if dt is None:
            dt = self.config.default_dt
        if dt < 0:
            raise ValueError(f"dt must not be negative, got {dt}")
        if self._state.phase == SimulationPhase.PAUSED:
            return self._state

        if dt > self.config.max_dt:
            logger.debug("Clamping dt %.4f to %.4f", dt, self.config.max_dt)
            dt = self.config.max_dt

        self._state.phase = SimulationPhase.RUNNING
        before = {index: node.position for index, node in self._graph.nodes()}

        self._pin_dragged()
        self._graph.update(dt)
        self._pin_dragged()

        self._state.max_displacement = max(
            ((node.position - before[index]).length()
             for index, node in self._graph.nodes() if index in before),
            default=0.0,
        )
        self._state.step_count += 1
        self._state.elapsed_seconds += dt
        self._state.last_dt = dt

        for callback in self._on_step:
            callback(self._state)

        return self._state

    def run_steps(self, n_steps: int, dt: Optional[float] = None) -> LayoutState:
        """Run a specific number of ticks."""
        for _ in range(n_steps):
            self.tick(dt)
            if self._state.phase == SimulationPhase.PAUSED:
                break
        return self._state

    def is_at_rest(self) -> bool:
        return (
            self._state.step_count > 0
            and self._state.max_displacement < self.config.rest_threshold
        )

    def run_until_rest(self, max_steps: int, dt: Optional[float] = None) -> bool:
        """
        Tick until the layout is at rest or max_steps ticks have run.

        Returns True if rest was reached.
        """
        for _ in range(max_steps):
            self.tick(dt)
            if self.is_at_rest():
                return True
            if self._state.phase == SimulationPhase.PAUSED:
                break
        return False

    def export_state(self) -> Dict[str, Any]:
        """Export the current run state for reporting."""
        return {
            "phase": self._state.phase.value,
            "step_count": self._state.step_count,
            "elapsed_seconds": self._state.elapsed_seconds,
            "max_displacement": self._state.max_displacement,
            "node_count": self._graph.node_count,
            "edge_count": self._graph.edge_count,
            "dragging": self._drag_index,
        }

    def __repr__(self) -> str:
        return f"LayoutEngine(nodes={self._graph.node_count}, phase={self._state.phase.value})"
