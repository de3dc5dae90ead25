"""
Metrics collection for layout runs.

Collects per-tick motion and a final snapshot of the graph layout
for reporting and comparison between runs.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Any, TYPE_CHECKING
from datetime import datetime
import json
import uuid

from ..simulation.engine import LayoutState

if TYPE_CHECKING:
    from ..network.graph import FriendGraph


@dataclass
class LayoutMetrics:
    """Aggregated metrics for a layout run."""
    # Basic stats
    run_id: str
    start_time: datetime
    end_time: Optional[datetime]
    total_steps: int
    elapsed_seconds: float

    # Graph stats
    node_count: int
    edge_count: int
    mean_degree: float
    max_degree: int
    isolated_count: int

    # Geometry stats
    mean_edge_length: float
    max_edge_stretch: float
    bounding_radius: float

    # Motion stats
    final_max_displacement: float
    at_rest: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "total_steps": self.total_steps,
            "elapsed_seconds": self.elapsed_seconds,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "mean_degree": self.mean_degree,
            "max_degree": self.max_degree,
            "isolated_count": self.isolated_count,
            "mean_edge_length": self.mean_edge_length,
            "max_edge_stretch": self.max_edge_stretch,
            "bounding_radius": self.bounding_radius,
            "final_max_displacement": self.final_max_displacement,
            "at_rest": self.at_rest,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class StepRecord:
    """Motion recorded for a single tick."""
    step: int
    elapsed_seconds: float
    dt: float
    max_displacement: float


class MetricsCollector:
    """
    Collects metrics during layout runs.

    Register record_step as a LayoutEngine step callback, then call
    finalize() once the run is over.
    """

    def __init__(self, run_id: Optional[str] = None, rest_threshold: float = 0.05):
        self.run_id = run_id or str(uuid.uuid4())[:8]
        self.rest_threshold = rest_threshold
        self.start_time = datetime.now()
        self._history: List[StepRecord] = []

    def record_step(self, state: LayoutState) -> None:
        """Record motion for a completed tick."""
        self._history.append(StepRecord(
            step=state.step_count,
            elapsed_seconds=state.elapsed_seconds,
            dt=state.last_dt,
            max_displacement=state.max_displacement,
        ))

    @property
    def history(self) -> List[StepRecord]:
        return list(self._history)

    def displacement_series(self) -> List[float]:
        return [record.max_displacement for record in self._history]

    def finalize(self, graph: "FriendGraph", rest_length: Optional[float] = None) -> LayoutMetrics:
        """
        Compute the final metrics snapshot for a graph.

        rest_length defaults to the graph's configured spring rest length.
        """
        if rest_length is None:
            rest_length = graph.config.spring_rest

        live = graph.nodes()
        degrees = [graph.degree(index) for index, _ in live]

        lengths = [
            (graph.position(edge.b) - graph.position(edge.a)).length()
            for edge in graph.edges
        ]

        last = self._history[-1] if self._history else None

        return LayoutMetrics(
            run_id=self.run_id,
            start_time=self.start_time,
            end_time=datetime.now(),
            total_steps=last.step if last else 0,
            elapsed_seconds=last.elapsed_seconds if last else 0.0,
            node_count=len(live),
            edge_count=graph.edge_count,
            mean_degree=sum(degrees) / len(degrees) if degrees else 0.0,
            max_degree=max(degrees, default=0),
            isolated_count=sum(1 for d in degrees if d == 0),
            mean_edge_length=sum(lengths) / len(lengths) if lengths else 0.0,
            max_edge_stretch=max((abs(length - rest_length) for length in lengths), default=0.0),
            bounding_radius=max((node.position.length() for _, node in live), default=0.0),
            final_max_displacement=last.max_displacement if last else 0.0,
            at_rest=bool(last) and last.max_displacement < self.rest_threshold,
        )

    def __repr__(self) -> str:
        return f"MetricsCollector(run_id={self.run_id}, steps={len(self._history)})"
