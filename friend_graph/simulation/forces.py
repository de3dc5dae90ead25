"""
Force model for the friend graph layout.

Each step is a first-order, overdamped update: forces are summed per node
and added to the position scaled by dt. There is no velocity term.

Per pair of live nodes:
- connected pairs feel a quadratic spring toward the rest length;
- unconnected pairs feel inverse-square repulsion;
- every pair feels an inverse-fourth-power repulsion that only matters at
  very short range.

Every node is also pulled linearly toward the origin.
"""

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from ..vector import Vec2

if TYPE_CHECKING:
    from ..network.edges import EdgeIndex
    from ..network.nodes import NodeStore


# Fixed offsets used when two nodes sit on exactly the same point.
JITTER = (
    Vec2(2.5, 0.0),
    Vec2(1.8, 1.8),
    Vec2(0.0, 2.5),
    Vec2(-1.8, 1.8),
    Vec2(-2.5, 0.0),
    Vec2(-1.8, -1.8),
    Vec2(0.0, -2.5),
    Vec2(1.8, -1.8),
)

MIN_DISTANCE = 1.0


@dataclass(frozen=True)
class ForceConfig:
    """Tunable force constants; replace the whole config to change them."""
    spring_k: float = 0.6
    spring_rest: float = 140.0
    repel_k: float = 2600.0
    close_repel_k: float = 500.0
    center_k: float = 0.02

    def __post_init__(self):
        if self.spring_rest <= 0:
            raise ValueError("spring_rest must be positive")


class ForceSimulator:
    """
    Stateless step function over node positions and edge adjacency.

    The simulator never mutates the store; callers write the returned
    positions back.
    """

    def __init__(self, config: Optional[ForceConfig] = None):
        self.config = config or ForceConfig()

    def pair_force(self, pi: Vec2, pj: Vec2, j: int, connected: bool) -> Vec2:
        """
        Force exerted on node i by node j.

        Node j receives the exact negation. `j` only selects the jitter
        offset when the two positions coincide.
        """
        cfg = self.config
        r = pj - pi
        if r.is_zero():
            r = JITTER[j % len(JITTER)]

        dist = max(r.length(), MIN_DISTANCE)
        direction = r / dist

        if connected:
            stretch = dist - cfg.spring_rest
            magnitude = cfg.spring_k * stretch * abs(stretch) / cfg.spring_rest
        else:
            magnitude = -cfg.repel_k / (dist * dist)

        # Short-range crowding repulsion, applied to every pair.
        magnitude -= cfg.close_repel_k / (dist * dist * dist * dist)

        return direction * magnitude

    def centering_force(self, position: Vec2) -> Vec2:
        return position * -self.config.center_k

    def compute_forces(self, nodes: "NodeStore", edges: "EdgeIndex") -> Dict[int, Vec2]:
        """Net force on every live node."""
        live = [(index, node.position) for index, node in nodes]
        forces = {index: Vec2() for index, _ in live}

        for a, (i, pi) in enumerate(live):
            for j, pj in live[a + 1:]:
                f = self.pair_force(pi, pj, j, edges.connected(i, j))
                forces[i] = forces[i] + f
                forces[j] = forces[j] - f

        for i, pi in live:
            forces[i] = forces[i] + self.centering_force(pi)

        return forces

    def step(self, nodes: "NodeStore", edges: "EdgeIndex", dt: float) -> Dict[int, Vec2]:
        """
        Positions after one explicit Euler step of length dt.

        dt is not clamped here; large values make the integration
        oscillate.
        """
        forces = self.compute_forces(nodes, edges)
        return {
            index: node.position + forces[index] * dt
            for index, node in nodes
        }
