"""
Plotting utilities for friend graph layouts.

Generates visualizations for:
- The current node layout, with edges colored by connection age
- Per-tick motion of a layout run
"""

from typing import List, Dict, Optional, Any, Union, TYPE_CHECKING
from datetime import date, datetime
import colorsys
import json

if TYPE_CHECKING:
    from ..network.graph import FriendGraph
    from ..analysis.metrics import LayoutMetrics

DAYS_PER_YEAR = 365.25
MAX_AGE_YEARS = 10.0
NODE_RADIUS_POINTS = 22


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def edge_age_years(since: Union[date, datetime], now: Union[date, datetime, None] = None) -> float:
    """Age of a connection in years, negative for future dates."""
    now = _as_date(now) if now is not None else date.today()
    return (now - _as_date(since)).days / DAYS_PER_YEAR


def edge_color(since: Union[date, datetime], now: Union[date, datetime, None] = None) -> str:
    """
    Hex color for an edge by connection age.

    New connections are green (hue 120), shading through yellow to red
    (hue 0) at ten years or older.
    """
    age = min(MAX_AGE_YEARS, max(0.0, edge_age_years(since, now)))
    hue = 120.0 - age * 12.0
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, 0.45, 0.75)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


class LayoutPlotter:
    """
    Creates visualizations for friend graph layouts.

    Figures are drawn with matplotlib; callers choose the backend.
    """

    def __init__(self, output_dir: str = "."):
        """Initialize the layout plotter.

        Args:
            output_dir: Directory path for saving output files. Defaults to
                current directory.
        """
        self.output_dir = output_dir

    def layout_data(
        self,
        graph: "FriendGraph",
        now: Union[date, datetime, None] = None,
    ) -> Dict[str, Any]:
        """Collect the drawable state of a graph.

        Args:
            graph: The graph to read nodes and edges from.
            now: Reference date for edge age colors. Defaults to today.

        Returns:
            Dict with 'nodes' (index, name, x, y, image, degree) and 'edges'
            (a, b, earliest_date, color).
        """
        nodes = []
        for index, node in graph.nodes():
            nodes.append({
                "index": index,
                "name": node.name,
                "x": node.position.x,
                "y": node.position.y,
                "image": node.image,
                "degree": graph.degree(index),
            })

        edges = []
        for edge in graph.edges:
            edges.append({
                "a": edge.a,
                "b": edge.b,
                "earliest_date": edge.earliest_date.isoformat(),
                "color": edge_color(edge.earliest_date, now),
            })

        return {"nodes": nodes, "edges": edges}

    def plot_layout(
        self,
        graph: "FriendGraph",
        now: Union[date, datetime, None] = None,
        selected: Optional[int] = None,
        title: str = "Friend Graph",
        save_path: Optional[str] = None,
    ) -> Any:
        """Plot the current layout of a graph.

        Edges are drawn first, colored by connection age, then nodes with
        their name below. The selected node, if any, gets a highlighted
        outline.

        Args:
            graph: The graph to draw.
            now: Reference date for edge age colors. Defaults to today.
            selected: Optional index of a node to highlight.
            title: Figure title.
            save_path: Optional file path to save the plot image.

        Returns:
            The matplotlib figure.
        """
        import matplotlib.pyplot as plt

        data = self.layout_data(graph, now)
        positions = {n["index"]: (n["x"], n["y"]) for n in data["nodes"]}

        fig, ax = plt.subplots(figsize=(10, 10))

        for edge in data["edges"]:
            x1, y1 = positions[edge["a"]]
            x2, y2 = positions[edge["b"]]
            ax.plot([x1, x2], [y1, y2], color=edge["color"], linewidth=2, zorder=1)

        for node in data["nodes"]:
            is_selected = node["index"] == selected
            ax.scatter(
                node["x"], node["y"],
                s=(2 * NODE_RADIUS_POINTS) ** 2 / 4,
                c='white',
                edgecolors='orange' if is_selected else 'dimgray',
                linewidths=3 if is_selected else 1.5,
                zorder=5,
            )
            ax.annotate(
                node["name"], (node["x"], node["y"]),
                xytext=(0, -NODE_RADIUS_POINTS), textcoords='offset points',
                ha='center', va='top', fontsize=9,
            )

        ax.set_title(title)
        ax.axis('equal')
        ax.axis('off')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        return fig

    def plot_motion(
        self,
        displacements: List[float],
        rest_threshold: Optional[float] = None,
        save_path: Optional[str] = None,
    ) -> Any:
        """Plot the largest per-tick node displacement of a run.

        Args:
            displacements: Max displacement for each tick, in order.
            rest_threshold: Optional threshold to draw as a reference line.
            save_path: Optional file path to save the plot image.

        Returns:
            The matplotlib figure.
        """
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(10, 4))

        ax.plot(range(1, len(displacements) + 1), displacements, 'b-', linewidth=1.5)
        if rest_threshold is not None:
            ax.axhline(y=rest_threshold, color='r', linestyle='--', label='Rest threshold')
            ax.legend()
        if displacements and min(displacements) > 0:
            ax.set_yscale('log')

        ax.set_xlabel('Tick')
        ax.set_ylabel('Max Displacement')
        ax.set_title('Layout Motion')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        return fig

    def export_plot_data(
        self,
        data: Dict[str, Any],
        filepath: str,
    ) -> None:
        """Export plot data to JSON for external visualization.

        Args:
            data: Dictionary containing plot data to export.
            filepath: Path to the output JSON file.
        """
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2, default=str)

    def create_summary_report(
        self,
        metrics: "LayoutMetrics",
        graph: Optional["FriendGraph"] = None,
        save_path: Optional[str] = None,
    ) -> str:
        """Create a text summary report of a layout run.

        Args:
            metrics: Final metrics of the run.
            graph: Optional graph; when given, every node is listed with
                its degree and position.
            save_path: Optional file path to save the text report.

        Returns:
            The formatted report as a string.
        """
        lines = [
            "=" * 60,
            "FRIEND GRAPH LAYOUT REPORT",
            "=" * 60,
            "",
            "RUN OVERVIEW",
            "-" * 40,
            f"Run ID: {metrics.run_id}",
            f"Total Steps: {metrics.total_steps}",
            f"Simulated Time: {metrics.elapsed_seconds:.2f}s",
            f"At Rest: {'yes' if metrics.at_rest else 'no'}",
            f"Final Max Displacement: {metrics.final_max_displacement:.4f}",
            "",
            "GRAPH STATISTICS",
            "-" * 40,
            f"Friends: {metrics.node_count}",
            f"Connections: {metrics.edge_count}",
            f"Mean Degree: {metrics.mean_degree:.2f}",
            f"Max Degree: {metrics.max_degree}",
            f"Isolated Friends: {metrics.isolated_count}",
            "",
            "GEOMETRY",
            "-" * 40,
            f"Mean Edge Length: {metrics.mean_edge_length:.2f}",
            f"Max Edge Stretch: {metrics.max_edge_stretch:.2f}",
            f"Bounding Radius: {metrics.bounding_radius:.2f}",
            "",
        ]

        if graph is not None and graph.node_count:
            lines.append("Friends:")
            for index, node in graph.nodes():
                lines.append(
                    f"  - [{index}] {node.name}: degree={graph.degree(index)} "
                    f"pos=({node.position.x:.1f}, {node.position.y:.1f})"
                )
            lines.append("")

        lines.extend([
            "=" * 60,
            "END OF REPORT",
            "=" * 60,
        ])

        report = "\n".join(lines)

        if save_path:
            with open(save_path, 'w') as f:
                f.write(report)

        return report

    def __repr__(self) -> str:
        return f"LayoutPlotter(output_dir={self.output_dir!r})"
