"""
Command-line interface for the friend graph.

Builds a graph from friend groups, runs the force layout and
reports the result.
"""

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional, Tuple
import random

from .errors import FriendGraphError
from .network.graph import FriendGraph
from .simulation.forces import ForceConfig
from .simulation.engine import LayoutEngine, LayoutConfig
from .analysis.metrics import MetricsCollector
from .visualization.plots import LayoutPlotter

logger = logging.getLogger(__name__)

SAMPLE_NAMES = [
    "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
    "Ivy", "Jack", "Kate", "Leo", "Mia", "Nick", "Olivia", "Paul",
]


def parse_year(text: str) -> date:
    """Turn a year such as "2020" into January 1st of that year."""
    try:
        year = int(text.strip())
    except ValueError:
        raise ValueError(f"invalid year: {text!r}") from None
    if not 1 <= year <= 9999:
        raise ValueError(f"year out of range: {year}")
    return date(year, 1, 1)


def collect_names(text: str) -> List[str]:
    """Split a comma separated list of names, dropping blanks."""
    return [name.strip() for name in text.split(",") if name.strip()]


def parse_group(text: str, default_year: Optional[int] = None) -> Tuple[List[str], date]:
    """
    Parse a friend group written as "Name,Name,...@YEAR".

    Without "@YEAR" the group is dated January 1st of default_year
    (the current year if not given).
    """
    names_part, sep, year_part = text.rpartition("@")
    if not sep:
        names_part = text
        year_part = str(default_year or date.today().year)

    names = collect_names(names_part)
    if not names:
        raise ValueError(f"friend group has no names: {text!r}")
    return names, parse_year(year_part)


def create_sample_groups(n_groups: int, seed: Optional[int] = None) -> List[Tuple[List[str], date]]:
    """Create random friend groups for demonstration."""
    rng = random.Random(seed)
    groups = []
    for _ in range(n_groups):
        size = rng.randint(2, 4)
        names = rng.sample(SAMPLE_NAMES, size)
        groups.append((names, date(rng.randint(2012, 2025), 1, 1)))
    return groups


def run_layout(groups: List[Tuple[List[str], date]], args) -> int:
    """Build the graph, run the layout and report."""
    config = ForceConfig(
        spring_k=args.spring_k,
        spring_rest=args.spring_rest,
        repel_k=args.repel_k,
        close_repel_k=args.close_repel_k,
        center_k=args.center_k,
    )
    graph = FriendGraph(config)

    for names, when in groups:
        graph.add_friend_group(names, when)
        logger.info("Added group %s (%d)", ", ".join(names), when.year)

    print(f"  - Friends: {graph.node_count}")
    print(f"  - Connections: {graph.edge_count}")

    engine = LayoutEngine(graph, LayoutConfig(max_dt=args.max_dt))
    collector = MetricsCollector(rest_threshold=engine.config.rest_threshold)
    engine.on_step(collector.record_step)

    print(f"\nRunning layout for up to {args.steps} steps (dt={args.dt})...")
    if args.until_rest:
        reached = engine.run_until_rest(args.steps, args.dt)
        print(f"  - Rest reached: {'yes' if reached else 'no'}")
    else:
        engine.run_steps(args.steps, args.dt)
    print(f"  - Steps completed: {engine.state.step_count}")

    metrics = collector.finalize(graph)
    plotter = LayoutPlotter(args.output_dir or ".")
    report = plotter.create_summary_report(metrics, graph)
    print("\n" + report)

    if args.output_dir:
        import os
        import matplotlib
        matplotlib.use("Agg")

        os.makedirs(args.output_dir, exist_ok=True)

        report_path = os.path.join(args.output_dir, "report.txt")
        with open(report_path, 'w') as f:
            f.write(report)
        print(f"\nReport saved to: {report_path}")

        metrics_path = os.path.join(args.output_dir, "metrics.json")
        with open(metrics_path, 'w') as f:
            f.write(metrics.to_json())
        print(f"Metrics saved to: {metrics_path}")

        layout_path = os.path.join(args.output_dir, "layout.png")
        plotter.plot_layout(graph, save_path=layout_path)
        print(f"Layout saved to: {layout_path}")

    return 0


def run_demo(args) -> int:
    """Run a demonstration layout with random friend groups."""
    print("=" * 60)
    print("Friend Graph - Demo Layout")
    print("=" * 60)
    print()

    print(f"Creating {args.groups} friend groups...")
    return run_layout(create_sample_groups(args.groups, args.seed), args)


def run_groups(args) -> int:
    """Run a layout for friend groups given on the command line."""
    groups = [parse_group(text) for text in args.group]
    print(f"Creating {len(groups)} friend groups...")
    return run_layout(groups, args)


def _add_layout_options(parser: argparse.ArgumentParser) -> None:
    defaults = ForceConfig()
    parser.add_argument(
        "--steps",
        type=int,
        default=2000,
        help="Maximum number of simulation steps (default: 2000)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=0.05,
        help="Step length in seconds (default: 0.05)",
    )
    parser.add_argument(
        "--max-dt",
        type=float,
        default=LayoutConfig.max_dt,
        help="Upper bound applied to every step (default: 0.05)",
    )
    parser.add_argument(
        "--until-rest",
        action="store_true",
        help="Stop as soon as the layout comes to rest",
    )
    parser.add_argument("--spring-k", type=float, default=defaults.spring_k)
    parser.add_argument("--spring-rest", type=float, default=defaults.spring_rest)
    parser.add_argument("--repel-k", type=float, default=defaults.repel_k)
    parser.add_argument("--close-repel-k", type=float, default=defaults.close_repel_k)
    parser.add_argument("--center-k", type=float, default=defaults.center_k)
    parser.add_argument(
        "-o", "--output-dir",
        type=str,
        default=None,
        help="Directory for output files",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="friend-graph",
        description="""
Friend Graph - force-directed layout of friend groups

Every group of friends becomes a clique of connections dated with the
year the group was formed. The layout is computed with a spring /
repulsion simulation.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run a layout of random friend groups",
    )
    demo_parser.add_argument(
        "-g", "--groups",
        type=int,
        default=6,
        help="Number of friend groups to create (default: 6)",
    )
    demo_parser.add_argument(
        "-s", "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    _add_layout_options(demo_parser)

    # Layout command
    layout_parser = subparsers.add_parser(
        "layout",
        help="Run a layout of the given friend groups",
    )
    layout_parser.add_argument(
        "group",
        nargs="+",
        help='Friend group as "Name,Name,...@YEAR"',
    )
    _add_layout_options(layout_parser)

    # Version command
    parser.add_argument(
        "-v", "--version",
        action="store_true",
        help="Show version information",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"friend-graph v{__version__}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            return run_demo(args)
        return run_groups(args)
    except (FriendGraphError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
