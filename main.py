"""Main entry point for simgraph.

This module provides command-line options to run the simulation:
- Web mode (default): FastAPI driver stepping the demo scene on request
- Headless mode: step the demo scene N times and report timings
- Factory log: print every component registration and exit
"""

import argparse
import json
import logging
import sys

from simgraph.logging_config import configure_logging

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


def run_web_server():
    """Run the HTTP driver."""
    from simgraph.config import DEFAULT_API_PORT

    try:
        import uvicorn

        from backend.main import app

        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("SIMGRAPH - HTTP DRIVER")
        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("API docs available at http://localhost:%d/docs", DEFAULT_API_PORT)
        logger.info("Press Ctrl+C to stop the server")

        uvicorn.run(app, host="0.0.0.0", port=DEFAULT_API_PORT)
    except ImportError as e:
        logger.error("Error: Required dependencies not installed: %s", e)
        logger.error("Install with: pip install -e .")
        sys.exit(1)


def run_headless(steps: int, dt: float, stats_interval: int, export_state=None):
    """Step the demo scene without any server.

    Args:
        steps: Number of steps to run
        dt: Step size (0 uses each node's own dt)
        stats_interval: Log timing summary every N steps
        export_state: Optional filename to write the final scene state as JSON
    """
    from simgraph.config import SimulationConfig
    from simgraph.scenes import build_demo_scene
    from simgraph.simulation import Simulation

    simulation = Simulation(SimulationConfig.from_env())
    root = build_demo_scene()
    simulation.init(root)
    simulation.run(root, steps, dt=dt, stats_interval=stats_interval)

    logger.info("Finished %d steps, t=%.4f", simulation.step_count, root.time)
    if export_state:
        with open(export_state, "w") as f:
            json.dump(root.get_debug_info(), f, indent=2)
        logger.info("Exported scene state to %s", export_state)


def print_registrations():
    """Register the builtin components and print the factory log."""
    from simgraph.components import component_factory, register_builtin_components
    from simgraph.factory import print_factory_log

    register_builtin_components(component_factory())
    print_factory_log()


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="simgraph scene-graph simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP driver (default)
  python main.py

  # Headless run of 1000 steps of 10ms
  python main.py --headless --steps 1000 --dt 0.01

  # Per-node step sizes, compiler-style diagnostics
  python main.py --headless --steps 100 --dt 0 --log-style clang

  # Show which components are registered
  python main.py --factory-log
        """,
    )

    parser.add_argument(
        "--headless", action="store_true", help="Run in headless mode (no server)"
    )
    parser.add_argument(
        "--steps", type=int, default=1000, help="Steps to simulate in headless mode (default: 1000)"
    )
    parser.add_argument(
        "--dt", type=float, default=0.0, help="Step size; 0 uses each node's own dt (default: 0)"
    )
    parser.add_argument(
        "--stats-interval",
        type=int,
        default=100,
        help="Log timings every N steps in headless mode (default: 100)",
    )
    parser.add_argument(
        "--export-state",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Write the final scene state to a JSON file",
    )
    parser.add_argument(
        "--factory-log", action="store_true", help="Print component registrations and exit"
    )
    parser.add_argument(
        "--log-level", type=str, default=None, help="Log level (default: SIMGRAPH_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--log-style",
        choices=("default", "clang"),
        default=None,
        help="Render log records through a message formatter",
    )

    args = parser.parse_args()
    configure_logging(level=args.log_level, style=args.log_style)

    if args.dt < 0:
        parser.error("--dt must be >= 0")

    if args.factory_log:
        print_registrations()
    elif args.headless:
        logger.info("Starting headless simulation: %d steps, dt=%s", args.steps, args.dt)
        run_headless(args.steps, args.dt, args.stats_interval, export_state=args.export_state)
    else:
        run_web_server()


if __name__ == "__main__":
    main()
