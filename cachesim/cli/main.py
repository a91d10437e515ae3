from __future__ import annotations
import argparse
import json
from ..config import SimConfig
from ..errors import CacheSimError, ConfigurationError
from ..runtime.simulator import run as run_sim, compare
from ..utils.logging import get_logger, set_log_level
from ..utils.reporting import generate_report, generate_comparison_report

logger = get_logger(__name__)


def _load_config(args) -> SimConfig:
    config = SimConfig.from_args(args)
    config.validate()
    set_log_level(config.log_level)
    return config


def _require_trace(config: SimConfig):
    if not config.trace:
        raise ConfigurationError("No trace file given (pass it as an argument or set 'trace' in the config).")


def cmd_run(args):
    """Handles the 'run' command."""
    config = _load_config(args)
    _require_trace(config)

    result = run_sim(config)
    generate_report(result, config)
    return 0


def cmd_compare(args):
    """Handles the 'compare' command."""
    config = _load_config(args)
    _require_trace(config)

    rows = compare(config)
    generate_comparison_report(rows, config)
    return 0


def cmd_geometry(args):
    """Handles the 'geometry' command."""
    config = _load_config(args)
    print(json.dumps(config.geometry().describe(), indent=2))
    return 0


def _add_cache_args(p: argparse.ArgumentParser):
    # Defaults are None so YAML values are not overridden unless given
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file to override defaults")
    g = p.add_argument_group("Cache Geometry Arguments")
    g.add_argument("--cache-size-exp", type=int, default=None, dest="cache_size_exp",
                   help="Cache size as a power of two in bytes (10 -> 1 KiB)")
    g.add_argument("--line-size-exp", type=int, default=None, dest="line_size_exp",
                   help="Line size as a power of two in bytes (6 -> 64 B)")
    g.add_argument("--cache-type", type=str.lower, default=None, dest="cache_type",
                   choices=["fa", "dm", "sa"],
                   help="Fully associative, direct mapped, or set associative")
    g.add_argument("--ways", type=int, default=None, choices=[1, 2, 3, 4],
                   help="Set-associative only: 1, 2, 3, 4 for 2, 4, 8, 16 lines per set")
    p.add_argument("--policy", type=str, default=None, dest="replacement_policy",
                   help="Replacement policy: L or l for LRU, anything else for FIFO")
    p.add_argument("--log-level", type=str, default=None, dest="log_level",
                   help="Logging level (DEBUG shows every eviction)")


def build_parser():
    p = argparse.ArgumentParser(
        prog="cachesim",
        description="Trace-driven cache hit/miss simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace and report hit statistics",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pr.add_argument("trace", nargs='?', default=None,
                    help="Path to trace file (optional if specified in config)")
    _add_cache_args(pr)
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save simulation reports")
    pr.add_argument("--no-chart", action="store_const", const=False, default=None, dest="chart",
                    help="Do not write the HTML hit-rate chart")
    pr.add_argument("--ascii-chart", action="store_const", const=True, default=None, dest="ascii_chart",
                    help="Print an ASCII hit-rate chart to the console")
    pr.set_defaults(func=cmd_run)

    # --- Compare Command ---
    pc = sub.add_parser("compare", help="Replay a trace under every cache type and policy",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pc.add_argument("trace", nargs='?', default=None,
                    help="Path to trace file (optional if specified in config)")
    _add_cache_args(pc)
    pc.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save the comparison table")
    pc.set_defaults(func=cmd_compare)

    # --- Geometry Command ---
    pg = sub.add_parser("geometry", help="Print the derived cache geometry",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_cache_args(pg)
    pg.set_defaults(func=cmd_geometry)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (CacheSimError, OSError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
