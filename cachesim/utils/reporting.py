from __future__ import annotations
import json
from pathlib import Path
from typing import List, Dict, Any
from ..config import SimConfig
from ..runtime.simulator import SimResult
from . import viz

def generate_report_json(result: SimResult, config: SimConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary for one simulation run."""
    geometry = config.geometry()
    report_data = {
        "trace": config.trace,
        "policy": str(config.policy()),
        "geometry": geometry.describe(),
    }
    report_data.update(result.to_dict())
    return report_data

def format_summary(report_data: Dict[str, Any]) -> str:
    geometry = report_data["geometry"]
    lines = [
        "--- Cache Simulation Summary ---",
        f"  Trace    : {report_data['trace']}",
        f"  Cache    : {geometry['mode']} {geometry['cache_size_bytes']} B, "
        f"{geometry['line_size_bytes']} B lines, {geometry['num_sets']} sets x {geometry['lines_per_set']} lines",
        f"  Policy   : {report_data['policy']}",
        f"  Accesses : {report_data['accesses']}",
        f"  Hits     : {report_data['hits']}",
        f"  Misses   : {report_data['misses']}",
        f"  Hit rate : {report_data['hit_rate']:.2%}",
    ]
    return "\n".join(lines)

def format_comparison(rows: List[Dict[str, Any]]) -> str:
    """Renders compare() rows as a fixed-width table."""
    if not rows:
        return "No runs to compare."
    header = f"{'type':<5}{'policy':<7}{'sets':>8}{'ways':>6}{'hits':>10}{'accesses':>10}{'hit rate':>10}"
    out = [header, "-" * len(header)]
    for row in rows:
        out.append(
            f"{row['cache_type']:<5}{row['policy']:<7}{row['num_sets']:>8}{row['lines_per_set']:>6}"
            f"{row['hits']:>10}{row['accesses']:>10}{row['hit_rate']:>10.2%}"
        )
    return "\n".join(out)

def generate_report(result: SimResult, config: SimConfig):
    """Generates all report artifacts."""
    report_data = generate_report_json(result, config)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    if config.chart:
        viz.export_hit_rate(result.access_history, result.hit_history, str(output_dir / "report.html"))

    if config.ascii_chart:
        print(viz.export_hit_rate_ascii(result.access_history, result.hit_history))

    print(format_summary(report_data))
    print(f"\nReports generated in {output_dir.absolute()}")
    return report_data

def generate_comparison_report(rows: List[Dict[str, Any]], config: SimConfig):
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "compare.json", "w") as f:
        json.dump(rows, f, indent=4)

    print(format_comparison(rows))
    print(f"\nComparison written to {output_dir.absolute() / 'compare.json'}")
