"""
Generate text, JSON and CSV reports for single runs and replication sets.
"""
import os
from typing import List

import pandas as pd

from ..core.metrics_collector import SimulationResult
from ..utils.io import save_json


def format_report(result: SimulationResult) -> str:
    """Human-readable report of one run."""
    lines = [
        "=== Simulation Results ===",
        f"Final clock: {result.clock:.2f} (statistics from t={result.stats_start:.2f})",
        f"Products: {result.products_departed} ({result.products_in_window} after warm-up)",
        f"Throughput: {result.throughput:.5f} products/unit time",
        f"Tie-break policy: {result.tie_break_policy}",
        f"Events dispatched: {result.events_dispatched}",
        "",
        "Workstations:",
    ]
    for label, ws in result.workstations.items():
        lines.append(
            f"  {label:<4} made={ws.products_made:<6} busy={ws.total_busy:10.2f} "
            f"P(busy)={ws.utilization:.4f}"
        )

    lines.append("")
    lines.append("Queues:")
    for label, q in result.queues.items():
        lines.append(
            f"  {label:<4} avg occupancy={q.average_occupancy:.4f} "
            f"departures={q.departures:<6} length={q.length}/{q.capacity}"
        )

    lines.append("")
    lines.append("Inspectors:")
    for label, insp in result.inspectors.items():
        lines.append(
            f"  {label:<5} inspected={insp.inspected:<6} blocked={insp.total_blocked:10.2f} "
            f"P(blocked)={insp.blocking_probability:.4f} state={insp.state}"
        )

    return "\n".join(lines)


def format_summary(summary: pd.DataFrame, confidence_level: float = 0.95) -> str:
    """Human-readable table of cross-replication statistics."""
    header = (f"{'statistic':<22}{'mean':>12}{'variance':>14}"
              f"{f'{confidence_level:.0%} half-width':>18}")
    lines = ["=== Replication Summary ===", header, "-" * len(header)]
    for name, row in summary.iterrows():
        lines.append(
            f"{name:<22}{row['mean']:>12.5f}{row['variance']:>14.3e}{row['half_width']:>18.5f}"
        )
    return "\n".join(lines)


def write_json(result: SimulationResult, out_dir: str, filename: str = "result.json") -> str:
    """Write one run as JSON and return the file path."""
    path = os.path.join(out_dir, filename)
    save_json(result.to_dict(), path)
    return path


def write_csv(df: pd.DataFrame, out_dir: str, filename: str = "replications.csv") -> str:
    """Write per-replication statistics as CSV and return the file path."""
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, filename)
    df.to_csv(path)
    return path


def write_summary(summary: pd.DataFrame, results: List[SimulationResult], out_dir: str,
                  filename: str = "summary.json") -> str:
    """Write the replication summary together with every run as JSON."""
    path = os.path.join(out_dir, filename)
    save_json({
        "replications": len(results),
        "summary": summary.to_dict(orient="index"),
        "runs": [result.to_dict() for result in results],
    }, path)
    return path
