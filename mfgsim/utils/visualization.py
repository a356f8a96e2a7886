"""Visualization utilities for replication results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

sns.set_style("whitegrid")
sns.set_palette("husl")


def plot_results(df: pd.DataFrame, summary: pd.DataFrame, output_dir: Path) -> None:
    """Generate all visualization plots.

    Args:
        df: Per-replication statistics
        summary: Cross-replication summary (see ``experiments.summarize``)
        output_dir: Directory to save plots
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    plot_confidence_intervals(summary, output_dir / "confidence_intervals.png")
    plot_replication_spread(df, output_dir / "replication_spread.png")


def plot_confidence_intervals(summary: pd.DataFrame, output_path: Path) -> None:
    """Plot mean and confidence interval of each probability and occupancy.

    Args:
        summary: Cross-replication summary
        output_path: Output file path
    """
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    groups = [
        ("p_busy_", "P(busy)", "Workstation Utilization"),
        ("avg_occupancy_", "Components", "Average Queue Occupancy"),
        ("p_blocked_", "P(blocked)", "Inspector Blocking"),
    ]

    for ax, (prefix, ylabel, title) in zip(axes, groups):
        rows = summary[summary.index.str.startswith(prefix)]
        labels = [name[len(prefix):] for name in rows.index]
        ax.bar(labels, rows["mean"], yerr=rows["half_width"], capsize=4, color='steelblue')
        ax.set_ylabel(ylabel)
        ax.set_title(title)
        ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def plot_replication_spread(df: pd.DataFrame, output_path: Path) -> None:
    """Plot the throughput of each replication.

    Args:
        df: Per-replication statistics
        output_path: Output file path
    """
    fig, ax = plt.subplots(figsize=(10, 4))
    sns.stripplot(x=df["throughput"], ax=ax, size=8, color='coral')
    ax.axvline(df["throughput"].mean(), linestyle='--', color='gray', label='Mean')
    ax.set_xlabel('Throughput (products/unit time)')
    ax.set_title('Throughput Across Replications')
    ax.legend()

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
