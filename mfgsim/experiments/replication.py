"""Run independent replications of the line and summarize their statistics."""

import math
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd
from scipy import stats
from tqdm import tqdm

from ..core.metrics_collector import SimulationResult
from ..core.simulator import Simulator
from ..models.line_config import LineConfig
from ..utils.logger import setup_logger

SUMMARY_COLUMNS = ["mean", "variance", "std", "half_width", "ci_low", "ci_high"]


def summarize(df: pd.DataFrame, confidence_level: float = 0.95) -> pd.DataFrame:
    """Mean, sample variance and t confidence interval of every column.

    Args:
        df: One row per replication, one column per statistic
        confidence_level: Two-sided confidence level in (0, 1)

    Returns:
        DataFrame indexed by statistic name with ``SUMMARY_COLUMNS``.
        Spread columns are 0.0 when there is a single replication.
    """
    n = len(df)
    if n == 0:
        raise ValueError("Cannot summarize zero replications")

    means = df.mean()
    if n > 1:
        variances = df.var(ddof=1)
        t_crit = stats.t.ppf(1.0 - (1.0 - confidence_level) / 2.0, n - 1)
    else:
        variances = pd.Series(0.0, index=df.columns)
        t_crit = 0.0

    stds = np.sqrt(variances)
    half_widths = t_crit * stds / math.sqrt(n)

    summary = pd.DataFrame({
        "mean": means,
        "variance": variances,
        "std": stds,
        "half_width": half_widths,
        "ci_low": means - half_widths,
        "ci_high": means + half_widths,
    })
    return summary[SUMMARY_COLUMNS]


class ReplicationRunner:
    """Runs independent replications with per-replication seed offsets.

    Replication ``i`` uses the configured seeds shifted by
    ``i * seed_increment``, so each run is reproducible on its own.
    """

    def __init__(self, config: Union[Dict, LineConfig], show_progress: bool = True):
        """Initialize runner.

        Args:
            config: Configuration dictionary or validated LineConfig
            show_progress: Display a progress bar while running
        """
        self.config = config if isinstance(config, LineConfig) else LineConfig(config)
        self.show_progress = show_progress
        self.logger = setup_logger(self.__class__.__name__)

        self.results: List[SimulationResult] = []

    def run(self, num_replications: Optional[int] = None) -> pd.DataFrame:
        """Run the replications.

        Args:
            num_replications: Override of the configured replication count

        Returns:
            DataFrame with one row per replication (index ``replication``)
            and one column per statistic of ``SimulationResult.stats``
        """
        count = num_replications if num_replications is not None else self.config.num_replications
        if count < 1:
            raise ValueError(f"Replication count must be positive, got {count}")

        self.logger.info(
            f"Running {count} replications of {self.config.target_products} products "
            f"(policy={self.config.tie_break_policy})"
        )

        self.results = []
        rows = []
        for index in tqdm(range(count), desc="Replications", disable=not self.show_progress):
            simulator = Simulator(self.config.replication(index))
            result = simulator.run()
            self.results.append(result)
            rows.append(result.stats())

        df = pd.DataFrame(rows)
        df.index.name = "replication"
        return df

    def summarize(self, df: pd.DataFrame) -> pd.DataFrame:
        """Summarize ``df`` at the configured confidence level."""
        return summarize(df, self.config.confidence_level)
