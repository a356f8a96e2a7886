"""Basic simulation example."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mfgsim.core.simulator import Simulator
from mfgsim.reports.report_generator import format_report
from mfgsim.utils.logger import setup_logger
from configs import load_config


def main():
    """Run a single replication and compare tie-break policies."""
    logger = setup_logger("BasicSimulation")

    logger.info("=== Basic Manufacturing Line Simulation ===")

    # Load configuration
    config = load_config()

    # Customize for this example
    config['simulation']['target_products'] = 2000
    config['simulation']['warmup_products'] = 200

    logger.info(f"Producing {config['simulation']['target_products']} products "
                f"after {config['simulation']['warmup_products']} warm-up products")

    # Create and run simulator
    result = Simulator(config).run()
    logger.info("\n" + format_report(result))

    # Same seeds, different tie-break policies
    logger.info("\n=== Tie-break policies ===")
    for policy in ("lowest_index", "highest_index", "random", "prefer_blocked"):
        config['simulation']['tie_break_policy'] = policy
        stats = Simulator(config).run().stats()
        logger.info(
            f"  {policy:<15} throughput={stats['throughput']:.5f} "
            f"P(blocked insp1)={stats['p_blocked_insp1']:.3f} "
            f"P(blocked insp2)={stats['p_blocked_insp2']:.3f}"
        )


if __name__ == "__main__":
    main()
