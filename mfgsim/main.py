"""Main entry point for the manufacturing line simulator."""

import argparse
import sys
from pathlib import Path

from mfgsim.experiments.replication import ReplicationRunner
from mfgsim.models.line_config import LineConfig
from mfgsim.policies.routing_policy import POLICIES
from mfgsim.reports.report_generator import format_report, format_summary, write_csv, write_summary
from mfgsim.utils.logger import set_global_level, setup_logger
from configs import DEFAULT_CONFIG_PATH, load_layered, merge_configs


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="mfgsim: Manufacturing Line Discrete Event Simulator"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to configuration file (defaults to the packaged default.yaml)",
    )
    parser.add_argument(
        "--override",
        type=str,
        action="append",
        default=[],
        help="Configuration file merged over --config (repeatable, applied in order)",
    )
    parser.add_argument(
        "--replications",
        type=int,
        default=None,
        help="Number of replications (overrides the configuration)",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=None,
        help="Products to produce per replication (overrides the configuration)",
    )
    parser.add_argument(
        "--policy",
        type=str,
        choices=sorted(POLICIES),
        default=None,
        help="Tie-break policy for C1 queue selection",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results",
        help="Directory to save results",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Generate visualization plots",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args) -> LineConfig:
    """Load, merge and validate the configuration named by ``args``."""
    config = load_layered(args.config, args.override)

    cli_overrides = {'simulation': {}, 'replications': {}}
    if args.target is not None:
        cli_overrides['simulation']['target_products'] = args.target
    if args.policy is not None:
        cli_overrides['simulation']['tie_break_policy'] = args.policy
    if args.replications is not None:
        cli_overrides['replications']['count'] = args.replications

    return LineConfig(merge_configs(config, cli_overrides))


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    # Setup logging
    log_level = "DEBUG" if args.verbose else "INFO"
    set_global_level(log_level)
    logger = setup_logger("mfgsim")

    logger.info("=== mfgsim: Manufacturing Line Simulator ===")
    logger.info(f"Loading configuration from {args.config}")

    try:
        config = build_config(args)
        logger.info(f"Configuration: {config}")

        # Run replications
        runner = ReplicationRunner(config)
        df = runner.run()
        summary = runner.summarize(df)

        for index, result in enumerate(runner.results):
            logger.info(f"Replication {index}:\n{format_report(result)}")
        logger.info("\n" + format_summary(summary, config.confidence_level))

        # Save results
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        csv_path = write_csv(df, str(output_dir))
        summary_path = write_summary(summary, runner.results, str(output_dir))
        logger.info(f"Results saved to {csv_path} and {summary_path}")

        # Generate visualizations
        if args.visualize:
            from mfgsim.utils.visualization import plot_results

            logger.info("Generating visualization plots...")
            plot_results(df, summary, output_dir)
            logger.info(f"Plots saved to {output_dir}")

        logger.info("Simulation completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Simulation failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
