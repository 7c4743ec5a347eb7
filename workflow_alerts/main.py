"""Main entry point for the workflow monitoring agent"""

import sys
import argparse

from workflow_alerts import __version__
from workflow_alerts.agent import Agent
from workflow_alerts.config.settings import load_config
from workflow_alerts.utils.logger import setup_logger


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description='Metrics and alerting agent for the investment workflow backend'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        default=None,
        help='Path to configuration file (YAML)'
    )

    parser.add_argument(
        '--log-level',
        '-l',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Override log level'
    )

    parser.add_argument(
        '--version',
        '-v',
        action='version',
        version=f'Workflow Alerts v{__version__}'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config['agent']['log_level'] = args.log_level

    logger = setup_logger(config)
    logger.info(f"Workflow Alerts v{__version__}")

    if args.config:
        logger.info(f"Loaded configuration from: {args.config}")
    else:
        logger.info("Using default configuration")

    try:
        agent = Agent(config)
        agent.run_forever()
        return 0

    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
        return 0
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
