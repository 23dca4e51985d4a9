"""Allow running the service as: python -m portfolio_sync [--config path] [--once]."""

import argparse
import asyncio
import sys

from portfolio_sync.api.runner import main, refresh_once
from portfolio_sync.config.loader import load_config
from portfolio_sync.logging.setup import setup_logging

parser = argparse.ArgumentParser(description="Portfolio snapshot sync service")
parser.add_argument("--config", default=None, help="Path to config.yaml")
parser.add_argument(
    "--once",
    action="store_true",
    help="Run a single refresh cycle and exit instead of serving the API",
)
args = parser.parse_args()

if args.once:
    config = load_config(args.config)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    sys.exit(0 if asyncio.run(refresh_once(config)) else 1)

main(config_path=args.config)
