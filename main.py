#!/usr/bin/env python3
"""
SF Bridge - Salesforce CLI tools over MCP
=========================================

Main entry point for the bridge process.

Usage:
    python main.py                       # Serve on stdio with defaults
    python main.py --config config.yaml  # Load settings from YAML
    python main.py --log-level DEBUG --log-file
    python main.py --help                # Show help
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from infra.config import BridgeConfig, load_config
from infra.logging import configure_logging, get_logger, stderr_console
from infra.server import BridgeServer
from tools.dispatcher import ToolDispatcher
from tools.invoker import ProcessInvoker
from tools.salesforce import create_salesforce_tools


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Salesforce CLI MCP bridge")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--executable", default=None, help="Name of the Salesforce CLI on PATH")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-dir", default=None, help="Directory for JSON log files")
    parser.add_argument("--log-file", action="store_true", help="Also write JSON logs to --log-dir")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> BridgeConfig:
    """Config file and environment, then command-line flags on top."""
    config = load_config(args.config)

    if args.executable:
        config.executable = args.executable
    if args.log_level:
        config.log_level = args.log_level
    if args.log_dir:
        config.log_dir = args.log_dir
    if args.log_file:
        config.log_to_file = True

    return config


def build_server(config: BridgeConfig) -> BridgeServer:
    """Wire invoker -> registry -> dispatcher -> MCP server."""
    invoker = ProcessInvoker(executable=config.executable)
    registry = create_salesforce_tools(invoker)
    return BridgeServer(ToolDispatcher(registry))


async def serve(config: BridgeConfig) -> None:
    await build_server(config).run()


def main(argv: Optional[List[str]] = None) -> None:
    try:
        config = resolve_config(parse_args(argv))
        configure_logging(
            level=config.log_level_value,
            log_dir=config.log_dir,
            file=config.log_to_file,
        )
        get_logger("main").debug(f"Using CLI executable: {config.executable}")
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        stderr_console.print(f"Fatal error in main(): {e}", markup=False, highlight=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
