#!/usr/bin/env python3
"""
Main entry point for running the agentbus MCP server over stdio.

Usage:
    agentbus --data-dir ./messages
    python -m agentbus.broker.main --config agentbus.yaml --log-level DEBUG
"""

import argparse
import sys

from agentbus.broker.server import create_server
from agentbus.broker.store import MessageStore
from agentbus.core.errors import AgentBusError
from agentbus.utils.config import Config
from agentbus.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='agentbus - topic message board for agent-to-agent communication'
    )
    
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML configuration file'
    )
    
    parser.add_argument(
        '--data-dir',
        type=str,
        default=None,
        help='Directory for topic files (default: ./messages)'
    )
    
    parser.add_argument(
        '--default-topic',
        type=str,
        default=None,
        help='Topic used when a request names none (default: general)'
    )
    
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)'
    )
    
    parser.add_argument(
        '--log-format',
        type=str,
        default=None,
        choices=['json', 'console'],
        help='Log output format (default: console)'
    )
    
    return parser.parse_args(argv)


def load_config(args) -> Config:
    """Build configuration from files, environment and command-line overrides."""
    config = Config(args.config)
    
    if args.data_dir:
        config.set("store.data_dir", args.data_dir)
    if args.default_topic:
        config.set("store.default_topic", args.default_topic)
    if args.log_level:
        config.set("logging.level", args.log_level)
    if args.log_format:
        config.set("logging.format", args.log_format)
    
    return config


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    config = load_config(args)
    
    # stdout carries the protocol
    configure_logging(
        log_level=config.get("logging.level", "INFO"),
        log_format=config.get("logging.format", "console"),
        log_output=config.get("logging.output", "stderr"),
    )
    logger.debug("Loaded configuration", config=config.to_dict())
    
    try:
        store = MessageStore.from_config(config)
    except AgentBusError as e:
        logger.error("Invalid store configuration", error=str(e))
        sys.exit(2)
    
    server = create_server(store)
    
    logger.info("agentbus server running on stdio", data_dir=str(store.data_dir))
    
    try:
        server.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")


if __name__ == '__main__':
    main()
