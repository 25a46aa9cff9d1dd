import logging
import os
from typing import Sequence

import argcomplete

from beacon_node._utils.logging import (
    get_logger,
    set_logger_levels,
    setup_file_logging,
    setup_stderr_logging,
)
from beacon_node.builder import (
    Configs,
    get_configs,
)
from beacon_node.cli_parser import parser
from beacon_node.exceptions import BaseBeaconNodeError

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}


def display_launch_logs(configs: Configs) -> None:
    client_config, eth2_config = configs
    logger = get_logger('beacon_node')
    logger.info("Started main process (pid=%d)", os.getpid())
    logger.info("Datadir: %s", client_config.data_dir)
    logger.info("Start method: %s", client_config.beacon_chain_start_method)
    logger.info("Specification constants: %s", eth2_config.spec_constants)
    logger.info(
        "Listening: libp2p=%s discovery=%d rpc=%s rest_api=%s",
        ', '.join(str(maddr) for maddr in client_config.network.listen_multiaddrs),
        client_config.network.discovery_port,
        client_config.rpc.port if client_config.rpc.enabled else 'disabled',
        client_config.rest_api.port if client_config.rest_api.enabled else 'disabled',
    )
    for boot_node in client_config.network.boot_nodes:
        logger.info("Boot node: %s", boot_node)
    if client_config.log_file is not None:
        logger.info("DEBUG log file is created at %s", client_config.log_file)


def run(argv: Sequence[str] = None) -> Configs:
    """
    Parse ``argv``, resolve the configuration documents and return them.

    Exits the process with a non-zero status if the configuration cannot be resolved.
    """
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    log_levels = args.log_levels or {}
    setup_stderr_logging(LOG_LEVELS[log_levels.get(None, 'info')])
    set_logger_levels({
        name: LOG_LEVELS[level]
        for name, level in log_levels.items()
        if name is not None
    })
    logger = get_logger('beacon_node.main')

    try:
        configs = get_configs(vars(args), logger)
    except BaseBeaconNodeError as err:
        logger.error("Unable to resolve configuration: %s", err)
        parser.exit(status=1, message=f"{err}\n")

    client_config, _ = configs
    if client_config.log_file is not None:
        setup_file_logging(client_config.log_file, logging.DEBUG)

    display_launch_logs(configs)
    return configs


def main() -> None:
    run()
