import argparse
from typing import (
    Any,
    Dict,
    Optional,
)

from beacon_node.arguments import (
    BOOTSTRAP,
    QUICK,
    RECENT,
    SUBCOMMAND,
    TESTNET,
    TESTNET_METHOD,
)
from beacon_node.constants import (
    DB_TYPES,
    DEFAULT_DATA_DIR_NAME,
    KNOWN_SPECS,
)

LOG_LEVEL_CHOICES = ('debug', 'info', 'warning', 'error', 'critical')

TESTNET_HELP = (
    "Create a new beacon chain in a fresh datadir. Without this sub-command the node "
    "resumes from an existing datadir."
)
BOOTSTRAP_HELP = "Connect to an existing network using the HTTP API of one of its nodes"
RECENT_HELP = "Create a new chain whose genesis was a given number of minutes ago"
QUICK_HELP = "Create a new chain with an explicit genesis time"


class LogLevelAction(argparse.Action):
    """
    Collect ``-l LEVEL`` and ``-l LOGGER=LEVEL`` values into a dict. The level given
    without a logger name is stored under the ``None`` key.
    """
    def __call__(self,
                 parser: argparse.ArgumentParser,
                 namespace: argparse.Namespace,
                 value: Any,
                 option_string: str = None) -> None:
        if '=' in value:
            name, _, level = value.partition('=')
            if not name:
                raise argparse.ArgumentError(self, f"Missing logger name in {value!r}")
        else:
            name, level = None, value

        level = level.lower()
        if level not in LOG_LEVEL_CHOICES:
            raise argparse.ArgumentError(
                self,
                f"Invalid log level {level!r}, expected one of: {', '.join(LOG_LEVEL_CHOICES)}",
            )

        log_levels: Dict[Optional[str], str] = dict(getattr(namespace, self.dest) or {})
        log_levels[name] = level
        setattr(namespace, self.dest, log_levels)


parser = argparse.ArgumentParser(description='Beacon node')

#
# Filesystem
#
filesystem_parser = parser.add_argument_group('filesystem')
filesystem_parser.add_argument(
    '--datadir',
    dest='datadir',
    help=f"Data directory for the databases and documents (default: ~/{DEFAULT_DATA_DIR_NAME})",
)
filesystem_parser.add_argument(
    '--db',
    dest='db',
    help=f"Type of database to use: {', '.join(DB_TYPES)}",
)
filesystem_parser.add_argument(
    '--logfile',
    dest='logfile',
    help="File to write DEBUG logs to, in addition to stderr",
)

#
# Logging
#
logging_parser = parser.add_argument_group('logging')
logging_parser.add_argument(
    '-l',
    '--log-level',
    dest='log_levels',
    action=LogLevelAction,
    metavar='[LOGGER=]LEVEL',
    help=(
        "Level of the stderr logging output, or of a single logger when given as "
        f"LOGGER=LEVEL. May be repeated. Levels: {', '.join(LOG_LEVEL_CHOICES)}"
    ),
)

#
# Network
#
network_parser = parser.add_argument_group('network')
network_parser.add_argument(
    '--listen-address',
    dest='listen-address',
    help="IP address libp2p listens on",
)
network_parser.add_argument(
    '--port',
    dest='port',
    help="TCP port libp2p listens on",
)
network_parser.add_argument(
    '--discovery-port',
    dest='discovery-port',
    help="UDP port peer discovery listens on",
)
network_parser.add_argument(
    '--boot-nodes',
    dest='boot-nodes',
    help="Comma-separated list of multiaddrs to use as boot nodes",
)
network_parser.add_argument(
    '--port-bump',
    dest='port-bump',
    help="Offset added to every listening port, to run several nodes on one host",
)

#
# RPC and HTTP API
#
api_parser = parser.add_argument_group('api')
api_parser.add_argument(
    '--rpc',
    dest='rpc',
    action='store_true',
    help="Enable the RPC server",
)
api_parser.add_argument(
    '--rpc-address',
    dest='rpc-address',
    help="IP address the RPC server listens on",
)
api_parser.add_argument(
    '--rpc-port',
    dest='rpc-port',
    help="Port the RPC server listens on",
)
api_parser.add_argument(
    '--api-port',
    dest='api-port',
    help="Port the HTTP API server listens on",
)

subparser = parser.add_subparsers(dest=SUBCOMMAND)

#
# testnet
#
testnet_parser = subparser.add_parser(TESTNET, help=TESTNET_HELP)
testnet_parser.add_argument(
    '-r',
    '--random-datadir',
    dest='random-datadir',
    action='store_true',
    help="Append a random string to the datadir name",
)
testnet_parser.add_argument(
    '--eth2-config',
    dest='eth2-config',
    help="Path to an eth2 config file to use instead of a preset",
)
testnet_parser.add_argument(
    '--client-config',
    dest='client-config',
    help="Path to a client config file to use instead of the defaults",
)
testnet_parser.add_argument(
    '-s',
    '--spec',
    dest='spec',
    help=f"Preset of specification constants: {', '.join(KNOWN_SPECS)}",
)
testnet_parser.add_argument(
    '-f',
    '--force',
    dest='force',
    action='store_true',
    help="Back up any existing documents and database in the datadir before writing",
)

testnet_subparser = testnet_parser.add_subparsers(dest=TESTNET_METHOD)

bootstrap_parser = testnet_subparser.add_parser(BOOTSTRAP, help=BOOTSTRAP_HELP)
bootstrap_parser.add_argument(
    '--server',
    dest='server',
    required=True,
    help="URL of the HTTP API of a running beacon node, e.g. http://localhost:5052",
)
bootstrap_parser.add_argument(
    '--libp2p-port',
    dest='libp2p-port',
    help="libp2p port of the server, fetched from the server when omitted",
)

recent_parser = testnet_subparser.add_parser(RECENT, help=RECENT_HELP)
recent_parser.add_argument(
    '--validator_count',
    dest='validator_count',
    required=True,
    help="Number of validators in the genesis state",
)
recent_parser.add_argument(
    '--minutes',
    dest='minutes',
    required=True,
    help="Number of minutes between genesis and now",
)

quick_parser = testnet_subparser.add_parser(QUICK, help=QUICK_HELP)
quick_parser.add_argument(
    '--validator_count',
    dest='validator_count',
    required=True,
    help="Number of validators in the genesis state",
)
quick_parser.add_argument(
    '--genesis_time',
    dest='genesis_time',
    required=True,
    help="Genesis time as a unix timestamp",
)
