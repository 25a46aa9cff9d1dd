# Default datadir, resolved relative to the user's home directory
DEFAULT_DATA_DIR_NAME = '.beacon-node'

# Documents written into the datadir
CLIENT_CONFIG_FILENAME = 'beacon-node.toml'
ETH2_CONFIG_FILENAME = 'eth2-spec.toml'

DEFAULT_DB_NAME = 'chain_db'
DB_TYPE_DISK = 'disk'
DB_TYPE_MEMORY = 'memory'
DB_TYPES = (DB_TYPE_DISK, DB_TYPE_MEMORY)

#
# Datadir housekeeping
#
RANDOM_TOKEN_LENGTH = 6
BACKUP_DIR_PREFIX = 'backup_'
RANDOM_DATA_DIR_INFIX = '_random_'

#
# Network defaults
#
DEFAULT_LISTEN_ADDRESS = '127.0.0.1'
DEFAULT_LIBP2P_PORT = 9000
DEFAULT_DISCOVERY_PORT = 9000
DEFAULT_MAX_PEERS = 10
DEFAULT_RPC_PORT = 5051
DEFAULT_REST_API_PORT = 5052

#
# Bootstrap
#
BOOTSTRAP_LISTEN_PORT_PATH = '/network/listen_port'
BOOTSTRAP_ETH2_CONFIG_PATH = '/spec/eth2_config'
# seconds, applied to connect and read separately
BOOTSTRAP_HTTP_TIMEOUT = 10

#
# Protocol parameter presets
#
SPEC_MAINNET = 'mainnet'
SPEC_MINIMAL = 'minimal'
SPEC_INTEROP = 'interop'
KNOWN_SPECS = (SPEC_MAINNET, SPEC_MINIMAL, SPEC_INTEROP)

#
# Integer widths used when validating CLI input
#
UINT16_MAX = 2**16 - 1
UINT64_MAX = 2**64 - 1
# `validator_count` is a machine-sized unsigned integer
USIZE_MAX = UINT64_MAX

