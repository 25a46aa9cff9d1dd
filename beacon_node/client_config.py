from dataclasses import dataclass, field, replace
import ipaddress
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from eth_utils import to_dict, to_tuple
from multiaddr import Multiaddr

from beacon_node.constants import (
    DB_TYPE_DISK,
    DB_TYPES,
    DEFAULT_DATA_DIR_NAME,
    DEFAULT_DB_NAME,
    DEFAULT_DISCOVERY_PORT,
    DEFAULT_LIBP2P_PORT,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_MAX_PEERS,
    DEFAULT_REST_API_PORT,
    DEFAULT_RPC_PORT,
    SPEC_MINIMAL,
    UINT16_MAX,
    UINT64_MAX,
    USIZE_MAX,
)


#
# Start methods
#
@dataclass(frozen=True)
class Resume:
    """
    Continue from the database of an existing datadir.
    """
    pass


@dataclass(frozen=True)
class HttpBootstrap:
    """
    Fetch the protocol parameters and a seed address from a running node.
    """
    server: str
    port: Optional[int] = None


@dataclass(frozen=True)
class RecentGenesis:
    """
    Synthesize a genesis state dated ``minutes`` before now.
    """
    validator_count: int
    minutes: int


@dataclass(frozen=True)
class Generated:
    """
    Synthesize a genesis state at an explicit ``genesis_time``.
    """
    validator_count: int
    genesis_time: int


StartMethod = Union[Resume, HttpBootstrap, RecentGenesis, Generated]


def _check_uint(name: str, value: Any, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected an integer for {name}, got {value!r}")
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _check_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected a string for {name}, got {value!r}")
    return value


def _check_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Expected a boolean for {name}, got {value!r}")
    return value


def _check_ip_address(name: str, value: Any) -> str:
    return str(ipaddress.ip_address(_check_str(name, value)))


@to_dict
def start_method_to_formatted_dict(method: StartMethod) -> Iterable[Tuple[str, Any]]:
    yield 'type', type(method).__name__
    if isinstance(method, Resume):
        pass
    elif isinstance(method, HttpBootstrap):
        yield 'server', method.server
        if method.port is not None:
            yield 'port', method.port
    elif isinstance(method, RecentGenesis):
        yield 'validator_count', method.validator_count
        yield 'minutes', method.minutes
    elif isinstance(method, Generated):
        yield 'validator_count', method.validator_count
        yield 'genesis_time', method.genesis_time
    else:
        raise TypeError(f"Unsupported start method: {method!r}")


def start_method_from_formatted_dict(data: Mapping[str, Any]) -> StartMethod:
    method_type = data['type']
    if method_type == 'Resume':
        return Resume()
    elif method_type == 'HttpBootstrap':
        port = data.get('port')
        return HttpBootstrap(
            server=_check_str('server', data['server']),
            port=None if port is None else _check_uint('port', port, UINT16_MAX),
        )
    elif method_type == 'RecentGenesis':
        return RecentGenesis(
            validator_count=_check_uint('validator_count', data['validator_count'], USIZE_MAX),
            minutes=_check_uint('minutes', data['minutes'], UINT64_MAX),
        )
    elif method_type == 'Generated':
        return Generated(
            validator_count=_check_uint('validator_count', data['validator_count'], USIZE_MAX),
            genesis_time=_check_uint('genesis_time', data['genesis_time'], UINT64_MAX),
        )
    else:
        raise ValueError(f"Unknown start method type: {method_type!r}")


#
# Document sections
#
@to_tuple
def _decode_multiaddrs(values: Any) -> Iterable[Multiaddr]:
    if not isinstance(values, list):
        raise TypeError(f"Expected a list of multiaddrs, got {values!r}")
    for value in values:
        yield Multiaddr(_check_str('boot_nodes', value))


@dataclass(frozen=True)
class NetworkConfig:
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    libp2p_port: int = DEFAULT_LIBP2P_PORT
    discovery_address: str = DEFAULT_LISTEN_ADDRESS
    discovery_port: int = DEFAULT_DISCOVERY_PORT
    max_peers: int = DEFAULT_MAX_PEERS
    boot_nodes: Tuple[Multiaddr, ...] = ()

    @property
    def listen_multiaddrs(self) -> Tuple[Multiaddr, ...]:
        """
        Return the multiaddrs libp2p listens on, derived from the listen address and port.
        """
        protocol = 'ip6' if ipaddress.ip_address(self.listen_address).version == 6 else 'ip4'
        return (Multiaddr(f"/{protocol}/{self.listen_address}/tcp/{self.libp2p_port}"),)

    def to_formatted_dict(self) -> Dict[str, Any]:
        return {
            'listen_address': self.listen_address,
            'libp2p_port': self.libp2p_port,
            'discovery_address': self.discovery_address,
            'discovery_port': self.discovery_port,
            'max_peers': self.max_peers,
            'boot_nodes': [str(maddr) for maddr in self.boot_nodes],
        }

    @classmethod
    def from_formatted_dict(cls, data: Mapping[str, Any]) -> 'NetworkConfig':
        return cls(
            listen_address=_check_ip_address('listen_address', data['listen_address']),
            libp2p_port=_check_uint('libp2p_port', data['libp2p_port'], UINT16_MAX),
            discovery_address=_check_ip_address('discovery_address', data['discovery_address']),
            discovery_port=_check_uint('discovery_port', data['discovery_port'], UINT16_MAX),
            max_peers=_check_uint('max_peers', data['max_peers'], USIZE_MAX),
            boot_nodes=_decode_multiaddrs(data['boot_nodes']),
        )


@dataclass(frozen=True)
class RPCConfig:
    enabled: bool = False
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    port: int = DEFAULT_RPC_PORT

    def to_formatted_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'listen_address': self.listen_address,
            'port': self.port,
        }

    @classmethod
    def from_formatted_dict(cls, data: Mapping[str, Any]) -> 'RPCConfig':
        return cls(
            enabled=_check_bool('enabled', data['enabled']),
            listen_address=_check_ip_address('listen_address', data['listen_address']),
            port=_check_uint('port', data['port'], UINT16_MAX),
        )


@dataclass(frozen=True)
class RestApiConfig:
    enabled: bool = True
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    port: int = DEFAULT_REST_API_PORT

    def to_formatted_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'listen_address': self.listen_address,
            'port': self.port,
        }

    @classmethod
    def from_formatted_dict(cls, data: Mapping[str, Any]) -> 'RestApiConfig':
        return cls(
            enabled=_check_bool('enabled', data['enabled']),
            listen_address=_check_ip_address('listen_address', data['listen_address']),
            port=_check_uint('port', data['port'], UINT16_MAX),
        )


@dataclass(frozen=True)
class ClientConfig:
    """
    The operational settings of a beacon node: where its data lives, which
    specification constants it expects, how it talks to the network and how the
    beacon chain is started.
    """
    data_dir: Path = Path(DEFAULT_DATA_DIR_NAME)
    db_type: str = DB_TYPE_DISK
    db_name: str = DEFAULT_DB_NAME
    log_file: Optional[Path] = None
    spec_constants: str = SPEC_MINIMAL
    beacon_chain_start_method: StartMethod = field(default_factory=Resume)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    rpc: RPCConfig = field(default_factory=RPCConfig)
    rest_api: RestApiConfig = field(default_factory=RestApiConfig)

    def db_path(self) -> Optional[Path]:
        """
        Return the path of the on-disk database, or ``None`` if the node does not
        use one.
        """
        if self.db_type == DB_TYPE_DISK:
            return self.data_dir / self.db_name
        else:
            return None

    def with_data_dir(self, data_dir: Path) -> 'ClientConfig':
        return replace(self, data_dir=data_dir)

    def with_start_method(self, method: StartMethod) -> 'ClientConfig':
        return replace(self, beacon_chain_start_method=method)

    @to_dict
    def to_formatted_dict(self) -> Iterable[Tuple[str, Any]]:
        yield 'data_dir', str(self.data_dir)
        yield 'db_type', self.db_type
        yield 'db_name', self.db_name
        if self.log_file is not None:
            yield 'log_file', str(self.log_file)
        yield 'spec_constants', self.spec_constants
        yield 'beacon_chain_start_method', start_method_to_formatted_dict(
            self.beacon_chain_start_method
        )
        yield 'network', self.network.to_formatted_dict()
        yield 'rpc', self.rpc.to_formatted_dict()
        yield 'rest_api', self.rest_api.to_formatted_dict()

    @classmethod
    def from_formatted_dict(cls, data: Mapping[str, Any]) -> 'ClientConfig':
        db_type = _check_str('db_type', data['db_type'])
        if db_type not in DB_TYPES:
            raise ValueError(f"Unknown db_type: {db_type!r}")
        log_file = data.get('log_file')

        return cls(
            data_dir=Path(_check_str('data_dir', data['data_dir'])),
            db_type=db_type,
            db_name=_check_str('db_name', data['db_name']),
            log_file=None if log_file is None else Path(_check_str('log_file', log_file)),
            spec_constants=_check_str('spec_constants', data['spec_constants']),
            beacon_chain_start_method=start_method_from_formatted_dict(
                data['beacon_chain_start_method']
            ),
            network=NetworkConfig.from_formatted_dict(data['network']),
            rpc=RPCConfig.from_formatted_dict(data['rpc']),
            rest_api=RestApiConfig.from_formatted_dict(data['rest_api']),
        )
