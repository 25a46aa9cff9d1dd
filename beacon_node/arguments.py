"""
Turn the raw command line mapping into typed start requests.

The mapping is keyed by flag name (``vars()`` of the namespace produced by
:mod:`beacon_node.cli_parser`), and every value is either ``None`` or the string
or number the user supplied. Nothing here touches the filesystem or the network.
"""
from dataclasses import dataclass, field
import ipaddress
from pathlib import Path
import re
from typing import (
    Any,
    Iterable,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from eth_utils import to_tuple
from multiaddr import Multiaddr
from multiaddr.exceptions import Error as MultiaddrError

from beacon_node.bootstrap import parse_server_url
from beacon_node.client_config import (
    Generated,
    HttpBootstrap,
    RecentGenesis,
)
from beacon_node.constants import (
    DB_TYPES,
    KNOWN_SPECS,
    UINT16_MAX,
    UINT64_MAX,
    USIZE_MAX,
)
from beacon_node.exceptions import (
    ArgumentParseError,
    UnknownSpec,
)

SUBCOMMAND = 'subcommand'
TESTNET_METHOD = 'testnet_method'

TESTNET = 'testnet'
BOOTSTRAP = 'bootstrap'
RECENT = 'recent'
QUICK = 'quick'

_UINT_PATTERN = re.compile(r'\+?[0-9]+')


TestnetMethod = Union[HttpBootstrap, RecentGenesis, Generated]


@dataclass(frozen=True)
class ClientOverrides:
    """
    Client settings given on the command line, applied on top of whatever client
    document the run ends up with.
    """
    listen_address: Optional[str] = None
    libp2p_port: Optional[int] = None
    discovery_port: Optional[int] = None
    boot_nodes: Tuple[Multiaddr, ...] = ()
    rpc_enabled: bool = False
    rpc_address: Optional[str] = None
    rpc_port: Optional[int] = None
    rest_api_port: Optional[int] = None
    db_type: Optional[str] = None
    log_file: Optional[Path] = None


@dataclass(frozen=True)
class ResumeRequest:
    pass


@dataclass(frozen=True)
class NewTestnetRequest:
    method: TestnetMethod
    random_datadir: bool = False
    force: bool = False
    eth2_config_path: Optional[Path] = None
    client_config_path: Optional[Path] = None
    spec: Optional[str] = None


StartRequest = Union[ResumeRequest, NewTestnetRequest]


@dataclass(frozen=True)
class ResolvedArguments:
    start: StartRequest
    data_dir: Optional[Path] = None
    port_bump: Optional[int] = None
    overrides: ClientOverrides = field(default_factory=ClientOverrides)


def parse_uint(flag: str, value: Any, maximum: int) -> int:
    """
    Convert ``value`` into an unsigned integer no larger than ``maximum``.
    """
    if value is None:
        raise ArgumentParseError(flag, value)
    if isinstance(value, bool):
        raise ArgumentParseError(flag, value, "expected an unsigned integer")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _UINT_PATTERN.fullmatch(value):
        number = int(value)
    else:
        raise ArgumentParseError(flag, value, "expected an unsigned integer")

    if not 0 <= number <= maximum:
        raise ArgumentParseError(flag, value, f"must be between 0 and {maximum}")
    return number


def _optional_uint(args: Mapping[str, Any], flag: str, maximum: int) -> Optional[int]:
    value = args.get(flag)
    if value is None:
        return None
    return parse_uint(flag, value, maximum)


def _optional_path(args: Mapping[str, Any], flag: str) -> Optional[Path]:
    value = args.get(flag)
    if value is None:
        return None
    if not isinstance(value, (str, Path)) or not str(value):
        raise ArgumentParseError(flag, value, "expected a path")
    return Path(value)


def _optional_ip_address(args: Mapping[str, Any], flag: str) -> Optional[str]:
    value = args.get(flag)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArgumentParseError(flag, value, "expected an IP address")
    try:
        return str(ipaddress.ip_address(value))
    except ValueError as err:
        raise ArgumentParseError(flag, value, "expected an IP address") from err


@to_tuple
def _parse_multiaddrs(flag: str, value: Any) -> Iterable[Multiaddr]:
    if value is None:
        return
    for multiaddr in str(value).split(","):
        if not multiaddr.strip():
            continue
        try:
            yield Multiaddr(multiaddr.strip())
        except (ValueError, MultiaddrError) as err:
            raise ArgumentParseError(flag, multiaddr, str(err)) from err


def parse_spec(value: Any) -> str:
    if value not in KNOWN_SPECS:
        raise UnknownSpec(value)
    return value


def resolve_client_overrides(args: Mapping[str, Any]) -> ClientOverrides:
    db_type = args.get('db')
    if db_type is not None and db_type not in DB_TYPES:
        raise ArgumentParseError('db', db_type, f"expected one of {', '.join(DB_TYPES)}")

    return ClientOverrides(
        listen_address=_optional_ip_address(args, 'listen-address'),
        libp2p_port=_optional_uint(args, 'port', UINT16_MAX),
        discovery_port=_optional_uint(args, 'discovery-port', UINT16_MAX),
        boot_nodes=_parse_multiaddrs('boot-nodes', args.get('boot-nodes')),
        rpc_enabled=bool(args.get('rpc')),
        rpc_address=_optional_ip_address(args, 'rpc-address'),
        rpc_port=_optional_uint(args, 'rpc-port', UINT16_MAX),
        rest_api_port=_optional_uint(args, 'api-port', UINT16_MAX),
        db_type=db_type,
        log_file=_optional_path(args, 'logfile'),
    )


def resolve_testnet_method(args: Mapping[str, Any]) -> TestnetMethod:
    method = args.get(TESTNET_METHOD)

    if method == BOOTSTRAP:
        server = args.get('server')
        if server is None:
            raise ArgumentParseError('server', server)
        parse_server_url(server)
        return HttpBootstrap(
            server=server,
            port=_optional_uint(args, 'libp2p-port', UINT16_MAX),
        )
    elif method == RECENT:
        return RecentGenesis(
            validator_count=parse_uint('validator_count', args.get('validator_count'), USIZE_MAX),
            minutes=parse_uint('minutes', args.get('minutes'), UINT64_MAX),
        )
    elif method == QUICK:
        return Generated(
            validator_count=parse_uint('validator_count', args.get('validator_count'), USIZE_MAX),
            genesis_time=parse_uint('genesis_time', args.get('genesis_time'), UINT64_MAX),
        )
    else:
        raise ArgumentParseError(
            TESTNET_METHOD,
            method,
            "no testnet method specified, see `testnet --help`",
        )


def resolve_new_testnet_request(args: Mapping[str, Any]) -> NewTestnetRequest:
    spec = args.get('spec')
    return NewTestnetRequest(
        method=resolve_testnet_method(args),
        random_datadir=bool(args.get('random-datadir')),
        force=bool(args.get('force')),
        eth2_config_path=_optional_path(args, 'eth2-config'),
        client_config_path=_optional_path(args, 'client-config'),
        spec=None if spec is None else parse_spec(spec),
    )


def resolve_arguments(args: Mapping[str, Any]) -> ResolvedArguments:
    """
    Validate the raw command line ``args`` and return them as
    :class:`ResolvedArguments`.

    No ``testnet`` sub-command means the node resumes from its datadir.
    """
    if args.get(SUBCOMMAND) == TESTNET:
        start: StartRequest = resolve_new_testnet_request(args)
    else:
        start = ResumeRequest()

    return ResolvedArguments(
        start=start,
        data_dir=_optional_path(args, 'datadir'),
        port_bump=_optional_uint(args, 'port-bump', UINT16_MAX),
        overrides=resolve_client_overrides(args),
    )
