"""
Decide which configuration documents a beacon node starts with and where its
datadir lives.

The :class:`ConfigBuilder` is an immutable value: every step returns a new
builder, so the sequence of steps taken for a run is exactly the sequence of
calls in :func:`get_configs`.
"""
from dataclasses import dataclass, field, replace
import logging
from pathlib import Path
from typing import (
    Any,
    Callable,
    Mapping,
    Optional,
    Tuple,
    Type,
)

from beacon_node import datadir
from beacon_node._utils.filesystem import get_home
from beacon_node._utils.logging import get_logger
from beacon_node._utils.tokens import random_string
from beacon_node.arguments import (
    ClientOverrides,
    NewTestnetRequest,
    ResolvedArguments,
    ResumeRequest,
    resolve_arguments,
)
from beacon_node.bootstrap import BootstrapClient
from beacon_node.client_config import (
    ClientConfig,
    HttpBootstrap,
    Resume,
    StartMethod,
)
from beacon_node.config_file import (
    TDocument,
    read_from_file,
    write_to_file,
)
from beacon_node.constants import (
    CLIENT_CONFIG_FILENAME,
    DEFAULT_DATA_DIR_NAME,
    ETH2_CONFIG_FILENAME,
    RANDOM_DATA_DIR_INFIX,
    RANDOM_TOKEN_LENGTH,
    UINT16_MAX,
)
from beacon_node.eth2.configs import Eth2Config
from beacon_node.eth2.presets import MINIMAL_CONFIG, get_preset
from beacon_node.exceptions import (
    ArgumentParseError,
    ConfigIOError,
    DatabaseNotFound,
    DatadirNotClean,
    DatadirNotFound,
    MissingConfigFile,
    SpecMismatch,
)

Configs = Tuple[ClientConfig, Eth2Config]
BootstrapClientFactory = Callable[[str, logging.Logger], BootstrapClient]


def _load_document(path: Path, document_class: Type[TDocument]) -> TDocument:
    document = read_from_file(path, document_class)
    if document is None:
        raise MissingConfigFile(path)
    return document


@dataclass(frozen=True)
class ConfigBuilder:
    data_dir: Path
    eth2_config: Eth2Config
    client_config: ClientConfig
    logger: logging.Logger = field(
        default_factory=lambda: get_logger('beacon_node.builder.ConfigBuilder'),
        compare=False,
        repr=False,
    )

    @classmethod
    def from_data_dir(cls,
                      data_dir: Optional[Path],
                      logger: logging.Logger = None) -> 'ConfigBuilder':
        """
        Create a builder with default documents for ``data_dir``, falling back to
        ``<home>/.beacon-node`` when no datadir is given.
        """
        if data_dir is None:
            data_dir = get_home() / DEFAULT_DATA_DIR_NAME
        data_dir = data_dir.expanduser().resolve()

        if logger is None:
            logger = get_logger('beacon_node.builder.ConfigBuilder')

        return cls(
            data_dir=data_dir,
            eth2_config=MINIMAL_CONFIG,
            client_config=ClientConfig(data_dir=data_dir),
            logger=logger,
        )

    def _evolve(self, **changes: Any) -> 'ConfigBuilder':
        # the client document always records the datadir it belongs to
        builder = replace(self, **changes)
        return replace(
            builder,
            client_config=builder.client_config.with_data_dir(builder.data_dir),
        )

    @property
    def client_config_path(self) -> Path:
        return self.data_dir / CLIENT_CONFIG_FILENAME

    @property
    def eth2_config_path(self) -> Path:
        return self.data_dir / ETH2_CONFIG_FILENAME

    #
    # Resume
    #
    def resume_from_datadir(self) -> 'ConfigBuilder':
        """
        Load both documents from an existing datadir and check that its database exists.
        """
        self.logger.info("Resuming from existing datadir: path=%s", self.data_dir)

        if not datadir.exists(self.data_dir):
            raise DatadirNotFound(self.data_dir)

        eth2_config = _load_document(self.eth2_config_path, Eth2Config)
        client_config = _load_document(self.client_config_path, ClientConfig)

        builder = self._evolve(
            eth2_config=eth2_config,
            client_config=client_config.with_start_method(Resume()),
        )

        db_path = builder.client_config.db_path()
        if db_path is not None and not datadir.exists(db_path):
            raise DatabaseNotFound(db_path)

        return builder

    #
    # New testnet
    #
    def with_random_data_dir(self) -> 'ConfigBuilder':
        """
        Append a random suffix to the datadir name, for throwaway testnets.
        """
        token = random_string(RANDOM_TOKEN_LENGTH)
        data_dir = self.data_dir.with_name(
            f"{self.data_dir.name}{RANDOM_DATA_DIR_INFIX}{token}"
        )
        self.logger.info("Using random datadir: path=%s", data_dir)
        return self._evolve(data_dir=data_dir)

    def clean_data_dir(self) -> 'ConfigBuilder':
        """
        Move documents and database from a previous run out of the way.
        """
        if datadir.exists(self.data_dir):
            datadir.clean_and_backup(
                self.data_dir,
                self.client_config.db_path(),
                self.logger,
            )
        else:
            self.logger.debug("No datadir to clean at %s", self.data_dir)
        return self

    def with_eth2_config_from_file(self, path: Path) -> 'ConfigBuilder':
        self.logger.info("Loading eth2 config: path=%s", path)
        return self._evolve(eth2_config=_load_document(path, Eth2Config))

    def with_spec(self, spec: str) -> 'ConfigBuilder':
        """
        Use the protocol parameter preset called ``spec`` for both documents.
        """
        eth2_config = get_preset(spec)
        return self._evolve(
            eth2_config=eth2_config,
            client_config=replace(self.client_config, spec_constants=spec),
        )

    def with_bootstrap_eth2_config(self, bootstrap_client: BootstrapClient) -> 'ConfigBuilder':
        eth2_config = bootstrap_client.eth2_config()
        self.logger.info(
            "Imported eth2 config from bootstrap server: spec_constants=%s",
            eth2_config.spec_constants,
        )
        return self._evolve(eth2_config=eth2_config)

    def with_client_config_from_file(self, path: Path) -> 'ConfigBuilder':
        self.logger.info("Loading client config: path=%s", path)
        return self._evolve(client_config=_load_document(path, ClientConfig))

    def with_bootstrap_address(self,
                               bootstrap_client: BootstrapClient,
                               port: Optional[int]) -> 'ConfigBuilder':
        """
        Add the estimated libp2p address of the bootstrap server to the boot nodes.
        """
        server_multiaddr = bootstrap_client.best_effort_multiaddr(port)
        if server_multiaddr is None:
            self.logger.warning(
                "Unable to estimate a bootstrapper libp2p address, "
                "this node may not find any peers."
            )
            return self

        self.logger.info(
            "Estimated bootstrapper libp2p address: multiaddr=%s",
            server_multiaddr,
        )
        network = self.client_config.network
        return self._evolve(client_config=replace(
            self.client_config,
            network=replace(network, boot_nodes=network.boot_nodes + (server_multiaddr,)),
        ))

    def with_start_method(self, method: StartMethod) -> 'ConfigBuilder':
        return self._evolve(client_config=self.client_config.with_start_method(method))

    def check_spec_constants(self) -> None:
        client_spec_constants = self.client_config.spec_constants
        eth2_spec_constants = self.eth2_config.spec_constants
        if client_spec_constants != eth2_spec_constants:
            self.logger.critical(
                "Specification constants do not match: client_config=%s eth2_config=%s",
                client_spec_constants,
                eth2_spec_constants,
            )
            raise SpecMismatch(client_spec_constants, eth2_spec_constants)

    def write_configs_to_new_datadir(self) -> 'ConfigBuilder':
        """
        Write both documents into the datadir, refusing to replace anything a
        previous run left behind.
        """
        # nothing is written for a pair of documents that could never be built
        self.check_spec_constants()

        db_path = self.client_config.db_path()
        if db_path is not None and datadir.exists(db_path):
            raise DatadirNotClean(db_path)

        self.logger.info("Creating new datadir: path=%s", self.data_dir)
        try:
            datadir.create_all(self.data_dir)
        except ConfigIOError as err:
            self.logger.critical("Failed to initialize data dir: error=%s", err)
            raise

        for path in (self.client_config_path, self.eth2_config_path):
            if datadir.exists(path):
                raise DatadirNotClean(path)

        write_to_file(self.client_config_path, self.client_config)
        write_to_file(self.eth2_config_path, self.eth2_config)

        return self

    #
    # Built
    #
    def with_client_overrides(self, overrides: ClientOverrides) -> 'ConfigBuilder':
        client_config = self.client_config
        network = client_config.network
        rpc = client_config.rpc
        rest_api = client_config.rest_api

        if overrides.listen_address is not None:
            network = replace(network, listen_address=overrides.listen_address)
        if overrides.libp2p_port is not None:
            network = replace(network, libp2p_port=overrides.libp2p_port)
        if overrides.discovery_port is not None:
            network = replace(network, discovery_port=overrides.discovery_port)
        if overrides.boot_nodes:
            network = replace(network, boot_nodes=network.boot_nodes + overrides.boot_nodes)

        if overrides.rpc_enabled:
            rpc = replace(rpc, enabled=True)
        if overrides.rpc_address is not None:
            rpc = replace(rpc, listen_address=overrides.rpc_address)
        if overrides.rpc_port is not None:
            rpc = replace(rpc, port=overrides.rpc_port)

        if overrides.rest_api_port is not None:
            rest_api = replace(rest_api, port=overrides.rest_api_port)

        if overrides.db_type is not None:
            client_config = replace(client_config, db_type=overrides.db_type)
        if overrides.log_file is not None:
            client_config = replace(client_config, log_file=overrides.log_file)

        return self._evolve(client_config=replace(
            client_config,
            network=network,
            rpc=rpc,
            rest_api=rest_api,
        ))

    def with_port_bump(self, bump: int) -> 'ConfigBuilder':
        """
        Shift every configured port up by ``bump``.

        The RPC port receives the bump twice. Existing deployments depend on the
        resulting port numbers, so this is kept as is.
        """
        network = self.client_config.network
        rpc = self.client_config.rpc
        rest_api = self.client_config.rest_api

        bumped_ports = {
            'libp2p': network.libp2p_port + bump,
            'discovery': network.discovery_port + bump,
            'rpc': rpc.port + bump + bump,
            'rest_api': rest_api.port + bump,
        }
        for name, port in bumped_ports.items():
            if port > UINT16_MAX:
                raise ArgumentParseError(
                    'port-bump',
                    bump,
                    f"bumped {name} port {port} exceeds {UINT16_MAX}",
                )

        return self._evolve(client_config=replace(
            self.client_config,
            network=replace(
                network,
                libp2p_port=bumped_ports['libp2p'],
                discovery_port=bumped_ports['discovery'],
            ),
            rpc=replace(rpc, port=bumped_ports['rpc']),
            rest_api=replace(rest_api, port=bumped_ports['rest_api']),
        ))

    def build(self,
              overrides: ClientOverrides = None,
              port_bump: int = None) -> Configs:
        """
        Apply the command line overrides, check that the documents agree and
        return them.
        """
        builder = self
        if overrides is not None:
            builder = builder.with_client_overrides(overrides)
        if port_bump is not None:
            builder = builder.with_port_bump(port_bump)

        builder.check_spec_constants()

        client_config = builder.client_config.with_data_dir(builder.data_dir)
        return client_config, builder.eth2_config


def process_new_testnet_request(
        builder: ConfigBuilder,
        request: NewTestnetRequest,
        bootstrap_client_factory: BootstrapClientFactory = BootstrapClient) -> ConfigBuilder:
    """
    Prepare a fresh datadir for a new chain as described by ``request``.
    """
    if request.random_datadir:
        builder = builder.with_random_data_dir()

    method = request.method
    if isinstance(method, HttpBootstrap):
        bootstrap_client: Optional[BootstrapClient] = bootstrap_client_factory(
            method.server,
            builder.logger,
        )
    else:
        bootstrap_client = None

    if request.eth2_config_path is not None:
        builder = builder.with_eth2_config_from_file(request.eth2_config_path)
    elif request.spec is not None:
        builder = builder.with_spec(request.spec)
    elif bootstrap_client is not None:
        builder = builder.with_bootstrap_eth2_config(bootstrap_client)

    if request.client_config_path is not None:
        builder = builder.with_client_config_from_file(request.client_config_path)

    # the backup must cover the database of the client config this run will use
    if request.force:
        builder = builder.clean_data_dir()

    if bootstrap_client is not None:
        builder = builder.with_bootstrap_address(bootstrap_client, method.port)

    builder = builder.with_start_method(method)

    return builder.write_configs_to_new_datadir()


def resolve_configs(
        args: ResolvedArguments,
        logger: logging.Logger = None,
        bootstrap_client_factory: BootstrapClientFactory = BootstrapClient) -> Configs:
    builder = ConfigBuilder.from_data_dir(args.data_dir, logger)

    start = args.start
    if isinstance(start, NewTestnetRequest):
        builder = process_new_testnet_request(builder, start, bootstrap_client_factory)
    elif isinstance(start, ResumeRequest):
        builder = builder.resume_from_datadir()
    else:
        raise TypeError(f"Unsupported start request: {start!r}")

    return builder.build(args.overrides, args.port_bump)


def get_configs(
        cli_args: Mapping[str, Any],
        logger: logging.Logger = None,
        bootstrap_client_factory: BootstrapClientFactory = BootstrapClient) -> Configs:
    """
    Return the fully initialized client and eth2 configuration for ``cli_args``.

    Besides the arguments themselves the result depends on the contents of the
    datadir and, for a bootstrap run, on the responses of the bootstrap server.
    """
    return resolve_configs(resolve_arguments(cli_args), logger, bootstrap_client_factory)
