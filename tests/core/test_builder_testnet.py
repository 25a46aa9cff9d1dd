from dataclasses import replace
import logging

from multiaddr import Multiaddr
import pytest

from beacon_node.builder import get_configs
from beacon_node.client_config import (
    ClientConfig,
    Generated,
    HttpBootstrap,
    NetworkConfig,
    RecentGenesis,
)
from beacon_node.config_file import (
    read_from_file,
    write_to_file,
)
from beacon_node.constants import (
    CLIENT_CONFIG_FILENAME,
    ETH2_CONFIG_FILENAME,
)
from beacon_node.eth2.configs import Eth2Config
from beacon_node.eth2.presets import (
    INTEROP_CONFIG,
    MAINNET_CONFIG,
    MINIMAL_CONFIG,
)
from beacon_node.exceptions import (
    DatadirNotClean,
    MissingConfigFile,
    NetworkError,
    SpecMismatch,
)


def test_recent_genesis(data_dir, testnet_args):
    client_config, eth2_config = get_configs(
        testnet_args('recent', validator_count='16', minutes='5'),
    )

    assert client_config.data_dir == data_dir
    assert client_config.beacon_chain_start_method == RecentGenesis(
        validator_count=16,
        minutes=5,
    )
    assert eth2_config == MINIMAL_CONFIG

    assert read_from_file(data_dir / CLIENT_CONFIG_FILENAME, ClientConfig) == client_config
    assert read_from_file(data_dir / ETH2_CONFIG_FILENAME, Eth2Config) == eth2_config


def test_quick_genesis(data_dir, testnet_args):
    client_config, _ = get_configs(
        testnet_args('quick', validator_count='4', genesis_time='1578009600'),
    )
    assert client_config.beacon_chain_start_method == Generated(
        validator_count=4,
        genesis_time=1578009600,
    )


@pytest.mark.parametrize(
    'spec, expected',
    (
        ('mainnet', MAINNET_CONFIG),
        ('minimal', MINIMAL_CONFIG),
        ('interop', INTEROP_CONFIG),
    ),
)
def test_spec_preset(testnet_args, spec, expected):
    client_config, eth2_config = get_configs(
        testnet_args('recent', validator_count='16', minutes='5', spec=spec),
    )
    assert eth2_config == expected
    assert client_config.spec_constants == spec


def test_existing_documents_are_not_replaced(data_dir, testnet_args):
    args = testnet_args('recent', validator_count='16', minutes='5')
    get_configs(args)

    with pytest.raises(DatadirNotClean):
        get_configs(args)


def test_existing_database_is_not_replaced(data_dir, testnet_args):
    (data_dir / 'chain_db').mkdir(parents=True)

    with pytest.raises(DatadirNotClean) as excinfo:
        get_configs(testnet_args('recent', validator_count='16', minutes='5'))
    assert excinfo.value.path == data_dir / 'chain_db'
    assert not (data_dir / CLIENT_CONFIG_FILENAME).exists()


def test_force_backs_up_previous_run(data_dir, testnet_args):
    get_configs(testnet_args('recent', validator_count='16', minutes='5'))
    (data_dir / 'chain_db').mkdir()

    client_config, _ = get_configs(
        testnet_args('quick', validator_count='4', genesis_time='1000', force=True),
    )

    backups = [path for path in data_dir.iterdir() if path.name.startswith('backup_')]
    assert len(backups) == 1
    backup_dir = backups[0]
    assert (backup_dir / CLIENT_CONFIG_FILENAME).exists()
    assert (backup_dir / ETH2_CONFIG_FILENAME).exists()
    assert (backup_dir / 'chain_db').is_dir()

    written = read_from_file(data_dir / CLIENT_CONFIG_FILENAME, ClientConfig)
    assert written.beacon_chain_start_method == Generated(validator_count=4, genesis_time=1000)
    assert written == client_config


def test_force_on_missing_datadir(data_dir, testnet_args):
    client_config, _ = get_configs(
        testnet_args('recent', validator_count='16', minutes='5', force=True),
    )
    assert client_config.data_dir == data_dir
    assert not any(path.name.startswith('backup_') for path in data_dir.iterdir())


def test_random_datadir(data_dir, testnet_args):
    client_config, _ = get_configs(
        testnet_args('recent', validator_count='16', minutes='5', **{'random-datadir': True}),
    )

    assert client_config.data_dir.parent == data_dir.parent
    assert client_config.data_dir.name.startswith('datadir_random_')
    assert len(client_config.data_dir.name) == len('datadir_random_') + 6
    assert (client_config.data_dir / CLIENT_CONFIG_FILENAME).exists()
    assert not data_dir.exists()


def test_eth2_config_from_file(tmp_path, data_dir, testnet_args):
    eth2_config_path = tmp_path / 'interop.toml'
    interop = replace(INTEROP_CONFIG, spec_constants='minimal', SLOTS_PER_EPOCH=4)
    write_to_file(eth2_config_path, interop)

    _, eth2_config = get_configs(testnet_args(
        'recent',
        validator_count='16',
        minutes='5',
        **{'eth2-config': str(eth2_config_path)},
    ))

    assert eth2_config == interop
    assert read_from_file(data_dir / ETH2_CONFIG_FILENAME, Eth2Config) == interop


def test_eth2_config_file_wins_over_spec(tmp_path, testnet_args):
    eth2_config_path = tmp_path / 'eth2.toml'
    write_to_file(eth2_config_path, MINIMAL_CONFIG)

    _, eth2_config = get_configs(testnet_args(
        'recent',
        validator_count='16',
        minutes='5',
        spec='minimal',
        **{'eth2-config': str(eth2_config_path)},
    ))
    assert eth2_config == MINIMAL_CONFIG


def test_missing_eth2_config_file(tmp_path, testnet_args):
    with pytest.raises(MissingConfigFile):
        get_configs(testnet_args(
            'recent',
            validator_count='16',
            minutes='5',
            **{'eth2-config': str(tmp_path / 'missing.toml')},
        ))


def test_mismatched_eth2_config_file_writes_nothing(tmp_path, data_dir, testnet_args):
    eth2_config_path = tmp_path / 'mainnet.toml'
    write_to_file(eth2_config_path, MAINNET_CONFIG)

    with pytest.raises(SpecMismatch) as excinfo:
        get_configs(testnet_args(
            'recent',
            validator_count='16',
            minutes='5',
            **{'eth2-config': str(eth2_config_path)},
        ))

    assert excinfo.value.client_spec_constants == 'minimal'
    assert excinfo.value.eth2_spec_constants == 'mainnet'
    assert not data_dir.exists()


def test_client_config_from_file(tmp_path, data_dir, testnet_args):
    client_config_path = tmp_path / 'client.toml'
    write_to_file(client_config_path, ClientConfig(
        data_dir=tmp_path / 'somewhere-else',
        network=NetworkConfig(max_peers=50),
    ))

    client_config, _ = get_configs(testnet_args(
        'recent',
        validator_count='16',
        minutes='5',
        **{'client-config': str(client_config_path)},
    ))

    assert client_config.network.max_peers == 50
    assert client_config.data_dir == data_dir
    assert client_config.beacon_chain_start_method == RecentGenesis(
        validator_count=16,
        minutes=5,
    )


def test_bootstrap(data_dir,
                   testnet_args,
                   make_bootstrap_client_factory,
                   bootstrap_server,
                   bootstrap_multiaddr):
    factory = make_bootstrap_client_factory()

    client_config, eth2_config = get_configs(
        testnet_args('bootstrap', server=bootstrap_server),
        bootstrap_client_factory=factory,
    )

    assert [client.server for client in factory.clients] == [bootstrap_server]
    assert factory.clients[0].requested_ports == [None]
    assert eth2_config == MINIMAL_CONFIG
    assert client_config.network.boot_nodes == (bootstrap_multiaddr,)
    assert client_config.beacon_chain_start_method == HttpBootstrap(server=bootstrap_server)
    assert read_from_file(data_dir / CLIENT_CONFIG_FILENAME, ClientConfig) == client_config


def test_bootstrap_with_libp2p_port(testnet_args,
                                   make_bootstrap_client_factory,
                                   bootstrap_server):
    factory = make_bootstrap_client_factory()

    client_config, _ = get_configs(
        testnet_args('bootstrap', server=bootstrap_server, **{'libp2p-port': '9001'}),
        bootstrap_client_factory=factory,
    )

    assert factory.clients[0].requested_ports == [9001]
    assert client_config.beacon_chain_start_method == HttpBootstrap(
        server=bootstrap_server,
        port=9001,
    )


def test_bootstrap_spec_wins_over_server(testnet_args,
                                        make_bootstrap_client_factory,
                                        bootstrap_server):
    factory = make_bootstrap_client_factory(eth2_config=MAINNET_CONFIG)

    _, eth2_config = get_configs(
        testnet_args('bootstrap', server=bootstrap_server, spec='interop'),
        bootstrap_client_factory=factory,
    )
    assert eth2_config == INTEROP_CONFIG


def test_bootstrap_spec_mismatch(data_dir,
                                testnet_args,
                                make_bootstrap_client_factory,
                                bootstrap_server):
    factory = make_bootstrap_client_factory(eth2_config=MAINNET_CONFIG)

    with pytest.raises(SpecMismatch):
        get_configs(
            testnet_args('bootstrap', server=bootstrap_server),
            bootstrap_client_factory=factory,
        )
    assert not data_dir.exists()


def test_bootstrap_without_server_address(caplog,
                                          testnet_args,
                                          make_bootstrap_client_factory,
                                          bootstrap_server):
    factory = make_bootstrap_client_factory(server_multiaddr=None)

    with caplog.at_level(logging.WARNING):
        client_config, _ = get_configs(
            testnet_args('bootstrap', server=bootstrap_server),
            bootstrap_client_factory=factory,
        )

    assert client_config.network.boot_nodes == ()
    assert "Unable to estimate a bootstrapper libp2p address" in caplog.text


def test_bootstrap_address_is_appended(tmp_path,
                                      testnet_args,
                                      make_bootstrap_client_factory,
                                      bootstrap_server,
                                      bootstrap_multiaddr):
    existing = Multiaddr('/ip4/10.0.0.1/tcp/9000')
    client_config_path = tmp_path / 'client.toml'
    write_to_file(client_config_path, ClientConfig(
        data_dir=tmp_path,
        network=NetworkConfig(boot_nodes=(existing,)),
    ))
    factory = make_bootstrap_client_factory()

    client_config, _ = get_configs(
        testnet_args(
            'bootstrap',
            server=bootstrap_server,
            **{'client-config': str(client_config_path)},
        ),
        bootstrap_client_factory=factory,
    )
    assert client_config.network.boot_nodes == (existing, bootstrap_multiaddr)


def test_force_backs_up_database_of_client_config_file(tmp_path, data_dir, testnet_args):
    client_config_path = tmp_path / 'client.toml'
    write_to_file(client_config_path, ClientConfig(data_dir=data_dir, db_name='mydb'))
    args = testnet_args(
        'recent',
        validator_count='16',
        minutes='5',
        **{'client-config': str(client_config_path)},
    )
    get_configs(args)
    (data_dir / 'mydb').mkdir()

    client_config, _ = get_configs(dict(args, force=True))

    assert client_config.db_path() == data_dir / 'mydb'
    assert not (data_dir / 'mydb').exists()
    backups = [path for path in data_dir.iterdir() if path.name.startswith('backup_')]
    assert len(backups) == 1
    assert (backups[0] / 'mydb').is_dir()
    assert (backups[0] / CLIENT_CONFIG_FILENAME).exists()


def test_bootstrap_eth2_config_failure_aborts(data_dir,
                                             testnet_args,
                                             make_bootstrap_client_factory,
                                             bootstrap_server):
    factory = make_bootstrap_client_factory(
        eth2_config=NetworkError("Unable to reach bootstrap server", bootstrap_server),
        server_multiaddr=None,
    )

    with pytest.raises(NetworkError):
        get_configs(
            testnet_args('bootstrap', server=bootstrap_server),
            bootstrap_client_factory=factory,
        )
    assert not data_dir.exists()
