from multiaddr import Multiaddr
import pytest

from beacon_node.builder import ConfigBuilder
from beacon_node.eth2.presets import MINIMAL_CONFIG

BOOTSTRAP_MULTIADDR = Multiaddr('/ip4/127.0.0.1/tcp/9000')


class FakeBootstrapClient:

    def __init__(self, server, eth2_config, server_multiaddr):
        self.server = server
        self._eth2_config = eth2_config
        self._server_multiaddr = server_multiaddr
        self.requested_ports = []

    def eth2_config(self):
        if isinstance(self._eth2_config, Exception):
            raise self._eth2_config
        return self._eth2_config

    def best_effort_multiaddr(self, port=None):
        self.requested_ports.append(port)
        return self._server_multiaddr


@pytest.fixture
def data_dir(tmp_path):
    return (tmp_path / 'datadir').resolve()


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    return home


@pytest.fixture
def testnet_args(data_dir):
    def _mk_args(method, **kwargs):
        args = {
            'datadir': str(data_dir),
            'subcommand': 'testnet',
            'testnet_method': method,
        }
        args.update(kwargs)
        return args
    return _mk_args


@pytest.fixture
def bootstrap_server():
    return 'http://127.0.0.1:5052'


@pytest.fixture
def bootstrap_multiaddr():
    return BOOTSTRAP_MULTIADDR


@pytest.fixture
def make_bootstrap_client_factory():
    def _make(eth2_config=MINIMAL_CONFIG, server_multiaddr=BOOTSTRAP_MULTIADDR):
        clients = []

        def factory(server, logger):
            client = FakeBootstrapClient(server, eth2_config, server_multiaddr)
            clients.append(client)
            return client

        factory.clients = clients
        return factory
    return _make


@pytest.fixture
def initialized_data_dir(data_dir):
    """
    A datadir holding the default documents and an empty on-disk database.
    """
    builder = ConfigBuilder.from_data_dir(data_dir).write_configs_to_new_datadir()
    builder.client_config.db_path().mkdir()
    return data_dir
