import ipaddress
import logging
from typing import (
    Any,
    Optional,
)
from urllib.parse import (
    ParseResult,
    urlparse,
)

from multiaddr import Multiaddr
import requests

from beacon_node._utils.logging import get_logger
from beacon_node.constants import (
    BOOTSTRAP_ETH2_CONFIG_PATH,
    BOOTSTRAP_HTTP_TIMEOUT,
    BOOTSTRAP_LISTEN_PORT_PATH,
    UINT16_MAX,
)
from beacon_node.eth2.configs import Eth2Config
from beacon_node.exceptions import (
    ArgumentParseError,
    NetworkError,
)


def parse_server_url(server: str) -> ParseResult:
    """
    Parse the ``--server`` value of a bootstrap run into its URL components.
    """
    if not isinstance(server, str):
        raise ArgumentParseError('server', server, "expected an http(s) URL")
    url = urlparse(server)
    if url.scheme not in ('http', 'https') or not url.hostname:
        raise ArgumentParseError('server', server, "expected an http(s) URL")
    try:
        # accessing the port validates it
        url.port
    except ValueError as err:
        raise ArgumentParseError('server', server, str(err)) from err
    return url


class BootstrapClient:
    """
    Talks to an already running beacon node over HTTP to learn how to join its network.
    """

    def __init__(self,
                 server: str,
                 logger: logging.Logger = None,
                 timeout: float = BOOTSTRAP_HTTP_TIMEOUT) -> None:
        self.url = parse_server_url(server)
        self.server = server.rstrip('/')
        self.timeout = timeout
        if logger is None:
            self.logger = get_logger('beacon_node.bootstrap.BootstrapClient')
        else:
            self.logger = logger

    def _mk_url(self, tail_path: str) -> str:
        return f"{self.server}{tail_path}"

    def _get(self, tail_path: str) -> Any:
        url = self._mk_url(tail_path)
        self.logger.debug("GET %s", url)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as err:
            raise NetworkError(f"Unable to reach bootstrap server at {url}: {err}", url) from err

        if response.status_code != 200:
            raise NetworkError(
                f"Invalid status code from {url}: {response.status_code}, {response.reason}",
                url,
            )

        try:
            return response.json()
        except ValueError as err:
            raise NetworkError(f"Invalid response from {url}: {response.text}", url) from err

    def listen_port(self) -> int:
        """
        Return the libp2p port the bootstrap server reports it is listening on.
        """
        value = self._get(BOOTSTRAP_LISTEN_PORT_PATH)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT16_MAX:
            url = self._mk_url(BOOTSTRAP_LISTEN_PORT_PATH)
            raise NetworkError(f"Invalid listen port from {url}: {value!r}", url)
        return value

    def eth2_config(self) -> Eth2Config:
        """
        Return the protocol parameters the bootstrap server runs with.
        """
        data = self._get(BOOTSTRAP_ETH2_CONFIG_PATH)
        try:
            return Eth2Config.from_formatted_dict(data)
        except (KeyError, TypeError, ValueError) as err:
            url = self._mk_url(BOOTSTRAP_ETH2_CONFIG_PATH)
            raise NetworkError(f"Invalid eth2 config from {url}: {err}", url) from err

    def _multiaddr_for_port(self, port: int) -> Multiaddr:
        host = self.url.hostname
        try:
            ip = ipaddress.ip_address(host)
        except ValueError:
            return Multiaddr(f"/dns4/{host}/tcp/{port}")

        if ip.version == 6:
            return Multiaddr(f"/ip6/{ip}/tcp/{port}")
        else:
            return Multiaddr(f"/ip4/{ip}/tcp/{port}")

    def best_effort_multiaddr(self, port: Optional[int] = None) -> Optional[Multiaddr]:
        """
        Estimate the libp2p multiaddr of the bootstrap server.

        If ``port`` is given the address is built without contacting the server,
        otherwise the server is asked for its listen port. Returns ``None`` when
        that request fails.
        """
        if port is None:
            try:
                port = self.listen_port()
            except NetworkError as err:
                self.logger.warning("Unable to learn the bootstrap server listen port: %s", err)
                return None

        return self._multiaddr_for_port(port)
