import pathlib
from typing import Any


class BaseBeaconNodeError(Exception):
    """
    The base class for all beacon node configuration errors.
    """
    pass


class ParseError(BaseBeaconNodeError):
    """
    Raised when a value cannot be parsed into the type it is expected to have.
    """
    pass


class ArgumentParseError(ParseError):
    """
    Raised when a command line value is missing, is not a number where one is
    expected or does not fit the integer width of its target field.
    """
    def __init__(self, flag: str, value: Any, reason: str = None) -> None:
        if value is None:
            msg = f"No value supplied for --{flag}"
        else:
            msg = f"Unable to parse --{flag}: {value!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
        self.flag = flag
        self.value = value


class ConfigFileParseError(ParseError):
    """
    Raised when a configuration document exists on disk but is malformed.
    """
    def __init__(self, msg: str, path: pathlib.Path) -> None:
        super().__init__(msg)
        self.path = path


class UnknownSpec(BaseBeaconNodeError):
    """
    Raised when the name of a protocol parameter preset is not recognized.
    """
    def __init__(self, value: str) -> None:
        super().__init__(
            f"Unknown specification {value!r}. Expected one of: mainnet, minimal, interop"
        )
        self.value = value


class NoHomeDirectory(BaseBeaconNodeError):
    """
    Raised when no ``--datadir`` is given and the home directory cannot be determined.
    """
    pass


class DatadirNotFound(BaseBeaconNodeError):
    """
    Raised when resuming from a datadir that does not exist.
    """
    def __init__(self, path: pathlib.Path) -> None:
        super().__init__(
            f"No datadir found at {path}. To start a new beacon chain, see `testnet --help`. "
            "Use `--datadir` to specify a different directory"
        )
        self.path = path


class DatabaseNotFound(BaseBeaconNodeError):
    """
    Raised when resuming from a datadir whose configured database does not exist.
    """
    def __init__(self, path: pathlib.Path) -> None:
        super().__init__(
            f"No database found at {path}. Use `testnet --force` to overwrite the existing "
            "datadir, or specify a different `--datadir`"
        )
        self.path = path


class DatadirNotClean(BaseBeaconNodeError):
    """
    Raised when a new chain would overwrite documents or a database left behind
    by a previous run.
    """
    def __init__(self, path: pathlib.Path) -> None:
        super().__init__(
            f"Datadir is not clean, {path} exists. See `--force` in `testnet --help`"
        )
        self.path = path


class MissingConfigFile(BaseBeaconNodeError):
    """
    Raised when a configuration document that must be loaded does not exist.
    """
    def __init__(self, path: pathlib.Path) -> None:
        super().__init__(f"{path} file does not exist")
        self.path = path


class ConfigIOError(BaseBeaconNodeError):
    """
    Raised when a file or directory cannot be created, written or moved.
    """
    def __init__(self, msg: str, path: pathlib.Path) -> None:
        super().__init__(msg)
        self.path = path


class NetworkError(BaseBeaconNodeError):
    """
    Raised when a request to a bootstrap server fails or returns an unusable response.
    """
    def __init__(self, msg: str, url: str) -> None:
        super().__init__(msg)
        self.url = url


class SpecMismatch(BaseBeaconNodeError):
    """
    Raised when the client document and the protocol parameters document name
    different specification constants.
    """
    def __init__(self, client_spec_constants: str, eth2_spec_constants: str) -> None:
        super().__init__(
            "Specification constant mismatch: "
            f"client_config={client_spec_constants} eth2_config={eth2_spec_constants}"
        )
        self.client_spec_constants = client_spec_constants
        self.eth2_spec_constants = eth2_spec_constants
