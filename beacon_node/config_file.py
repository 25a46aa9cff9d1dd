from pathlib import Path
from typing import (
    Any,
    Dict,
    Mapping,
    Optional,
    Type,
    TypeVar,
)

from multiaddr.exceptions import Error as MultiaddrError
import toml
from typing_extensions import Protocol

from beacon_node.exceptions import (
    ConfigFileParseError,
    ConfigIOError,
)


class ConfigDocumentAPI(Protocol):

    def to_formatted_dict(self) -> Dict[str, Any]:
        ...

    @classmethod
    def from_formatted_dict(cls, data: Mapping[str, Any]) -> Any:
        ...


TDocument = TypeVar('TDocument', bound=ConfigDocumentAPI)


DOCUMENT_HEADER = (
    "#\n"
    "# {name} configuration file.\n"
    "#\n"
    "# Generated by beacon-node. Values may be edited by hand while the node is stopped.\n"
    "#\n\n"
)


def _document_name(document: ConfigDocumentAPI) -> str:
    return type(document).__name__


def write_to_file(path: Path, document: ConfigDocumentAPI) -> None:
    """
    Write ``document`` to ``path`` as TOML, replacing any existing file.
    """
    header = DOCUMENT_HEADER.format(name=_document_name(document))
    body = toml.dumps(document.to_formatted_dict())
    try:
        with open(path, 'w', encoding='utf-8') as config_file:
            config_file.write(header + body)
    except UnicodeEncodeError as err:
        raise ConfigIOError(f"Unable to encode {path}: {err}", path) from err
    except OSError as err:
        raise ConfigIOError(f"Unable to write {path}: {err}", path) from err


def read_from_file(path: Path, document_class: Type[TDocument]) -> Optional[TDocument]:
    """
    Read a document of type ``document_class`` from ``path``.

    Return ``None`` if there is no file at ``path`` and raise
    :class:`~beacon_node.exceptions.ConfigFileParseError` if the file exists but
    does not hold a valid document.
    """
    try:
        with open(path, encoding='utf-8') as config_file:
            raw_config = config_file.read()
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as err:
        raise ConfigFileParseError(f"Unable to decode {path}: {err}", path) from err
    except OSError as err:
        raise ConfigIOError(f"Unable to read {path}: {err}", path) from err

    try:
        data = toml.loads(raw_config)
    except toml.TomlDecodeError as err:
        raise ConfigFileParseError(f"Unable to parse {path}: {err}", path) from err

    try:
        return document_class.from_formatted_dict(data)
    except KeyError as err:
        raise ConfigFileParseError(f"Unable to parse {path}: missing field {err}", path) from err
    except (TypeError, ValueError, MultiaddrError) as err:
        raise ConfigFileParseError(f"Unable to parse {path}: {err}", path) from err
