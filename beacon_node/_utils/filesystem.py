import os
from pathlib import Path

from beacon_node.exceptions import NoHomeDirectory


def get_home() -> Path:
    try:
        return Path(os.environ['HOME'])
    except KeyError:
        raise NoHomeDirectory(
            'Unable to find a home directory for the datadir: $HOME environment variable '
            'not set. Use `--datadir` to specify a directory'
        )
