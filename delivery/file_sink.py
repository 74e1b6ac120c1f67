"""
Write rendered image bytes to a file, or to stdout when the path is "-".
"""

import logging
import sys
from pathlib import Path

from api.errors import SinkError

logger = logging.getLogger(__name__)

STDOUT_PATH = "-"


def write_file(data: bytes, path: str | Path) -> None:
    """
    Write data to path. "-" writes to standard output.

    Raises:
        SinkError: the file could not be created or written.
    """
    try:
        if str(path) == STDOUT_PATH:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
            return
        Path(path).write_bytes(data)
    except OSError as e:
        raise SinkError(f"failed writing {path}: {e}") from e
    logger.debug("wrote %s bytes to %s", len(data), path)
