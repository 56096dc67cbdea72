# mat2nwb/io/load.py
from __future__ import annotations

import logging
from pathlib import Path

from scipy.io.matlab import MatReadError

from mat2nwb.io.mat_reader import open_reader, read_records
from mat2nwb.core import ChannelRecord, LoadError, SourceNotFound

logger = logging.getLogger(__name__)


def load_records(path: str | Path) -> dict[str, ChannelRecord]:
    """
    Read every top-level variable of a MAT file as a ChannelRecord.

    The returned dict preserves discovery order.

    Raises
    ------
    SourceNotFound
        If `path` does not exist.
    LoadError
        If the file cannot be parsed or holds no variables.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFound(f"File not found: {path}")

    try:
        reader = open_reader(str(path))
        records = read_records(reader)
    except (MatReadError, ValueError, OSError, NotImplementedError, TypeError, IndexError) as e:
        raise LoadError(f"Could not read {path}: {e}") from e

    if not records:
        raise LoadError(f"{path} contains no variables.")

    logger.info("Loaded %d record(s) from %s", len(records), path)
    return records
