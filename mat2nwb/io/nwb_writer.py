# mat2nwb/io/nwb_writer.py
"""
NWB assembly and export.

Classified channels are registered under the file's acquisition group, one
``pynwb.TimeSeries`` per channel, and written with ``NWBHDF5IO``. Data is
gzip-compressed through hdmf's ``H5DataIO``.

Export goes to a temporary sibling file that replaces the destination only
once the write has completed, so a failed export never leaves a truncated
.nwb file behind.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

import numpy as np
from hdmf.backends.hdf5.h5_utils import H5DataIO
from pynwb import NWBFile, NWBHDF5IO, TimeSeries
from pynwb.file import Subject

from mat2nwb.config import DEFAULT_COMPRESSION_LEVEL, DEFAULT_UNIT
from mat2nwb.core import ClassifiedChannel, ExportError, SessionMeta

logger = logging.getLogger(__name__)

_PARTIAL_SUFFIX = ".partial"


class NwbAssembler:
    """Collects classified channels and writes them as one NWB file.

    Entries are keyed by output name; registering a name twice replaces
    the earlier entry (last write wins) and logs a warning.
    """

    def __init__(
        self,
        session: SessionMeta,
        *,
        unit: str = DEFAULT_UNIT,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    ):
        self.session = session
        self.unit = unit
        self.compression_level = compression_level
        self._entries: dict[str, ClassifiedChannel] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> ClassifiedChannel:
        return self._entries[name]

    def add(self, channel: ClassifiedChannel) -> None:
        name = channel.output_name
        previous = self._entries.get(name)
        if previous is not None:
            logger.warning(
                "Output name '%s' from '%s' replaces the entry from '%s'",
                name,
                channel.source_name,
                previous.source_name,
            )
            # Re-insert so the surviving entry takes the latest position.
            del self._entries[name]
        self._entries[name] = channel

    # ------------------------------------------------------------------
    # NWB construction
    # ------------------------------------------------------------------
    def _wrap(self, data: np.ndarray):
        if self.compression_level <= 0:
            return data
        return H5DataIO(data=data, compression="gzip", compression_opts=self.compression_level)

    def time_series(self, name: str, channel: ClassifiedChannel) -> TimeSeries:
        data = self._wrap(channel.time_first())
        sampling = channel.sampling
        if sampling.is_regular:
            return TimeSeries(
                name=name,
                data=data,
                unit=self.unit,
                starting_time=sampling.start_time,
                rate=sampling.rate,
                description=channel.description,
            )
        return TimeSeries(
            name=name,
            data=data,
            unit=self.unit,
            timestamps=sampling.timestamps,
            description=channel.description,
        )

    def build(self) -> NWBFile:
        """Create a fresh NWBFile holding every registered entry."""
        s = self.session
        nwbfile = NWBFile(
            session_description=s.description,
            identifier=s.identifier,
            session_start_time=s.session_start_time,
            timestamps_reference_time=s.timestamps_reference_time,
            experimenter=s.experimenter,
            session_id=s.session_id,
            institution=s.institution,
            notes=s.notes,
            subject=Subject(subject_id=s.subject_id) if s.subject_id else None,
        )
        for name, channel in self._entries.items():
            nwbfile.add_acquisition(self.time_series(name, channel))
        return nwbfile

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(self, path: str | Path, *, raise_errors: bool = False) -> Path | None:
        """
        Write the NWB file to `path`.

        Returns the written path, or None when the export failed. With
        raise_errors=True a failure raises ExportError instead.
        """
        path = Path(path)
        partial = path.with_name(path.name + _PARTIAL_SUFFIX)

        try:
            nwbfile = self.build()
            path.parent.mkdir(parents=True, exist_ok=True)
            with NWBHDF5IO(str(partial), "w") as io:
                io.write(nwbfile)
            os.replace(partial, path)
        except Exception as e:
            partial.unlink(missing_ok=True)
            logger.error("Error exporting NWB file %s: %s", path, e)
            if raise_errors:
                raise ExportError(f"Could not export {path}: {e}") from e
            return None

        logger.info("Successfully exported NWB file to: %s", path)
        return path
