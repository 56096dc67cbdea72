# mat2nwb/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mat2nwb.core import REGULARITY_TOLERANCE, UsageError
from mat2nwb.core.metadata import (
    DEFAULT_EXPERIMENTER,
    DEFAULT_INSTITUTION,
    DEFAULT_SESSION_DESCRIPTION,
)

DEFAULT_UNIT = "unknown"
DEFAULT_COMPRESSION_LEVEL = 3


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """
    Settings for one conversion run.

    - session_description / experimenter / institution: NWB session fields
    - unit: unit label written on every TimeSeries
    - compression_level: gzip level for data (0 disables compression)
    - tolerance: spacing spread under which timestamps count as regular
    - output_dir: where the .nwb file goes (None: current directory)
    - raise_errors: propagate ExportError instead of returning None
    """
    session_description: str = DEFAULT_SESSION_DESCRIPTION
    experimenter: str = DEFAULT_EXPERIMENTER
    institution: str | None = DEFAULT_INSTITUTION
    unit: str = DEFAULT_UNIT
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    tolerance: float = REGULARITY_TOLERANCE
    output_dir: Path | None = field(default=None)
    raise_errors: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.unit, str) or not self.unit.strip():
            raise UsageError("unit must be a non-empty string.")
        if not 0 <= int(self.compression_level) <= 9:
            raise UsageError(
                f"compression_level must be between 0 and 9, got {self.compression_level}"
            )
        if not self.tolerance > 0:
            raise UsageError(f"tolerance must be positive, got {self.tolerance}")
        if self.output_dir is not None and not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        # Blank CLI arguments fall back to the defaults.
        if not self.session_description:
            object.__setattr__(self, "session_description", DEFAULT_SESSION_DESCRIPTION)
        if not self.experimenter:
            object.__setattr__(self, "experimenter", DEFAULT_EXPERIMENTER)

    def destination(self, file_name: str) -> Path:
        return (self.output_dir or Path.cwd()) / file_name
