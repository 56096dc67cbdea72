# mat2nwb/core/metadata.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from .exceptions import InvalidFileName, UsageError

DEFAULT_SESSION_DESCRIPTION = "Converted MATLAB session"
DEFAULT_EXPERIMENTER = "Unknown"
DEFAULT_INSTITUTION = "Whitehead Institute"

NWB_SUFFIX = ".nwb"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileNameParts:
    """
    Components of a source file name: animal_[signal_]session_tag.ext

    Examples
    --------
    "mouse1_VLS_42_control.mat" -> animal="mouse1", signal="VLS", session="42", tag="control"
    "Jack_42_sham.mat"          -> animal="Jack", signal="", session="42", tag="sham"
    """
    animal: str
    signal: str
    session: str
    tag: str

    def __post_init__(self) -> None:
        if not (self.animal and self.session and self.tag):
            raise InvalidFileName("Animal, session, and tag components must be non-empty")

    @property
    def stem(self) -> str:
        parts = [self.animal, self.signal, self.session, self.tag]
        return "_".join(p for p in parts if p)

    @property
    def nwb_name(self) -> str:
        return self.stem + NWB_SUFFIX

    @property
    def notes(self) -> str:
        return f"Signal Type: {self.signal}, Tag: {self.tag}"


def parse_file_name(path: str | Path) -> FileNameParts:
    stem = Path(path).stem
    parts = stem.split("_")

    if len(parts) == 4:
        animal, signal, session, tag = parts
    elif len(parts) == 3:
        animal, session, tag = parts
        signal = ""
    else:
        raise InvalidFileName(
            f"Invalid filename format '{Path(path).name}'. "
            "Expected: animalname_[signal_]session_tag"
        )
    return FileNameParts(animal=animal, signal=signal, session=session, tag=tag)


def session_start_from_offset(
    earliest: float | None,
    *,
    now: datetime | None = None,
) -> datetime:
    """
    Local midnight of the conversion day, shifted by the earliest recorded
    timestamp (seconds). MATLAB files carry no wall-clock date.
    """
    now = now or datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if earliest is None:
        return midnight
    try:
        return midnight + timedelta(seconds=float(earliest))
    except (OverflowError, ValueError):
        logger.warning(
            "Earliest timestamp %r is not a usable offset in seconds; "
            "session start set to midnight",
            earliest,
        )
        return midnight


@dataclass(frozen=True, slots=True)
class SessionMeta:
    """
    Session-level metadata written into the NWB file.
    """
    identifier: str
    session_start_time: datetime
    description: str = DEFAULT_SESSION_DESCRIPTION
    experimenter: str = DEFAULT_EXPERIMENTER
    subject_id: str | None = None
    session_id: str | None = None
    institution: str | None = DEFAULT_INSTITUTION
    notes: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise UsageError("SessionMeta.identifier must be a non-empty string.")
        if self.session_start_time.tzinfo is None:
            raise UsageError("SessionMeta.session_start_time must be timezone-aware.")

    @property
    def timestamps_reference_time(self) -> datetime:
        return self.session_start_time

    @classmethod
    def from_file_name(
        cls,
        parts: FileNameParts,
        *,
        earliest: float | None,
        description: str | None = None,
        experimenter: str | None = None,
        institution: str | None = DEFAULT_INSTITUTION,
        now: datetime | None = None,
    ) -> "SessionMeta":
        return cls(
            identifier=parts.stem,
            session_start_time=session_start_from_offset(earliest, now=now),
            description=description or DEFAULT_SESSION_DESCRIPTION,
            experimenter=experimenter or DEFAULT_EXPERIMENTER,
            subject_id=parts.animal,
            session_id=parts.session,
            institution=institution,
            notes=parts.notes,
        )
