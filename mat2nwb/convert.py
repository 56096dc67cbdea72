# mat2nwb/convert.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Iterable

from mat2nwb.config import ConversionOptions
from mat2nwb.core import (
    ChannelRecord,
    ClassificationSkipped,
    ClassifiedChannel,
    SessionMeta,
    SourceNotFound,
    classify_record,
    collect_names,
    common_prefix,
    earliest_timestamp,
    output_name,
    parse_file_name,
)
from mat2nwb.io.load import load_records
from mat2nwb.io.nwb_writer import NwbAssembler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of one conversion run.

    `written` is None when the export failed; `destination` is where the
    file was meant to go either way.
    """
    source: Path
    destination: Path
    written: Path | None
    prefix: str = ""
    channels: tuple[ClassifiedChannel, ...] = field(default=(), repr=False)
    skipped: tuple[ClassificationSkipped, ...] = field(default=(), repr=False)

    @property
    def ok(self) -> bool:
        return self.written is not None

    @property
    def output_names(self) -> list[str]:
        return [ch.output_name for ch in self.channels]


def destination_for(source: str | Path, options: ConversionOptions | None = None) -> Path:
    """Where the .nwb file for `source` will be written."""
    options = options or ConversionOptions()
    return options.destination(parse_file_name(source).nwb_name)


def classify_records(
    records: Iterable[ChannelRecord],
    prefix: str,
    *,
    tolerance: float,
) -> tuple[list[ClassifiedChannel], list[ClassificationSkipped]]:
    """Classify every record; skipped channels are collected, not raised."""
    channels: list[ClassifiedChannel] = []
    skipped: list[ClassificationSkipped] = []

    for record in records:
        try:
            channel = classify_record(record, tolerance=tolerance)
        except ClassificationSkipped as skip:
            logger.warning("Skipping %s (%s)", skip, record.source or record.name)
            skipped.append(skip)
            continue

        channel = channel.rename(output_name(channel.source_name, prefix))
        for note in channel.notes:
            logger.debug("%s: %s", channel.source_name, note)
        logger.info(
            "FIELD %s <- %s (%s, %s)",
            channel.output_name,
            channel.source_name,
            f"{channel.time_field}/{channel.value_field}" if not channel.fallback
            else f"fallback on '{channel.value_field}'",
            "regular" if channel.sampling.is_regular else "timestamps",
        )
        channels.append(channel)

    return channels, skipped


def convert(
    source: str | Path,
    session_description: str | None = None,
    experimenter: str | None = None,
    *,
    options: ConversionOptions | None = None,
    now: datetime | None = None,
) -> ConversionResult:
    """
    Convert one MAT file into an NWB file.

    Raises
    ------
    SourceNotFound
        If `source` does not exist. Nothing is written.
    InvalidFileName
        If the file name does not follow animal_[signal_]session_tag.
    LoadError
        If the file cannot be read as channel records.
    ExportError
        Only with options.raise_errors; otherwise a failed export is
        reported through ConversionResult.written being None.
    """
    source = Path(source)
    if not source.is_file():
        raise SourceNotFound(f"File not found: {source}")

    options = options or ConversionOptions()
    overrides = {}
    if session_description:
        overrides["session_description"] = session_description
    if experimenter:
        overrides["experimenter"] = experimenter
    if overrides:
        options = replace(options, **overrides)

    parts = parse_file_name(source)
    records = load_records(source)

    prefix = common_prefix(collect_names(records.values()))
    logger.debug("Common prefix for %s: %r", source.name, prefix)

    channels, skipped = classify_records(
        records.values(), prefix, tolerance=options.tolerance
    )
    if not channels:
        logger.warning("No channel of %s could be converted", source)

    session = SessionMeta.from_file_name(
        parts,
        earliest=earliest_timestamp(records.values()),
        description=options.session_description,
        experimenter=options.experimenter,
        institution=options.institution,
        now=now,
    )

    assembler = NwbAssembler(
        session,
        unit=options.unit,
        compression_level=options.compression_level,
    )
    for channel in channels:
        assembler.add(channel)

    destination = options.destination(parts.nwb_name)
    written = assembler.export(destination, raise_errors=options.raise_errors)

    return ConversionResult(
        source=source,
        destination=destination,
        written=written,
        prefix=prefix,
        channels=tuple(channels),
        skipped=tuple(skipped),
    )
