# mat2nwb/core/naming.py
"""
Output names for acquisition entries.

Recordings exported from one MATLAB session usually share a naming
convention ("expA_ChR2", "expA_Lick_times", ...). The shared leading part
is detected once per file and stripped from every emitted name.
"""
from __future__ import annotations

from functools import reduce
from typing import Iterable

from .record import ChannelRecord

SEPARATOR = "_"

# Suffix marking event channels; names carrying it keep their full remainder.
EVENT_SUFFIX = "_times"


def collect_names(records: Iterable[ChannelRecord], sep: str = SEPARATOR) -> list[str]:
    """Each record's name followed by its qualified sub-field names, in order."""
    names: list[str] = []
    for record in records:
        names.append(record.name)
        names.extend(record.qualified(f, sep) for f in record.fields)
    return names


def _shared(a: str, b: str) -> str:
    n = 0
    for x, y in zip(a, b):
        if x != y:
            break
        n += 1
    return a[:n]


def _narrow(prefix: str | None, name: str) -> str | None:
    # None is the accumulator's start; "" is terminal.
    if prefix is None:
        return name
    if not prefix:
        return prefix
    return _shared(prefix, name)


def raw_common_prefix(names: Iterable[str]) -> str:
    """Longest leading substring shared by every name, narrowed left to right."""
    return reduce(_narrow, names, None) or ""


def trim_to_word(prefix: str, sep: str = SEPARATOR) -> str:
    """Cut `prefix` after its last separator; no separator means no prefix."""
    cut = prefix.rfind(sep)
    if cut < 0:
        return ""
    return prefix[: cut + len(sep)]


def common_prefix(names: Iterable[str], sep: str = SEPARATOR) -> str:
    return trim_to_word(raw_common_prefix(names), sep)


def output_name(
    full_name: str,
    prefix: str,
    *,
    sep: str = SEPARATOR,
    event_suffix: str = EVENT_SUFFIX,
) -> str:
    """
    Strip `prefix` from `full_name`.

    Event channels (ending in `event_suffix`) keep the whole remainder;
    anything else keeps only its last separator-delimited segment. Names
    that do not start with `prefix` are returned unchanged.
    """
    if not full_name.startswith(prefix):
        return full_name

    stripped = full_name[len(prefix):]
    if stripped.startswith(sep):
        stripped = stripped[len(sep):]

    if stripped.endswith(event_suffix):
        name = stripped
    else:
        name = stripped.split(sep)[-1]
    return name or full_name
