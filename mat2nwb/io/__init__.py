# mat2nwb/io/__init__.py
"""
File handling for mat2nwb: MAT readers in, NWB writer out.
"""

from .load import load_records
from .mat_reader import HdfMatReader, MatReader, ScipyMatReader, open_reader
from .nwb_writer import NwbAssembler

__all__ = [
    "load_records",
    "HdfMatReader",
    "MatReader",
    "ScipyMatReader",
    "open_reader",
    "NwbAssembler",
]
