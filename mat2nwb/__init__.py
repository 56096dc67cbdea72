# mat2nwb/__init__.py
"""
mat2nwb: convert MATLAB .mat recordings into Neurodata Without Borders files.
"""

__version__ = "0.1.0"

from mat2nwb.config import ConversionOptions
from mat2nwb.convert import ConversionResult, convert

__all__ = ["ConversionOptions", "ConversionResult", "convert", "__version__"]
