"""Calculation engine of the renovation affordability planner.

Pure functions over ``villaplan.models`` snapshots; nothing here touches
Streamlit or the filesystem.
"""
from importlib import metadata

__all__ = ["__version__"]

try:
    __version__ = metadata.version("villaplan")
except metadata.PackageNotFoundError:  # running from a source checkout
    __version__ = "0.1.0"
