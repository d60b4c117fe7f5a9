"""Tick Data Feed - historical tick retrieval from vendor hour files.

Provides:
- Dukascopy .bi5 tick download and decoding (one file per instrument-hour)
- Lazy tick stream with per-hour fault isolation
- pandas DataFrame view and sanity checks of decoded ticks
"""

__version__ = "0.1.0"

# Expose main submodules
from . import dukascopy

__all__ = ["dukascopy", "__version__"]
