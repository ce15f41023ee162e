"""
phonestatic - static lookup tables generated from phone-number metadata.

This package reads the metadata database shipped with `phonenumbers`,
deduplicates it and emits a Python module that answers id, calling-code and
region lookups without building the database at import time.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
