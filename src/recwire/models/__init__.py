"""Pydantic record modeling for recwire.

This module provides the Record base class, the generator that turns record
descriptors into Record subclasses, and field annotation helpers.
"""

from __future__ import annotations

from .base import Record, make_record_class
from .fields import BoundedInt, round_float32

__all__ = [
    "Record",
    "make_record_class",
    "BoundedInt",
    "round_float32",
]
