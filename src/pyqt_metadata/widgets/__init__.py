"""
PyQt6 widgets for displaying rendered metadata.
"""

from .metadata_label import MetadataLabel

__all__ = [
    "MetadataLabel",
]
