"""
Provider contracts and application configuration hooks.
"""

from .metadata_provider import MetadataProvider
from .metadata_config import MetadataConfig, set_metadata_config, get_metadata_config

__all__ = [
    "MetadataProvider",
    "MetadataConfig",
    "set_metadata_config",
    "get_metadata_config",
]
