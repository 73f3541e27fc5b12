"""Base configuration for metadata templating.

Provides hooks for applications to customize registry building and
rendering behavior.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class MetadataConfig:
    """Configuration for template registries and rendering.

    Attributes:
        default_attribute: Annotation attribute read when a placeholder names
            no attribute
        require_fallback: Whether registries must contain a universal
            ``of_type=object`` template
        validate_templates: Whether placeholders naming known annotation
            kinds are checked against their attributes at build time
        label_word_wrap: Word wrap for rendered MetadataLabel widgets
        label_open_external_links: Whether links in rendered labels open in
            the system browser
    """

    default_attribute: str = "value"
    require_fallback: bool = True
    validate_templates: bool = True
    label_word_wrap: bool = True
    label_open_external_links: bool = True


# Global config instance (set by application)
_metadata_config: Optional[MetadataConfig] = None


def set_metadata_config(config: Optional[MetadataConfig]) -> None:
    """Set the global metadata configuration.

    Args:
        config: MetadataConfig instance, or None to restore defaults
    """
    global _metadata_config
    _metadata_config = config


def get_metadata_config() -> MetadataConfig:
    """Get the current metadata configuration.

    Returns:
        Current MetadataConfig or default if not set
    """
    if _metadata_config is None:
        return MetadataConfig()
    return _metadata_config
