"""Metadata and templating exceptions."""


class MetadataError(Exception):
    """Base class for all pyqt-metadata errors."""


class RegistryError(MetadataError):
    """Raised when a template registry cannot be built."""


class MissingFallbackTemplate(RegistryError):
    """Raised when a registry has no universal ``of_type=object`` template."""


class InvalidTemplate(MetadataError):
    """Raised when a template string cannot be parsed."""


class NoTemplateMatch(MetadataError):
    """Raised when no registered template applies to a type."""


class UnresolvedPlaceholder(MetadataError):
    """Raised when a placeholder has no annotation or provider value."""

    def __init__(self, token: str, message: str):
        super().__init__(message)
        self.token = token


class AmbiguousTemplate(MetadataError):
    """Raised when two templates share the same registration index.

    Tie-breaking by registration order makes this impossible for registries
    built by TemplateRegistryBuilder, so seeing it means the registry itself
    was constructed incorrectly.
    """
