"""
Service layer.

Reusable dispatch services with no Qt dependencies.
"""

from .enum_dispatch_service import EnumDispatchService

__all__ = [
    "EnumDispatchService",
]
