"""
Abstract base class for enum-driven polymorphic dispatch services.

Services using this pattern:
1. Define an enum of strategies (e.g. where a placeholder value comes from)
2. Map each enum value to a handler method
3. Determine the strategy from the input
4. Dispatch to the matching handler

Used by PlaceholderValueService (ValueSource enum).

Example:
    class Source(Enum):
        ANNOTATION = "annotation"
        PROVIDER = "provider"

    class SourceService(EnumDispatchService[Source]):
        def __init__(self):
            super().__init__()
            self._register_handlers({
                Source.ANNOTATION: self._from_annotation,
                Source.PROVIDER: self._from_provider,
            })

        def _determine_strategy(self, context, **kwargs) -> Source:
            return Source.ANNOTATION if context.annotation else Source.PROVIDER
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TypeVar, Generic, Dict, Callable, Any
import logging

logger = logging.getLogger(__name__)

# Type variable for the strategy enum
StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """
    Abstract base class for services using enum-driven polymorphic dispatch.

    Subclasses must:
    1. Register handlers in __init__() using _register_handlers()
    2. Implement _determine_strategy() to select the strategy for an input
    """

    def __init__(self):
        self._handlers: Dict[StrategyEnum, Callable] = {}

    def _register_handlers(self, handlers: Dict[StrategyEnum, Callable]) -> None:
        """
        Register strategy handlers.

        Raises:
            ValueError: If handlers dict is empty
        """
        if not handlers:
            raise ValueError(f"{self.__class__.__name__}: Handler registry cannot be empty")

        self._handlers = handlers
        logger.debug(f"{self.__class__.__name__}: Registered {len(handlers)} handlers")

    @abstractmethod
    def _determine_strategy(self, *args, **kwargs) -> StrategyEnum:
        """Determine which strategy to use based on input."""
        pass

    def dispatch(self, *args, **kwargs) -> Any:
        """
        Dispatch to the handler of the determined strategy.

        Only the first positional argument (the context) and keyword
        arguments are forwarded to the handler.

        Raises:
            KeyError: If strategy is not registered in handlers
        """
        strategy = self._determine_strategy(*args, **kwargs)

        if strategy not in self._handlers:
            raise KeyError(
                f"{self.__class__.__name__}: No handler registered for strategy {strategy}. "
                f"Available strategies: {list(self._handlers.keys())}"
            )
        handler = self._handlers[strategy]
        logger.debug(f"{self.__class__.__name__}: Dispatching to {strategy.value} handler")

        handler_args = args[:1] if args else ()
        return handler(*handler_args, **kwargs)

    def get_registered_strategies(self) -> list[StrategyEnum]:
        return list(self._handlers.keys())

    def has_strategy(self, strategy: StrategyEnum) -> bool:
        return strategy in self._handlers
