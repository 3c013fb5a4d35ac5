"""
Contract Validation Module

Модуль для валидации JSON контрактов событий аудита.
"""

from .validators import (
    EVENT_SCHEMAS,
    ContractValidator,
    EventContractValidator,
    SchemaLoader,
    validate_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "EventContractValidator",
    # Constants
    "EVENT_SCHEMAS",
    # Functions
    "validate_event",
]
