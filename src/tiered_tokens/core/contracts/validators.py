"""
JSON Schema Contract Validators

Модуль для валидации событий аудита согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы (core/contracts/schema/):
- token_created.json
- tier_added.json
- tokens_minted.json
- tokens_burned.json
- transfer.json
- approval.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator

from tiered_tokens.core.domain.events import EventType


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом (core/contracts/schema/).
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'tokens_minted')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# Соответствие типа события имени схемы
EVENT_SCHEMAS: Dict[str, str] = {
    EventType.TOKEN_CREATED.value: "token_created",
    EventType.TIER_ADDED.value: "tier_added",
    EventType.TOKENS_MINTED.value: "tokens_minted",
    EventType.TOKENS_BURNED.value: "tokens_burned",
    EventType.TRANSFER.value: "transfer",
    EventType.APPROVAL.value: "approval",
}


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class EventContractValidator(ContractValidator):
    """
    Валидатор события по его event_type.

    Валидаторы кэшируются: схема каждого типа загружается один раз.
    """

    _cache: Dict[str, "EventContractValidator"] = {}

    def __init__(self, event_type: str):
        if event_type not in EVENT_SCHEMAS:
            raise ValueError(f"Unknown event type: {event_type}")
        super().__init__(EVENT_SCHEMAS[event_type])
        self.event_type = event_type

    @classmethod
    def for_event_type(cls, event_type: str) -> "EventContractValidator":
        key = str(getattr(event_type, "value", event_type))
        validator = cls._cache.get(key)
        if validator is None:
            validator = cls(key)
            cls._cache[key] = validator
        return validator


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_event(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованного события.

    Args:
        data: Событие как dict (TokenEvent.to_dict())

    Raises:
        ValueError: Если event_type отсутствует или неизвестен
        ValidationError: Если данные не соответствуют схеме
    """
    event_type = data.get("event_type")
    if event_type is None:
        raise ValueError("event_type is required")
    EventContractValidator.for_event_type(event_type).validate(data)
