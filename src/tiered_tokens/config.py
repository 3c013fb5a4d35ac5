"""
Config — Конфигурация движка эмиссии

EngineConfig — неизменяемые параметры движка (frozen dataclass).
LogConfig — параметры логирования (pydantic, загружается из dict/env).
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from tiered_tokens.core.domain.identity import ENGINE_IDENTITY_DEFAULT
from tiered_tokens.core.math.checked_uint import UINT_BITS_DEFAULT


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация движка.

    - uint_bits: разрядность беззнаковой арифметики (256)
    - token_decimals: decimals для новых токенов (18)
    - validate_event_contracts: проверять события против JSON Schema
    - engine_identity: идентичность оркестратора, единственного minter'а
    """
    uint_bits: int = UINT_BITS_DEFAULT
    token_decimals: int = 18
    validate_event_contracts: bool = True
    engine_identity: str = ENGINE_IDENTITY_DEFAULT

    def __post_init__(self):
        if self.uint_bits <= 0:
            raise ValueError(f"uint_bits must be positive, got {self.uint_bits}")
        if not 0 <= self.token_decimals <= 36:
            raise ValueError(f"token_decimals must be in [0, 36], got {self.token_decimals}")


class LogConfig(BaseModel):
    level: str = Field(default="INFO", description="Минимальный уровень loguru")
    sink: Optional[str] = Field(default=None, description="Файл логов; None — stderr")
    rotation: str = "1 day"
    retention: str = "30 days"
    serialize: bool = Field(default=False, description="JSON-формат записей")
