"""
Events — Модели событий аудита

Immutable Pydantic модели событий движка. События — долговременный
audit trail: потребители, которым нужна история, индексируют события,
а не опрашивают состояние.

sequence присваивается журналом событий при append (глобальный порядок).
Сериализованное событие соответствует JSON Schema контракту
(core/contracts/schema/<event>.json).
"""

import time
from enum import Enum
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr


# =============================================================================
# ENUMS
# =============================================================================


class EventType(str, Enum):
    """Тип события"""

    TOKEN_CREATED = "TokenCreated"
    TIER_ADDED = "TierAdded"
    TOKENS_MINTED = "TokensMinted"
    TOKENS_BURNED = "TokensBurned"
    TRANSFER = "Transfer"
    APPROVAL = "Approval"


# =============================================================================
# BASE EVENT
# =============================================================================


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenEvent(BaseModel):
    """
    Базовое событие.

    sequence == 0 означает «ещё не записано в журнал».
    """

    sequence: StrictInt = Field(default=0, ge=0, description="Глобальный порядковый номер")
    token: StrictStr = Field(..., min_length=1, description="Адрес токена")
    ts_utc_ms: StrictInt = Field(default_factory=_now_ms, gt=0, description="Время события (UTC, ms)")

    model_config = {"frozen": True}

    def with_sequence(self, sequence: int) -> "TokenEvent":
        """Копия события с присвоенным sequence."""
        return self.model_copy(update={"sequence": sequence})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


# =============================================================================
# EVENT MODELS
# =============================================================================


class TokenCreated(TokenEvent):
    """Создатель зарегистрировал токен."""

    event_type: Literal["TokenCreated"] = "TokenCreated"
    creator: StrictStr = Field(..., min_length=1)
    name: StrictStr = Field(..., min_length=1)
    symbol: StrictStr = Field(..., min_length=1)


class TierAdded(TokenEvent):
    """Записан новый слот Tier Ledger."""

    event_type: Literal["TierAdded"] = "TierAdded"
    tier_id: StrictInt = Field(..., ge=0)
    name: StrictStr
    supply: StrictInt = Field(..., ge=0)
    price: StrictInt = Field(..., ge=0)


class TokensMinted(TokenEvent):
    """Эмиссия по уровню."""

    event_type: Literal["TokensMinted"] = "TokensMinted"
    tier_id: StrictInt = Field(..., ge=0)
    recipient: StrictStr = Field(..., min_length=1)
    amount: StrictInt = Field(..., ge=0)
    price: StrictInt = Field(..., ge=0)
    attached_value: StrictInt = Field(..., ge=0)


class TokensBurned(TokenEvent):
    """Сжигание с баланса владельца."""

    event_type: Literal["TokensBurned"] = "TokensBurned"
    holder: StrictStr = Field(..., min_length=1)
    amount: StrictInt = Field(..., ge=0)


class Transfer(TokenEvent):
    """Перемещение баланса (mint: sender = ZERO_ADDRESS, burn: recipient = ZERO_ADDRESS)."""

    event_type: Literal["Transfer"] = "Transfer"
    sender: StrictStr = Field(..., min_length=1)
    recipient: StrictStr = Field(..., min_length=1)
    amount: StrictInt = Field(..., ge=0)


class Approval(TokenEvent):
    """Установка allowance."""

    event_type: Literal["Approval"] = "Approval"
    owner: StrictStr = Field(..., min_length=1)
    spender: StrictStr = Field(..., min_length=1)
    amount: StrictInt = Field(..., ge=0)
